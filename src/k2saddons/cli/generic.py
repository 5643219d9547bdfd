"""Generic addon commands: `<command> <addon> [flags]` built from manifests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

import click
from click.core import ParameterSource

from k2saddons.addons.models import Addon, CliConfig, CliFlag
from k2saddons.addons.scalars import Scalar, ScalarKind
from k2saddons.core.errors import ManifestError, UnsupportedFlagDefaultError

logger = logging.getLogger(__name__)

OUTPUT_FLAG_NAME = "output"
OUTPUT_FLAG_SHORTHAND = "o"
OUTPUT_FLAG_HELP = "Show all logs in terminal"

# (ctx, addon, command name, explicitly set flag values, show logs)
RunAddonCommand = Callable[[click.Context, Addon, str, dict[str, Scalar], bool], None]

_CLICK_TYPES = {
    ScalarKind.STRING: click.STRING,
    ScalarKind.INTEGER: click.INT,
    ScalarKind.FLOAT: click.FLOAT,
}


def flag_to_option(flag: CliFlag) -> click.Option:
    """Build a click option whose type follows the flag's default value."""
    kind = flag.kind
    if kind is None:
        raise UnsupportedFlagDefaultError(flag.name, flag.default)
    if flag.name == OUTPUT_FLAG_NAME:
        raise ManifestError(f"flag name '{OUTPUT_FLAG_NAME}' is reserved")
    if flag.shorthand == OUTPUT_FLAG_SHORTHAND:
        raise ManifestError(
            f"shorthand '{OUTPUT_FLAG_SHORTHAND}' of flag '{flag.name}' is reserved for '--{OUTPUT_FLAG_NAME}'"
        )

    # bool flags get a --no-<name> switch so a true default can be turned off
    if kind is ScalarKind.BOOLEAN:
        decls = [f"--{flag.name}/--no-{flag.name}"]
    else:
        decls = [f"--{flag.name}"]
    if flag.shorthand:
        decls.append(f"-{flag.shorthand}")
    help_text = flag.full_description()

    if kind is ScalarKind.BOOLEAN:
        return click.Option(decls, is_flag=True, default=flag.default, help=help_text)
    return click.Option(
        decls,
        type=_CLICK_TYPES[kind],
        default=flag.default,
        show_default=True,
        help=help_text,
    )


def examples_epilog(cli: CliConfig | None) -> str | None:
    """Examples section for help output; '\\b' keeps click from re-wrapping."""
    if cli is None or not cli.examples:
        return None
    blocks = cli.examples_text.strip("\n").split("\n\n")
    return "Examples:\n\n" + "\n\n".join(f"\b\n{block}" for block in blocks)


def build_addon_command(addon: Addon, cmd_name: str, run: RunAddonCommand) -> click.Command:
    logger.debug("Creating sub-command '%s' for addon '%s'", cmd_name, addon.name)
    cmd_config = addon.spec.commands[cmd_name]
    flags = cmd_config.cli.flags if cmd_config.cli else ()

    options = [flag_to_option(f) for f in flags]
    flag_names = {opt.name: f.name for opt, f in zip(options, flags)}
    options.append(
        click.Option(
            [f"-{OUTPUT_FLAG_SHORTHAND}", f"--{OUTPUT_FLAG_NAME}"], is_flag=True, help=OUTPUT_FLAG_HELP
        )
    )

    @click.pass_context
    def callback(ctx: click.Context, **kwargs) -> None:
        values = {
            flag_names[param]: value
            for param, value in kwargs.items()
            if param in flag_names and ctx.get_parameter_source(param) is ParameterSource.COMMANDLINE
        }
        run(ctx, addon, cmd_name, values, bool(kwargs.get(OUTPUT_FLAG_NAME)))

    return click.Command(
        addon.name,
        params=options,
        callback=callback,
        help=f"Runs '{cmd_name}' for '{addon.name}' addon",
        short_help=addon.metadata.description or None,
        epilog=examples_epilog(cmd_config.cli),
    )


def build_generic_commands(addons: Iterable[Addon], run: RunAddonCommand) -> list[click.Group]:
    """One group per command name (sorted), with one sub-command per addon."""
    groups: dict[str, click.Group] = {}
    for addon in addons:
        if not addon.spec.commands:
            raise ManifestError(f"no cmd config found for addon '{addon.name}'")
        for cmd_name in addon.spec.commands:
            group = groups.get(cmd_name)
            if group is None:
                group = click.Group(cmd_name, help=f"Runs '{cmd_name}' for the specific addon")
                groups[cmd_name] = group
            group.add_command(build_addon_command(addon, cmd_name, run))
    return [groups[name] for name in sorted(groups)]

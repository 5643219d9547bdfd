"""CLI entry point: addon listing, status, export/import, validation and generic addon commands."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape

from .addons import (
    Addon,
    AddonRegistry,
    AddonStatus,
    EnabledAddons,
    ScriptCommand,
    build_export_command,
    build_import_command,
    build_script_command,
    load_addon_status,
    load_addons,
    load_enabled_addons,
    to_print_info,
    validate_addon_names,
)
from .addons.scalars import Scalar
from .cli import OUTPUT_FLAG_HELP, build_generic_commands
from .core.config import Config, load_config
from .core.errors import (
    AddonsError,
    AddonStatusError,
    CommandFailedError,
    ConstraintError,
    FunctionalityNotAvailableError,
    InvalidAddonNameError,
    SystemCorruptedError,
    SystemNotInstalledError,
)
from .core.log import LOGGER_NAME, setup_logging
from .core.setupinfo import SETUP_NAME_MULTI_VM, read_setup_config
from .core.utils import format_duration, short_path
from .powershell import PowerShellExecutor, ScriptExecutor
from .tui import AddonsPrinter, StatusPrinter

logger = logging.getLogger(LOGGER_NAME)

console = Console()
err_console = Console(stderr=True)

CMD_RESULT_TYPE = "CmdResult"
JSON_OUTPUT = "json"
GENERIC_COMMANDS_KEY = "k2saddons.generic_commands"


# ── Application state ───────────────────────────────────────────────


@dataclass
class AppState:
    config: Config
    registry: AddonRegistry
    executor: ScriptExecutor


def _state(ctx: click.Context) -> AppState:
    """Build config, logging, registry and executor once per invocation.

    Generic commands are resolved before the root callback runs, so the
    state is derived lazily from the root context's parsed options.
    """
    root = ctx.find_root()
    if isinstance(root.obj, AppState):
        return root.obj
    config = load_config(
        install_dir=root.params.get("install_dir"),
        verbose=bool(root.params.get("verbose")),
    )
    setup_logging(config, err_console)
    state = AppState(
        config=config,
        registry=AddonRegistry.from_config(config),
        executor=PowerShellExecutor(config),
    )
    root.obj = state
    return state


def _fail(e: AddonsError) -> NoReturn:
    """Errors are fatal: click prints the message and exits with status 1."""
    logger.debug("%s: %s", type(e).__name__, e)
    raise click.ClickException(str(e)) from e


class AddonsGroup(click.Group):
    """Root group merging static commands with the manifest-driven ones."""

    def _generic_commands(self, ctx: click.Context) -> dict[str, click.Command]:
        root = ctx.find_root()
        commands = root.meta.get(GENERIC_COMMANDS_KEY)
        if commands is None:
            state = _state(ctx)
            groups = build_generic_commands(state.registry.all_addons(), _run_addon_command)
            commands = {g.name: g for g in groups}
            root.meta[GENERIC_COMMANDS_KEY] = commands
        return commands

    def list_commands(self, ctx: click.Context) -> list[str]:
        names = super().list_commands(ctx)
        try:
            generic = self._generic_commands(ctx)
        except AddonsError as e:
            _fail(e)
        return names + [n for n in generic if n not in names]

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        try:
            return self._generic_commands(ctx).get(cmd_name)
        except AddonsError as e:
            _fail(e)

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except AddonsError as e:
            _fail(e)


# ── Script runners ──────────────────────────────────────────────────


def _raise_on_failure(result: dict) -> None:
    failure = result.get("error")
    if not failure:
        return
    if isinstance(failure, dict):
        raise CommandFailedError(
            str(failure.get("message") or "addon command failed"),
            code=str(failure.get("code") or ""),
            severity=failure.get("severity"),
        )
    raise CommandFailedError(str(failure))


def _run_script(
    state: AppState, script: ScriptCommand, label: str, reject_multi_vm: bool = False
) -> None:
    """Execute *script* for a CmdResult; a reported failure aborts the command."""
    start = time.monotonic()
    setup = read_setup_config(state.config.config_dir)
    if reject_multi_vm and setup.setup_name == SETUP_NAME_MULTI_VM:
        raise FunctionalityNotAvailableError(setup.setup_name)

    logger.info("Running addon script: %s", script.command_line())
    result = state.executor.execute_structured(script.path, CMD_RESULT_TYPE, script.params)
    _raise_on_failure(result)

    elapsed = format_duration(time.monotonic() - start)
    console.print(f"[green]'{escape(label)}' completed in {elapsed}[/green]")


def _run_addon_command(
    ctx: click.Context,
    addon: Addon,
    cmd_name: str,
    flag_values: dict[str, Scalar],
    show_logs: bool,
) -> None:
    state = _state(ctx)
    console.print(f"🤖 Running '{cmd_name}' for '{addon.name}' addon", markup=False)
    script = build_script_command(addon, cmd_name, flag_values, show_logs=show_logs)
    _run_script(state, script, f"addons {cmd_name} {addon.name}")


def _check_addon_names(state: AppState, activity: str, names) -> None:
    try:
        validate_addon_names(state.registry.all_addons(), activity, names)
    except InvalidAddonNameError as e:
        err_console.print(
            "Available addon names: " + ", ".join(e.valid_names),
            style="yellow",
            markup=False,
            soft_wrap=True,
        )
        raise


# ── Root group + static commands ────────────────────────────────────


@click.group(cls=AddonsGroup)
@click.option(
    "--install-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="K2s install directory (contains the 'addons' folder)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, install_dir: Path | None, verbose: bool):
    """K2s addons: list, inspect, export, import, validate and run addon commands."""
    _state(ctx)


@cli.command("ls")
@click.option(
    "-o",
    "--output",
    type=click.Choice([JSON_OUTPUT]),
    default=None,
    help="Output format modifier. Currently supported: 'json' for output as JSON structure",
)
@click.pass_context
def list_addons(ctx: click.Context, output: str | None):
    """List addons available for K2s."""
    state = _state(ctx)
    infos = to_print_info(state.registry.all_addons())

    try:
        if output == JSON_OUTPUT:
            enabled = load_enabled_addons(state.config, state.executor)
        else:
            with err_console.status("Gathering addons information..."):
                enabled = load_enabled_addons(state.config, state.executor)
    except SystemNotInstalledError as e:
        err_console.print(e.message, style="yellow", markup=False, soft_wrap=True)
        enabled = EnabledAddons()

    printer = AddonsPrinter(console)
    if output == JSON_OUTPUT:
        printer.print_addons_json(enabled.addons, infos)
    else:
        printer.print_addons(enabled.addons, infos)


@cli.command("validate")
@click.argument(
    "directory",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.pass_context
def validate_manifests(ctx: click.Context, directory: Path | None):
    """Validate every addon manifest below DIRECTORY (default: the addons folder)."""
    state = _state(ctx)
    root_dir = directory or state.config.addons_dir
    addons = load_addons(root_dir)

    problems: list[str] = []
    for addon in addons:
        if not addon.spec.commands:
            problems.append(f"{addon.name}: no commands defined")
        for cmd_name, cmd in addon.spec.commands.items():
            if cmd.cli is None:
                continue
            for flag in cmd.cli.flags:
                if flag.kind is None:
                    problems.append(f"{addon.name} {cmd_name} --{flag.name}: unsupported default")
                    continue
                try:
                    flag.full_description()
                except ConstraintError as e:
                    problems.append(f"{addon.name} {cmd_name} --{flag.name}: {e}")

    if problems:
        for problem in problems:
            console.print(f"  [red]error[/red] {escape(problem)}", soft_wrap=True)
        ctx.exit(1)

    console.print(
        f"[green]{len(addons)} addon manifest(s) valid[/green] in {escape(short_path(root_dir))}"
    )


@cli.command("status")
@click.argument("addon_name", metavar="ADDON")
@click.option(
    "-o",
    "--output",
    type=click.Choice([JSON_OUTPUT]),
    default=None,
    help="Output format modifier. Currently supported: 'json' for output as JSON structure",
)
@click.pass_context
def addon_status(ctx: click.Context, addon_name: str, output: str | None):
    """Print the status of ADDON."""
    state = _state(ctx)
    _check_addon_names(state, "status", [addon_name])
    addon = state.registry.get(addon_name)
    printer = StatusPrinter(console)

    if output == JSON_OUTPUT:
        # JSON mode reports failures in the payload and only sets the exit code
        try:
            read_setup_config(state.config.config_dir)
        except (SystemNotInstalledError, SystemCorruptedError) as e:
            printer.print_status_json(AddonStatus(addon.name), error_code=e.details["code"])
            logger.info("Status of '%s' not available: %s", addon.name, e)
            ctx.exit(1)
        status = load_addon_status(addon, state.executor)
        printer.print_status_json(status)
        if status.error is not None:
            logger.info("Status script of '%s' failed: %s", addon.name, status.error)
            ctx.exit(1)
        return

    read_setup_config(state.config.config_dir)
    with err_console.status("Loading addon status..."):
        status = load_addon_status(addon, state.executor)
    if status.error is not None:
        raise status.error
    if status.enabled is None:
        raise AddonStatusError(f"enabled/disabled info missing for '{addon.name}' addon")
    printer.print_status(status)


EXPORT_EPILOG = """Examples:

\b
  # Export addons 'dashboard' and 'metrics' to a folder
  k2s addons export dashboard metrics -d C:\\tmp

\b
  # Export all addons to a folder
  k2s addons export -d C:\\tmp
"""

IMPORT_EPILOG = """Examples:

\b
  # Import addons 'ingress-nginx' and 'dashboard' from an exported zip archive
  k2s addons import ingress-nginx dashboard -z C:\\tmp\\addons.zip

\b
  # Import all addons from an exported zip archive
  k2s addons import -z C:\\tmp\\addons.zip
"""


@cli.command("export", epilog=EXPORT_EPILOG)
@click.argument("names", nargs=-1, metavar="[ADDON]...")
@click.option("-d", "--directory", required=True, help="Directory for addon export")
@click.option("-p", "--proxy", default="", help="HTTP Proxy")
@click.option("-o", "--output", is_flag=True, help=OUTPUT_FLAG_HELP)
@click.pass_context
def export_addons(
    ctx: click.Context, names: tuple[str, ...], directory: str, proxy: str, output: bool
):
    """Export addons (all when no ADDON is given) to a directory."""
    state = _state(ctx)
    _check_addon_names(state, "export", names)
    script = build_export_command(
        state.config.addons_dir, names, directory, proxy=proxy, show_logs=output
    )
    _run_script(state, script, "addons export", reject_multi_vm=True)


@cli.command("import", epilog=IMPORT_EPILOG)
@click.argument("names", nargs=-1, metavar="[ADDON]...")
@click.option("-z", "--zip", "zip_file", required=True, help="Zip archive of exported addons")
@click.option("-o", "--output", is_flag=True, help=OUTPUT_FLAG_HELP)
@click.pass_context
def import_addons(ctx: click.Context, names: tuple[str, ...], zip_file: str, output: bool):
    """Import addons (all when no ADDON is given) from an exported zip archive."""
    state = _state(ctx)
    _check_addon_names(state, "import", names)
    script = build_import_command(state.config.addons_dir, names, zip_file, show_logs=output)
    _run_script(state, script, "addons import")


def main():
    cli(prog_name="k2s-addons")


if __name__ == "__main__":
    main()

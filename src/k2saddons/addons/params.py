"""Map validated CLI flag values onto addon script parameters."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from k2saddons.core.errors import ConstraintError, FlagValidationError, ManifestError
from k2saddons.core.utils import format_script_file_path

from .models import Addon, AddonCmd, CliConfig
from .scalars import Scalar, scalar_to_text

logger = logging.getLogger(__name__)

SHOW_LOGS_PARAM = "-ShowLogs"


@dataclass(frozen=True)
class ScriptCommand:
    path: Path
    params: tuple[str, ...] = field(default_factory=tuple)

    def command_line(self) -> str:
        return " ".join([format_script_file_path(self.path), *self.params])


def check_exclusion_groups(cli: CliConfig | None, set_flags: Mapping[str, Scalar]) -> None:
    """Reject invocations that set two flags of the same exclusion group."""
    if cli is None:
        return
    owners: dict[str, str] = {}
    for flag in cli.flags:
        if flag.exclusion_group is None or flag.name not in set_flags:
            continue
        other = owners.setdefault(flag.exclusion_group, flag.name)
        if other != flag.name:
            raise FlagValidationError(
                f"flags '{other}' and '{flag.name}' cannot be used together "
                f"(exclusion group '{flag.exclusion_group}')",
                flag.name,
            )


def to_script_param(cmd: AddonCmd, flag_name: str, value: Scalar) -> str | None:
    """Translate one set flag into a script parameter, or None if it is not mapped."""
    mapping = cmd.script.mapping_for(flag_name)
    if mapping is None:
        logger.warning(
            "CLI flag '%s' set, but missing parameter mapping in 'parameterMappings' "
            "of the addon manifest; not parameterized",
            flag_name,
        )
        return None

    if isinstance(value, bool):
        return f"-{mapping.script_parameter_name}" if value else None

    if cmd.cli is None:
        raise ManifestError(f"CLI config must not be nil for flag '{flag_name}'")
    flag = cmd.cli.flag(flag_name)
    if flag is None:
        raise ManifestError(f"flag config not found for flag '{flag_name}'")

    try:
        flag.validate(value)
    except ConstraintError as e:
        raise FlagValidationError(f"validation error for flag '{flag_name}': {e}", flag_name) from e

    return f"-{mapping.script_parameter_name} {scalar_to_text(value)}"


def build_script_command(
    addon: Addon,
    cmd_name: str,
    flag_values: Mapping[str, Scalar],
    show_logs: bool = False,
) -> ScriptCommand:
    """Build the script path and parameters for ``addons <cmd_name> <addon>``.

    *flag_values* holds only the flags the user set explicitly; they are
    processed in manifest declaration order.
    """
    cmd = addon.command(cmd_name)
    if cmd is None:
        raise ManifestError(f"addon '{addon.name}' has no command '{cmd_name}'")

    check_exclusion_groups(cmd.cli, flag_values)

    params: list[str] = [SHOW_LOGS_PARAM] if show_logs else []
    declared = [f.name for f in cmd.cli.flags] if cmd.cli else []
    ordered = [n for n in declared if n in flag_values]
    ordered += [n for n in flag_values if n not in declared]
    for name in ordered:
        param = to_script_param(cmd, name, flag_values[name])
        if param is not None:
            params.append(param)

    path = addon.directory / cmd.script.sub_path
    logger.debug("Script command for '%s %s': %s %s", cmd_name, addon.name, path, params)
    return ScriptCommand(path=path, params=tuple(params))

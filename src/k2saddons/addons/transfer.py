"""Export and import of addon artifacts through the catalog-wide scripts."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from k2saddons.core.errors import FlagValidationError, InvalidAddonNameError
from k2saddons.core.utils import escape_with_single_quotes

from .models import Addon
from .params import SHOW_LOGS_PARAM, ScriptCommand

logger = logging.getLogger(__name__)

EXPORT_SCRIPT = "Export.ps1"
IMPORT_SCRIPT = "Import.ps1"


def validate_addon_names(addons: Iterable[Addon], activity: str, names: Iterable[str]) -> None:
    """Every name must belong to a discovered addon."""
    valid = [a.name for a in addons]
    for name in names:
        if name not in valid:
            raise InvalidAddonNameError(name, activity, valid)


def _names_param(names: Sequence[str]) -> str:
    return "-Names " + ",".join(escape_with_single_quotes(n) for n in names)


def build_export_command(
    addons_dir: Path,
    names: Sequence[str],
    directory: str,
    proxy: str = "",
    show_logs: bool = False,
) -> ScriptCommand:
    """``Export.ps1``: the named addons, or ``-All`` when no name is given."""
    if not directory:
        raise FlagValidationError("no export path provided", "directory")

    params = [f"-ExportDir {escape_with_single_quotes(directory)}"]
    params.append(_names_param(names) if names else "-All")
    if show_logs:
        params.append(SHOW_LOGS_PARAM)
    if proxy:
        params.append(f"-Proxy {proxy}")
    return ScriptCommand(path=addons_dir / EXPORT_SCRIPT, params=tuple(params))


def build_import_command(
    addons_dir: Path,
    names: Sequence[str],
    zip_file: str,
    show_logs: bool = False,
) -> ScriptCommand:
    if not zip_file:
        raise FlagValidationError("no path to zip archive provided", "zip")

    params = [_names_param(names)] if names else []
    params.append(f"-Zipfile {escape_with_single_quotes(zip_file)}")
    if show_logs:
        params.append(SHOW_LOGS_PARAM)
    return ScriptCommand(path=addons_dir / IMPORT_SCRIPT, params=tuple(params))

"""Enabled addons: query the cluster for the addons currently turned on."""

from __future__ import annotations

from typing import TYPE_CHECKING

from k2saddons.core.errors import (
    SYSTEM_NOT_INSTALLED_CODE,
    EnabledAddonsError,
    ScriptExecutionError,
    SystemNotInstalledError,
)

from .models import EnabledAddons

if TYPE_CHECKING:
    from k2saddons.core.config import Config
    from k2saddons.powershell import ScriptExecutor

ENABLED_ADDONS_SCRIPT = "Get-EnabledAddons.ps1"
ENABLED_ADDONS_TYPE = "EnabledAddons"


def load_enabled_addons(config: Config, executor: ScriptExecutor) -> EnabledAddons:
    """Fetch the enabled addon names; never cached, cluster state may change."""
    script = config.addons_dir / ENABLED_ADDONS_SCRIPT
    try:
        data = executor.execute_structured(
            script, ENABLED_ADDONS_TYPE, ignore_not_installed=True
        )
    except ScriptExecutionError as e:
        raise EnabledAddonsError(f"could not load enabled addons: {e}") from e

    if data.get("error") == SYSTEM_NOT_INSTALLED_CODE:
        raise SystemNotInstalledError()

    names = data.get("addons") or []
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise EnabledAddonsError(f"could not load enabled addons: invalid addon list {names!r}")
    return EnabledAddons(addons=tuple(names))

"""Addon status: run an addon's status script and decode enabled flag and props."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from k2saddons.core.errors import AddonStatusError, CommandFailedError

from .models import Addon

if TYPE_CHECKING:
    from k2saddons.powershell import ScriptExecutor

logger = logging.getLogger(__name__)

STATUS_SCRIPT = "Get-Status.ps1"
STATUS_RESULT_TYPE = "AddonStatus"


@dataclass(frozen=True)
class AddonStatusProp:
    """One status line; ``okay`` None means informational, no good/bad verdict."""

    name: str
    value: Any = None
    okay: bool | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value, "okay": self.okay, "message": self.message}


@dataclass(frozen=True)
class AddonStatus:
    name: str
    enabled: bool | None = None
    props: tuple[AddonStatusProp, ...] = field(default_factory=tuple)
    error: CommandFailedError | None = None


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    # scripts emit PascalCase or camelCase keys
    for k, v in data.items():
        if isinstance(k, str) and k.lower() == key:
            return v
    return None


def _parse_prop(raw: Any) -> AddonStatusProp:
    if not isinstance(raw, Mapping):
        raise AddonStatusError(f"invalid status prop {raw!r}")
    name = _lookup(raw, "name")
    if not isinstance(name, str) or not name:
        raise AddonStatusError(f"status prop without name: {raw!r}")
    okay = _lookup(raw, "okay")
    message = _lookup(raw, "message")
    return AddonStatusProp(
        name=name,
        value=_lookup(raw, "value"),
        okay=okay if isinstance(okay, bool) else None,
        message=str(message) if message is not None else None,
    )


def _parse_error(raw: Any) -> CommandFailedError | None:
    if not raw:
        return None
    if isinstance(raw, Mapping):
        severity = _lookup(raw, "severity")
        return CommandFailedError(
            str(_lookup(raw, "message") or "addon status failed"),
            code=str(_lookup(raw, "code") or ""),
            severity=severity if isinstance(severity, int) else None,
        )
    return CommandFailedError(str(raw), code=str(raw))


def parse_addon_status(name: str, data: Mapping[str, Any]) -> AddonStatus:
    error = _parse_error(_lookup(data, "error"))
    if error is not None:
        return AddonStatus(name=name, error=error)

    enabled = _lookup(data, "enabled")
    if enabled is not None and not isinstance(enabled, bool):
        raise AddonStatusError(f"invalid enabled info {enabled!r} for '{name}' addon")
    props = _lookup(data, "props") or []
    if not isinstance(props, list):
        raise AddonStatusError(f"invalid props {props!r} for '{name}' addon")
    return AddonStatus(name=name, enabled=enabled, props=tuple(_parse_prop(p) for p in props))


def load_addon_status(addon: Addon, executor: ScriptExecutor) -> AddonStatus:
    """Run ``Get-Status.ps1`` from the addon's directory; script failures come back in ``error``."""
    script = addon.directory / STATUS_SCRIPT
    logger.info("Loading status of addon '%s' from %s", addon.name, addon.directory)
    data = executor.execute_structured(script, STATUS_RESULT_TYPE)
    return parse_addon_status(addon.name, data)

"""Exception hierarchy for addon discovery, validation and script execution."""

from __future__ import annotations

from pathlib import Path
from typing import Any

SYSTEM_NOT_INSTALLED_CODE = "system-not-installed"
SYSTEM_NOT_INSTALLED_MSG = (
    "You have not installed K2s setup yet, please start the installation "
    "with command 'k2s.exe install' first"
)
SYSTEM_CORRUPTED_CODE = "system-in-corrupted-state"
SYSTEM_CORRUPTED_MSG = (
    "Errors occurred during K2s setup. K2s cluster is in corrupted state. "
    "Please uninstall and reinstall K2s cluster."
)
FUNCTIONALITY_NOT_AVAILABLE_CODE = "functionality-not-available"


class AddonsError(Exception):
    """Base exception for all k2s-addons errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigurationError(AddonsError):
    """Invalid CLI settings or setup config."""


# ── Manifest discovery ──────────────────────────────────────────────


class ManifestError(AddonsError):
    """A manifest (or the manifest schema) could not be turned into an Addon."""

    def __init__(
        self, message: str, path: Path | None = None, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, details)
        self.path = path


class SchemaCompileError(ManifestError):
    pass


class ManifestReadError(ManifestError):
    pass


class ManifestParseError(ManifestError):
    pass


class ManifestValidationError(ManifestError):
    """Manifest does not satisfy the JSON schema."""

    def __init__(self, path: Path, diagnostics: list[str]) -> None:
        lines = "\n".join(f"- {d}" for d in diagnostics)
        super().__init__(
            f"validation failed for manifest '{path}':\n{lines}",
            path,
            {"diagnostics": diagnostics},
        )
        self.diagnostics = diagnostics


class UnsupportedApiVersionError(ManifestError):
    def __init__(self, api_version: str, path: Path | None, supported: tuple[str, ...]) -> None:
        where = f" in manifest '{path}'" if path else ""
        super().__init__(
            f"apiVersion '{api_version}' invalid{where}; "
            f"supported versions are ({'|'.join(supported)})",
            path,
            {"api_version": api_version, "supported": list(supported)},
        )
        self.api_version = api_version
        self.supported = supported


class DuplicateAddonError(ManifestError):
    def __init__(self, name: str, first: Path, second: Path) -> None:
        super().__init__(
            f"addon name '{name}' is declared by both '{first}' and '{second}'",
            second,
            {"name": name},
        )
        self.name = name


class UnsupportedFlagDefaultError(ManifestError):
    def __init__(self, flag_name: str, default: Any) -> None:
        super().__init__(f"unsupported flag value: {default!r} (flag '{flag_name}')")
        self.flag_name = flag_name
        self.default = default


# ── Constraint validation ───────────────────────────────────────────


class ConstraintError(AddonsError, ValueError):
    """A value does not satisfy a flag constraint."""


class ValueNotAllowedError(ConstraintError):
    def __init__(self, value: str, allowed: str) -> None:
        super().__init__(f"invalid value '{value}', valid values are {allowed}")
        self.value = value
        self.allowed = allowed


class NotANumberError(ConstraintError):
    def __init__(self, value: str) -> None:
        super().__init__(f"'{value}' is not a number")
        self.value = value


class OutOfRangeError(ConstraintError):
    def __init__(self, value: str, bounds: str) -> None:
        super().__init__(f"'{value}' is out of range {bounds}")
        self.value = value
        self.bounds = bounds


class UnknownConstraintKindError(ConstraintError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"unknown constraint type '{kind}'")
        self.kind = kind


class FlagValidationError(AddonsError):
    """A CLI flag value was rejected before invoking the addon script."""

    def __init__(self, message: str, flag_name: str) -> None:
        super().__init__(message, {"flag": flag_name})
        self.flag_name = flag_name


# ── External state / script execution ───────────────────────────────


class ScriptExecutionError(AddonsError):
    pass


class CommandFailedError(AddonsError):
    """The addon script reported a failure in its CmdResult."""

    def __init__(self, message: str, code: str = "", severity: int | None = None) -> None:
        super().__init__(message, {"code": code, "severity": severity})
        self.code = code
        self.severity = severity


class SystemNotInstalledError(AddonsError):
    def __init__(self, message: str = SYSTEM_NOT_INSTALLED_MSG) -> None:
        super().__init__(message, {"code": SYSTEM_NOT_INSTALLED_CODE})


class SystemCorruptedError(AddonsError):
    def __init__(self, message: str = SYSTEM_CORRUPTED_MSG) -> None:
        super().__init__(message, {"code": SYSTEM_CORRUPTED_CODE})


class EnabledAddonsError(AddonsError):
    pass


class InvalidAddonNameError(AddonsError):
    """An addon name given on the command line matches no discovered addon."""

    code = "addon-name-invalid"

    def __init__(self, name: str, activity: str, valid_names: list[str]) -> None:
        super().__init__(
            f"Addon '{name}' not supported for {activity}, aborting.",
            {"code": self.code, "valid_names": valid_names},
        )
        self.name = name
        self.activity = activity
        self.valid_names = valid_names


class AddonStatusError(AddonsError):
    """The status script returned no usable enabled/disabled information."""


class FunctionalityNotAvailableError(CommandFailedError):
    def __init__(self, setup_name: str) -> None:
        super().__init__(
            f"This functionality is not available because '{setup_name}' setup is deprecated.",
            code=FUNCTIONALITY_NOT_AVAILABLE_CODE,
        )
        self.setup_name = setup_name

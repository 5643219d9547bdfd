"""Addons: manifest model, constraint engine, discovery, registry, scripts and status."""

from .constraints import (
    Constraint,
    NumberRange,
    UnknownConstraint,
    ValidationSet,
    describe_constraint,
    parse_constraint,
    validate_constraint,
)
from .enabled import load_enabled_addons
from .loader import (
    MANIFEST_FILE_NAME,
    MANIFEST_SCHEMA_FILE_NAME,
    SUPPORTED_API_VERSIONS,
    load_addons,
)
from .models import (
    Addon,
    AddonCmd,
    AddonMetadata,
    AddonPrintInfo,
    AddonSpec,
    CliConfig,
    CliExample,
    CliFlag,
    EnabledAddons,
    ParameterMapping,
    ScriptConfig,
    format_examples,
)
from .params import ScriptCommand, build_script_command
from .parser import parse_addon
from .registry import AddonRegistry, to_print_info
from .scalars import Scalar, ScalarKind, scalar_kind, scalar_to_text
from .status import AddonStatus, AddonStatusProp, load_addon_status, parse_addon_status
from .transfer import build_export_command, build_import_command, validate_addon_names

__all__ = [
    "MANIFEST_FILE_NAME",
    "MANIFEST_SCHEMA_FILE_NAME",
    "SUPPORTED_API_VERSIONS",
    "Addon",
    "AddonCmd",
    "AddonMetadata",
    "AddonPrintInfo",
    "AddonRegistry",
    "AddonSpec",
    "AddonStatus",
    "AddonStatusProp",
    "CliConfig",
    "CliExample",
    "CliFlag",
    "Constraint",
    "EnabledAddons",
    "NumberRange",
    "ParameterMapping",
    "Scalar",
    "ScalarKind",
    "ScriptCommand",
    "ScriptConfig",
    "UnknownConstraint",
    "ValidationSet",
    "build_export_command",
    "build_import_command",
    "build_script_command",
    "describe_constraint",
    "format_examples",
    "load_addon_status",
    "load_addons",
    "load_enabled_addons",
    "parse_addon",
    "parse_addon_status",
    "parse_constraint",
    "scalar_kind",
    "scalar_to_text",
    "to_print_info",
    "validate_addon_names",
    "validate_constraint",
]

"""Typed manifest parsing: parse_addon and its per-section helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from k2saddons.core.errors import ManifestError

from .constraints import parse_constraint
from .models import (
    Addon,
    AddonCmd,
    AddonMetadata,
    AddonSpec,
    CliConfig,
    CliExample,
    CliFlag,
    ParameterMapping,
    ScriptConfig,
)
from .scalars import scalar_kind


def _mapping(raw: Any, what: str) -> dict:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ManifestError(f"{what} must be a mapping, got {type(raw).__name__}")
    return raw


def _sequence(raw: Any, what: str) -> list:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ManifestError(f"{what} must be a list, got {type(raw).__name__}")
    return raw


def _optional_str(raw: Any) -> str | None:
    return None if raw is None else str(raw)


def parse_cli_flag(raw: dict) -> CliFlag:
    raw = _mapping(raw, "cli flag")
    name = raw.get("name", "")
    default = raw.get("default")
    if default is not None and scalar_kind(default) is None:
        raise ManifestError(f"default of flag '{name}' must be a string, number or bool")
    return CliFlag(
        name=str(name),
        shorthand=_optional_str(raw.get("shorthand")),
        default=default,
        description=_optional_str(raw.get("description")),
        constraints=parse_constraint(raw.get("constraints")),
        exclusion_group=_optional_str(raw.get("exclusionGroup")),
    )


def parse_cli_example(raw: dict) -> CliExample:
    raw = _mapping(raw, "cli example")
    return CliExample(cmd=str(raw.get("cmd", "")), comment=_optional_str(raw.get("comment")))


def parse_cli_config(raw: dict | None) -> CliConfig | None:
    if raw is None:
        return None
    raw = _mapping(raw, "cli")
    return CliConfig(
        flags=tuple(parse_cli_flag(f) for f in _sequence(raw.get("flags"), "cli.flags")),
        examples=tuple(
            parse_cli_example(e) for e in _sequence(raw.get("examples"), "cli.examples")
        ),
    )


def parse_script_config(raw: dict | None) -> ScriptConfig:
    raw = _mapping(raw, "script")
    mappings = _sequence(raw.get("parameterMappings"), "script.parameterMappings")
    return ScriptConfig(
        sub_path=str(raw.get("subPath", "")),
        parameter_mappings=tuple(
            ParameterMapping(
                cli_flag_name=str(m.get("cliFlagName", "")),
                script_parameter_name=str(m.get("scriptParameterName", "")),
            )
            for m in (_mapping(m, "parameter mapping") for m in mappings)
        ),
    )


def parse_addon_cmd(raw: dict) -> AddonCmd:
    raw = _mapping(raw, "command")
    return AddonCmd(
        script=parse_script_config(raw.get("script")),
        cli=parse_cli_config(raw.get("cli")),
    )


def parse_addon(document: Any, directory: Path) -> Addon:
    """Deserialize a schema-validated manifest document into an Addon."""
    data = _mapping(document, "manifest")
    metadata = _mapping(data.get("metadata"), "metadata")
    spec = _mapping(data.get("spec"), "spec")
    commands = _mapping(spec.get("commands"), "spec.commands")
    return Addon(
        api_version=str(data.get("apiVersion", "")),
        kind=str(data.get("kind", "")),
        directory=directory,
        metadata=AddonMetadata(
            name=str(metadata.get("name", "")),
            description=str(metadata.get("description", "")),
        ),
        spec=AddonSpec(
            commands={str(name): parse_addon_cmd(cmd) for name, cmd in commands.items()}
        ),
    )

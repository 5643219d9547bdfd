"""Addon data models: Addon, AddonCmd, CliConfig, CliFlag, ScriptConfig, EnabledAddons."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .constraints import Constraint, describe_constraint, validate_constraint
from .scalars import Scalar, ScalarKind, scalar_kind


@dataclass(frozen=True)
class CliExample:
    cmd: str
    comment: str | None = None

    def __str__(self) -> str:
        comment = f"  // {self.comment}\n" if self.comment is not None else ""
        return f"{comment}  {self.cmd}\n"


def format_examples(examples: Sequence[CliExample]) -> str:
    """Render usage examples for help text, one block per example."""
    return "\n".join(str(e) for e in examples)


@dataclass(frozen=True)
class CliFlag:
    name: str
    shorthand: str | None = None
    default: Scalar | None = None
    description: str | None = None
    constraints: Constraint | None = None
    exclusion_group: str | None = None

    @property
    def kind(self) -> ScalarKind | None:
        return scalar_kind(self.default)

    def full_description(self) -> str:
        """Free-text description followed by the rendered constraint, if any."""
        description = self.description or ""
        constraints = describe_constraint(self.constraints)
        if description and constraints:
            description += " "
        return description + constraints

    def validate(self, value: Scalar) -> None:
        validate_constraint(self.constraints, value)


@dataclass(frozen=True)
class CliConfig:
    flags: tuple[CliFlag, ...] = ()
    examples: tuple[CliExample, ...] = ()

    def flag(self, name: str) -> CliFlag | None:
        return next((f for f in self.flags if f.name == name), None)

    @property
    def examples_text(self) -> str:
        return format_examples(self.examples)


@dataclass(frozen=True)
class ParameterMapping:
    cli_flag_name: str
    script_parameter_name: str


@dataclass(frozen=True)
class ScriptConfig:
    sub_path: str
    parameter_mappings: tuple[ParameterMapping, ...] = ()

    def mapping_for(self, flag_name: str) -> ParameterMapping | None:
        return next((m for m in self.parameter_mappings if m.cli_flag_name == flag_name), None)


@dataclass(frozen=True)
class AddonCmd:
    script: ScriptConfig
    cli: CliConfig | None = None


@dataclass(frozen=True)
class AddonMetadata:
    name: str
    description: str = ""


@dataclass(frozen=True)
class AddonSpec:
    commands: dict[str, AddonCmd] = field(default_factory=dict)


@dataclass(frozen=True)
class Addon:
    """One discovered, validated addon; ``directory`` is the manifest's folder."""

    api_version: str
    kind: str
    directory: Path
    metadata: AddonMetadata
    spec: AddonSpec = field(default_factory=AddonSpec)

    @property
    def name(self) -> str:
        return self.metadata.name

    def command(self, name: str) -> AddonCmd | None:
        return self.spec.commands.get(name)


@dataclass(frozen=True)
class AddonPrintInfo:
    name: str
    description: str


@dataclass(frozen=True)
class EnabledAddons:
    addons: tuple[str, ...] = ()

    def is_enabled(self, name: str) -> bool:
        return name in self.addons

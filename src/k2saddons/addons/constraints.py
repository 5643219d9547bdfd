"""Flag constraints: validation sets and numeric ranges.

A constraint is one of three variants:

- ``ValidationSet``: the value's text form must equal one of the listed entries
  (exact, case-sensitive).
- ``NumberRange``: the value must be a finite decimal number within
  ``[min, max]`` (inclusive).
- ``UnknownConstraint``: a kind this version does not understand. It is kept
  so that manifests still load; describing or validating it raises
  ``UnknownConstraintKindError`` at the point of use.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from k2saddons.core.errors import (
    ManifestError,
    NotANumberError,
    OutOfRangeError,
    UnknownConstraintKindError,
    ValueNotAllowedError,
)

from .scalars import Scalar, ScalarKind, format_number, scalar_kind, scalar_to_text

VALIDATION_SET_KIND = "validation-set"
RANGE_KIND = "range"

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class ValidationSet:
    values: tuple[str, ...]

    kind: ClassVar[str] = VALIDATION_SET_KIND

    def describe(self) -> str:
        return f"[{'|'.join(self.values)}]"

    def validate(self, value: Scalar) -> None:
        text = scalar_to_text(value)
        if text not in self.values:
            raise ValueNotAllowedError(text, self.describe())

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class NumberRange:
    min: float
    max: float

    kind: ClassVar[str] = RANGE_KIND

    def describe(self) -> str:
        return f"[{format_number(self.min)},{format_number(self.max)}]"

    def validate(self, value: Scalar) -> None:
        text = scalar_to_text(value)
        if not _NUMBER_RE.fullmatch(text):
            raise NotANumberError(text)
        number = float(text)
        if number < self.min or number > self.max:
            raise OutOfRangeError(text, self.describe())

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class UnknownConstraint:
    kind: str

    def describe(self) -> str:
        raise UnknownConstraintKindError(self.kind)

    def validate(self, value: Scalar) -> None:
        raise UnknownConstraintKindError(self.kind)

    def __str__(self) -> str:
        return f"<unknown constraint type '{self.kind}'>"


Constraint = Union[ValidationSet, NumberRange, UnknownConstraint]


def describe_constraint(constraint: Constraint | None) -> str:
    """Render a constraint for help text; '' when there is none."""
    if constraint is None:
        return ""
    return constraint.describe()


def validate_constraint(constraint: Constraint | None, value: Scalar) -> None:
    """Raise a ConstraintError if *value* is not admissible."""
    if constraint is None:
        return
    constraint.validate(value)


# ── Parsing ─────────────────────────────────────────────────────────


def _to_float(value: Any, field_name: str) -> float:
    if scalar_kind(value) not in (ScalarKind.INTEGER, ScalarKind.FLOAT):
        raise ManifestError(f"constraint range '{field_name}' must be a number, got {value!r}")
    return float(value)


def parse_constraint(data: Any) -> Constraint | None:
    """Build a constraint from its manifest mapping (``kind`` + payload)."""
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ManifestError(f"constraints must be a mapping, got {data!r}")

    kind = str(data.get("kind", ""))
    if kind == VALIDATION_SET_KIND:
        raw = data.get("validationSet")
        if not isinstance(raw, list) or not raw:
            raise ManifestError("constraint 'validation-set' requires a non-empty 'validationSet'")
        if data.get("range") is not None:
            raise ManifestError("constraint 'validation-set' must not declare a 'range'")
        if any(scalar_kind(v) is None for v in raw):
            raise ManifestError("validationSet entries must be scalar values")
        return ValidationSet(values=tuple(scalar_to_text(v) for v in raw))
    if kind == RANGE_KIND:
        raw = data.get("range")
        if not isinstance(raw, dict) or "min" not in raw or "max" not in raw:
            raise ManifestError("constraint 'range' requires a 'range' with 'min' and 'max'")
        if data.get("validationSet") is not None:
            raise ManifestError("constraint 'range' must not declare a 'validationSet'")
        return NumberRange(min=_to_float(raw["min"], "min"), max=_to_float(raw["max"], "max"))
    return UnknownConstraint(kind=kind)

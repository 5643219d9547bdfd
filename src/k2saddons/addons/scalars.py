"""Scalar flag values: the closed set of kinds a manifest default may take."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Union

Scalar = Union[str, int, float, bool]


class ScalarKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"


def scalar_kind(value: Any) -> ScalarKind | None:
    """Return the kind of *value*, or None if it is not a supported scalar."""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ScalarKind.BOOLEAN
    if isinstance(value, int):
        return ScalarKind.INTEGER
    if isinstance(value, float):
        return ScalarKind.FLOAT
    if isinstance(value, str):
        return ScalarKind.STRING
    return None


def format_number(value: float) -> str:
    """Render a number without a trailing '.0' for integral values (10.0 -> '10')."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    if isinstance(value, float):
        return repr(value)
    return str(value)


def scalar_to_text(value: Scalar) -> str:
    """Canonical text form used for constraint checks and script parameters."""
    kind = scalar_kind(value)
    if kind is ScalarKind.BOOLEAN:
        return "true" if value else "false"
    if kind in (ScalarKind.INTEGER, ScalarKind.FLOAT):
        return format_number(value)  # type: ignore[arg-type]
    if kind is ScalarKind.STRING:
        return value  # type: ignore[return-value]
    raise TypeError(f"unsupported scalar value: {value!r}")

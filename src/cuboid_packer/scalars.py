"""Scalar helpers shared by the geometry core."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
from functools import cmp_to_key
from typing import Any, Callable, Union

# Any totally ordered number with +, -, * works. These are the ones we coerce to.
Scalar = Union[int, float, Fraction, Decimal]

SCALAR_KINDS = ("auto", "int", "float", "fraction", "decimal")


def is_nan(value: Any) -> bool:
    # NaN is the only value not equal to itself; == stays quiet for Decimal NaN
    return value != value


def compare(a: Any, b: Any) -> int:
    """
    Three-way compare that never raises on incomparable values.

    NaN (or anything else where neither a < b nor a > b holds) compares as equal.
    """
    if is_nan(a) or is_nan(b):
        return 0
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def check_positive(dims: Any, what: str = "Dimensions") -> tuple:
    """Reject zero or negative edges. NaN passes through and simply never fits."""
    values = tuple(dims)
    if any(not is_nan(v) and not v > 0 for v in values):
        raise ValueError(f"{what} must be positive, got {values!r}")
    return values


dimension_key = cmp_to_key(compare)


def _to_int(value: Any) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"Dimension {value!r} is not a whole number")
    return int(value)


def _to_fraction(value: Any) -> Fraction:
    # str() keeps 1.1 as 11/10 instead of the binary expansion
    return Fraction(str(value)) if isinstance(value, float) else Fraction(value)


def _to_decimal(value: Any) -> Decimal:
    return Decimal(str(value)) if isinstance(value, float) else Decimal(value)


_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "int": _to_int,
    "float": float,
    "fraction": _to_fraction,
    "decimal": _to_decimal,
}


def get_converter(kind: str) -> Callable[[Any], Any]:
    key = kind.strip().lower()
    if key == "auto":
        return lambda value: value
    if key not in _CONVERTERS:
        raise ValueError(f"Unknown scalar kind '{kind}'. Valid: {list(SCALAR_KINDS)}")
    return _CONVERTERS[key]


def coerce_dims(dims: Any, kind: str = "auto") -> tuple:
    """Convert a 3-sequence of numbers to the configured scalar type."""
    values = tuple(dims)
    if len(values) != 3:
        raise ValueError(f"Expected 3 dimensions, got {len(values)}")
    convert = get_converter(kind)
    return tuple(convert(v) for v in values)

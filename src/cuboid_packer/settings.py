"""Runtime settings read from the environment; loads .env locally via python-dotenv."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from cuboid_packer.scalars import SCALAR_KINDS

ENV_PREFIX = "CUBOID_PACKER_"


@dataclass(frozen=True)
class Settings:
    scalar: str = "auto"
    exact_fit_tolerance: Any = 0
    max_items: Optional[int] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "Settings":
        """
        Build settings from CUBOID_PACKER_* variables.

        A .env file is loaded first when present; it never overrides variables
        already set in the process environment.
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        kwargs: dict[str, Any] = {}
        for field_name in ("scalar", "exact_fit_tolerance", "max_items", "log_level"):
            value = environ.get(ENV_PREFIX + field_name.upper())
            if value is not None and value.strip():
                kwargs[field_name] = value.strip()
        return cls().override(**kwargs)

    def override(self, **changes: Any) -> "Settings":
        """Return a validated copy; None values are ignored."""
        changes = {k: v for k, v in changes.items() if v is not None}
        if "scalar" in changes:
            changes["scalar"] = _parse_scalar(changes["scalar"])
        if "exact_fit_tolerance" in changes:
            changes["exact_fit_tolerance"] = _parse_tolerance(changes["exact_fit_tolerance"], changes.get("scalar", self.scalar))
        if "max_items" in changes:
            changes["max_items"] = _parse_max_items(changes["max_items"])
        if "log_level" in changes:
            changes["log_level"] = _parse_log_level(changes["log_level"])
        return replace(self, **changes)


def _parse_scalar(value: str) -> str:
    key = str(value).strip().lower()
    if key not in SCALAR_KINDS:
        raise ValueError(f"{ENV_PREFIX}SCALAR must be one of {list(SCALAR_KINDS)}, got '{value}'")
    return key


def _parse_tolerance(value: Any, scalar: str) -> Any:
    try:
        # Decimal keeps "0.01" exact; the packer compares it against the configured scalar type
        tolerance = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{ENV_PREFIX}EXACT_FIT_TOLERANCE must be a number, got '{value}'") from None
    if not tolerance.is_finite() or tolerance < 0:
        raise ValueError(f"{ENV_PREFIX}EXACT_FIT_TOLERANCE must be >= 0, got '{value}'")
    if tolerance == 0:
        return 0
    if scalar == "decimal":
        return tolerance
    return float(tolerance)


def _parse_max_items(value: Any) -> int:
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{ENV_PREFIX}MAX_ITEMS must be an integer, got '{value}'") from None
    if limit < 1:
        raise ValueError(f"{ENV_PREFIX}MAX_ITEMS must be >= 1, got '{value}'")
    return limit


def _parse_log_level(value: str) -> str:
    level = str(value).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{ENV_PREFIX}LOG_LEVEL is not a logging level: '{value}'")
    return level


def get_settings() -> Settings:
    return Settings.from_env()

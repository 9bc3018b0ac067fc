"""Exceptions raised by the packer."""

from __future__ import annotations

from typing import Hashable, Iterable

ITEMS_NO_FIT_MESSAGE = "All items must fit within the bin dimensions."


class PackingError(Exception):
    """Base class for every error the packer raises."""


class ItemsDoNotFitError(PackingError, ValueError):
    """At least one item cannot fit the empty bin in any rotation."""

    def __init__(self, item_ids: Iterable[Hashable]):
        self.item_ids = list(item_ids)
        shown = ", ".join(repr(i) for i in self.item_ids[:10])
        if len(self.item_ids) > 10:
            shown += f", ... ({len(self.item_ids) - 10} more)"
        super().__init__(f"{ITEMS_NO_FIT_MESSAGE} Offending items: {shown}")


class TooManyItemsError(PackingError, ValueError):
    """The request exceeds the configured item cap."""

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Refusing to pack {count} items (limit is {limit})")


class InvariantViolationError(PackingError, RuntimeError):
    """Internal bug: the geometry engine reached a state its callers rule out."""


class UnknownPresetError(PackingError, ValueError):
    """A bin preset name that is not in the preset table."""

    def __init__(self, preset: str, valid: list[str]):
        self.preset = preset
        self.valid = valid
        super().__init__(f"Unknown bin preset '{preset}'. Valid: {valid}")

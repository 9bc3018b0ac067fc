from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from cuboid_packer.errors import InvariantViolationError
from cuboid_packer.geometry import Cuboid, best_fit, fits
from cuboid_packer.items import Item
from cuboid_packer.scalars import check_positive

logger = logging.getLogger(__name__)


class Bin:
    """
    One container being packed.

    A bin only knows the *shapes* of its free space, not where each piece
    sits, so packing is approximate: an item goes into the first free cuboid
    it fits, and that cuboid is replaced by whatever best_fit leaves over.
    """

    def __init__(
        self,
        dims: Iterable[Any] | Cuboid,
        exact_fit_tolerance: Any = 0,
        free_space: Optional[list[Cuboid]] = None,
    ):
        self.template = dims if isinstance(dims, Cuboid) else Cuboid(tuple(dims))
        check_positive(self.template.dims, "Bin dimensions")
        self.exact_fit_tolerance = exact_fit_tolerance
        self.free_space: list[Cuboid] = list(free_space) if free_space is not None else [self.template]
        self.items: list[Item] = []

    def __repr__(self) -> str:
        return f"Bin({self.template.dims!r}, items={len(self.items)}, free={len(self.free_space)})"

    @property
    def item_ids(self) -> list[Any]:
        return [item.id for item in self.items]

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def volume(self) -> Any:
        return self.template.volume

    @property
    def used_volume(self) -> Any:
        return sum((item.volume for item in self.items), 0)

    @property
    def free_volume(self) -> Any:
        return sum((block.volume for block in self.free_space), 0)

    def fits(self, item: Item) -> bool:
        return any(fits(block, item.cuboid) for block in self.free_space)

    def fits_empty(self, item: Item) -> bool:
        """True if the item fits this bin's template, ignoring what is packed."""
        return fits(self.template, item.cuboid)

    def try_place(self, item: Item) -> bool:
        """
        Put `item` into the first free cuboid that holds it.

        Returns False, leaving the bin untouched, when nothing fits.
        """
        for index, block in enumerate(self.free_space):
            if not fits(block, item.cuboid):
                continue

            leftovers = best_fit(block, item.cuboid, self.exact_fit_tolerance)
            if leftovers is None:
                raise InvariantViolationError(f"{block!r} accepted {item!r} but best_fit found no fit")

            self.free_space = self.free_space[:index] + self.free_space[index + 1:] + leftovers
            self.items.append(item)
            logger.debug("placed %r into %r, %d free blocks left", item.id, block, len(self.free_space))
            return True

        return False

    def clone_empty(self) -> "Bin":
        return Bin(self.template, exact_fit_tolerance=self.exact_fit_tolerance)

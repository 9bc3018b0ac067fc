from __future__ import annotations

from typing import Any, Hashable, Iterable

from cuboid_packer.geometry import Cuboid
from cuboid_packer.scalars import check_positive, compare


class Item:
    """
    An identifier paired with a cuboid.

    Items sort by their longest edge so `sorted(items, reverse=True)` gives
    first-fit-decreasing order. Equality and hashing only look at the id;
    ids need not be unique.
    """

    __slots__ = ("id", "cuboid")

    def __init__(self, id: Hashable, dims: Iterable[Any] | Cuboid):
        self.id = id
        cuboid = dims if isinstance(dims, Cuboid) else Cuboid(tuple(dims))
        check_positive(cuboid.dims, f"Item {id!r} dimensions")
        self.cuboid = cuboid

    def __repr__(self) -> str:
        return f"Item({self.id!r}, {self.cuboid.dims!r})"

    @property
    def longest(self) -> Any:
        return self.cuboid.dims[2]

    @property
    def volume(self) -> Any:
        return self.cuboid.volume

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __lt__(self, other: "Item") -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return compare(self.longest, other.longest) < 0

    def __gt__(self, other: "Item") -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return compare(self.longest, other.longest) > 0


def sort_decreasing(items: Iterable[Item]) -> list[Item]:
    """Longest edge first. Stable, so equal items keep their input order."""
    return sorted(items, reverse=True)

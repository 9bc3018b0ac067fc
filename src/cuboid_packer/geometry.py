"""Geometry utilities for cuboid packing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from cuboid_packer.errors import InvariantViolationError
from cuboid_packer.scalars import dimension_key, is_nan


class FitKind(Enum):
    """How a container axis relates to an item's longest edge."""

    DOUBLED = "doubled"            # axis >= 2 * longest edge
    EXACT = "exact"                # axis == longest edge
    GREATER_THAN = "greater_than"  # longest edge < axis < 2 * longest edge


@dataclass(frozen=True)
class Cuboid:
    """
    Three edge lengths, always stored in ascending order.

    Cuboids are values: every operation returns a new Cuboid, and because the
    dims are canonicalized on construction, two cuboids that differ only by
    rotation compare equal.
    """

    dims: tuple

    def __post_init__(self) -> None:
        dims = tuple(self.dims)
        if len(dims) != 3:
            raise ValueError(f"A cuboid needs exactly 3 dimensions, got {len(dims)}")
        object.__setattr__(self, "dims", tuple(sorted(dims, key=dimension_key)))

    @classmethod
    def of(cls, d1: Any, d2: Any, d3: Any) -> "Cuboid":
        return cls((d1, d2, d3))

    def __repr__(self) -> str:
        return f"Cuboid({self.dims[0]!r}, {self.dims[1]!r}, {self.dims[2]!r})"

    @property
    def volume(self) -> Any:
        d1, d2, d3 = self.dims
        return d1 * d2 * d3

    @property
    def longest(self) -> Any:
        return self.dims[2]

    def fits(self, other: "Cuboid") -> bool:
        """True if `other` can be rotated to fit inside this cuboid."""
        return fits(self, other)

    def best_fit(self, item: "Cuboid", exact_fit_tolerance: Any = 0) -> Optional[list["Cuboid"]]:
        return best_fit(self, item, exact_fit_tolerance)


def fits(container: Cuboid, candidate: Cuboid) -> bool:
    """
    Sorted element-wise comparison.

    Both cuboids are ascending, so comparing smallest-to-smallest,
    middle-to-middle and longest-to-longest covers all 6 rotations at once.
    A NaN edge never fits.
    """
    return all(not is_nan(c) and not is_nan(i) and c >= i for c, i in zip(container.dims, candidate.dims))


def _is_exact(side: Any, longest: Any, tolerance: Any) -> bool:
    if not tolerance:
        return side == longest
    # Only snap when the item still fits along the axis.
    return side >= longest and side - longest <= tolerance


def classify_primary_side(container: Iterable[Any], item: Cuboid, exact_fit_tolerance: Any = 0) -> tuple[FitKind, int]:
    """
    Pick the container axis that takes the item's longest edge.

    `container` is a 3-sequence of container dims (not necessarily sorted,
    since best_fit narrows one axis in place).
    """
    dims = list(container)
    longest = item.dims[2]

    doubled_side = next((i for i, side in enumerate(dims) if side >= longest * 2), None)
    exact_side = next(
        (i for i, side in enumerate(dims) if _is_exact(side, longest, exact_fit_tolerance)),
        None,
    )

    if doubled_side is not None and exact_side is not None:
        if doubled_side <= exact_side:
            return FitKind.DOUBLED, doubled_side
        return FitKind.EXACT, exact_side
    if doubled_side is not None:
        return FitKind.DOUBLED, doubled_side
    if exact_side is not None:
        return FitKind.EXACT, exact_side

    greater_side = next((i for i, side in enumerate(dims) if side >= longest), None)
    if greater_side is None:
        raise InvariantViolationError(
            f"No container axis of {tuple(dims)!r} can hold the longest edge of {item!r}"
        )
    return FitKind.GREATER_THAN, greater_side


def rotate_sides(container: list[Any], item: Cuboid, side_1: int) -> tuple[int, int]:
    """
    Assign the two remaining container axes.

    If the item's middle edge is too long for the (side_1 + 1) axis, swap so it
    is laid along the (side_1 + 2) axis instead.
    """
    middle = item.dims[1]
    after_next = (side_1 + 2) % 3
    next_ = (side_1 + 1) % 3
    if middle > container[after_next]:
        return next_, after_next
    if middle > container[next_]:
        return after_next, next_
    return next_, after_next


def best_fit(container: Cuboid, item: Cuboid, exact_fit_tolerance: Any = 0) -> Optional[list[Cuboid]]:
    """
    Split the space left in `container` after `item` is placed in it.

    Returns the leftover cuboids sorted by ascending volume, or None if the
    item does not fit.

    The item's longest edge goes along the shortest container axis that can
    take it twice (DOUBLED), exactly (EXACT) or at all (GREATER_THAN). The
    remaining face is then cut one of two ways; we keep the cut whose first
    slab is smaller, which leaves the two slabs closer in size.

    >>> best_fit(Cuboid.of(10, 10, 10), Cuboid.of(5, 5, 5))
    [Cuboid(5, 5, 5), Cuboid(5, 5, 10), Cuboid(5, 10, 10)]
    """
    if not fits(container, item):
        return None

    small, middle, longest = item.dims
    dims = list(container.dims)
    blocks: list[Cuboid] = []

    kind, side_1 = classify_primary_side(dims, item, exact_fit_tolerance)
    if kind is FitKind.DOUBLED:
        blocks.append(Cuboid((dims[side_1] - longest, dims[(side_1 + 2) % 3], dims[(side_1 + 1) % 3])))
        # the rest of the split works inside a slab as tall as the item
        dims[side_1] = longest
    elif kind is FitKind.GREATER_THAN:
        blocks.append(Cuboid((dims[side_1] - longest, small, middle)))

    side_2, side_3 = rotate_sides(dims, item, side_1)
    height = dims[side_1]

    block_2a = Cuboid((height, dims[side_2], dims[side_3] - small))
    block_3a = Cuboid((height, dims[side_2] - middle, small))
    block_2b = Cuboid((height, dims[side_2] - middle, dims[side_3]))
    block_3b = Cuboid((height, dims[side_3] - small, middle))

    if block_2a.volume < block_2b.volume:
        blocks.extend((block_2a, block_3a))
    else:
        blocks.extend((block_2b, block_3b))

    kept = [b for b in blocks if b.dims[0] > exact_fit_tolerance]
    return sorted(kept, key=lambda b: dimension_key(b.volume))

# src/cuboid_packer/packing/first_fit.py

from __future__ import annotations

import logging
from typing import Any, Hashable, Iterable, Optional, Sequence, Union

from cuboid_packer.errors import InvariantViolationError, ItemsDoNotFitError, TooManyItemsError
from cuboid_packer.geometry import Cuboid
from cuboid_packer.items import Item, sort_decreasing
from cuboid_packer.packing.bin import Bin
from cuboid_packer.scalars import coerce_dims

logger = logging.getLogger(__name__)

ItemInput = Union[Item, tuple[Hashable, Sequence[Any]]]


def to_items(items: Iterable[ItemInput], scalar: str = "auto") -> list[Item]:
    """Accept Item objects or (id, (d1, d2, d3)) pairs."""
    out: list[Item] = []
    for entry in items:
        if isinstance(entry, Item):
            if scalar == "auto":
                out.append(entry)
            else:
                out.append(Item(entry.id, coerce_dims(entry.cuboid.dims, scalar)))
            continue
        item_id, dims = entry
        out.append(Item(item_id, coerce_dims(dims, scalar)))
    return out


def check_feasible(template: Bin, items: list[Item]) -> None:
    """Every item must fit the empty bin, otherwise packing would never finish."""
    offenders = [item.id for item in items if not template.fits_empty(item)]
    if offenders:
        logger.debug("%d item(s) larger than bin %r", len(offenders), template.template)
        raise ItemsDoNotFitError(offenders)


def _first_placeable(current: Bin, remaining: list[Item]) -> Optional[int]:
    for index, item in enumerate(remaining):
        if current.try_place(item):
            return index
    return None


def pack_items(
    template: Union[Bin, Cuboid, Sequence[Any]],
    items: Iterable[Item],
    *,
    exact_fit_tolerance: Any = None,
    max_items: Optional[int] = None,
) -> list[Bin]:
    """
    First fit decreasing over identical bins.

    Items are sorted by longest edge, then the open bin is filled with the
    first remaining item that fits, rescanning from the top after every
    placement. When a full scan places nothing the bin is closed and an
    empty copy is opened.

    Returns the bins in the order they were opened. Each bin's `items` are in
    placement order. Raises ItemsDoNotFitError before allocating any bin if
    some item is bigger than the bin.
    """
    items = list(items)
    if max_items is not None and len(items) > max_items:
        raise TooManyItemsError(len(items), max_items)

    if isinstance(template, Bin):
        tolerance = template.exact_fit_tolerance if exact_fit_tolerance is None else exact_fit_tolerance
        empty = Bin(template.template, exact_fit_tolerance=tolerance)
    else:
        empty = Bin(template, exact_fit_tolerance=exact_fit_tolerance or 0)

    check_feasible(empty, items)

    remaining = sort_decreasing(items)
    bins: list[Bin] = []
    current = empty.clone_empty()
    logger.debug("packing %d items into bins of %r", len(remaining), empty.template)

    while remaining:
        index = _first_placeable(current, remaining)
        if index is not None:
            del remaining[index]
            continue

        # Bin full: nothing left fits any of its free blocks.
        if current.is_empty:
            # check_feasible rules this out; bail instead of looping forever
            raise InvariantViolationError(f"Empty bin {empty.template!r} rejected every remaining item")
        bins.append(current)
        logger.debug("closed bin %d with %d items, %d left to pack", len(bins), len(current.items), len(remaining))
        current = current.clone_empty()

    if not current.is_empty:
        bins.append(current)

    logger.debug("packed %d items into %d bins", len(items), len(bins))
    return bins


def pack(
    bin_dimensions: Sequence[Any],
    items: Iterable[ItemInput],
    *,
    scalar: str = "auto",
    exact_fit_tolerance: Any = 0,
    max_items: Optional[int] = None,
) -> list[list[Hashable]]:
    """
    Pack items into as few bins of `bin_dimensions` as the heuristic manages.

    >>> deck = ("deck", (2, 8, 12))
    >>> pack((8, 8, 12), [deck, deck, ("die", (8, 8, 8)), deck, deck])
    [['deck', 'deck', 'deck', 'deck'], ['die']]
    """
    template = Cuboid(coerce_dims(bin_dimensions, scalar))
    bins = pack_items(
        template,
        to_items(items, scalar),
        exact_fit_tolerance=exact_fit_tolerance,
        max_items=max_items,
    )
    return [b.item_ids for b in bins]

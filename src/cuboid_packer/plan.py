"""Turn a validated PackRequest into a PackingResult."""

from __future__ import annotations

import logging
from typing import Optional

from cuboid_packer.metrics import build_result
from cuboid_packer.models import PackingResult, PackRequest
from cuboid_packer.packing.first_fit import pack_items, to_items
from cuboid_packer.settings import Settings

logger = logging.getLogger(__name__)


def build_plan(request: PackRequest, settings: Optional[Settings] = None) -> PackingResult:
    """
    Pack the request's items with the given settings.

    Raises ValueError for an unknown preset or a dimension the scalar type
    rejects, and the errors of pack_items for infeasible or oversized input.
    """
    settings = settings or Settings()
    template = request.bin_cuboid(settings.scalar)
    items = to_items(request.expand_items(), settings.scalar)

    bins = pack_items(
        template,
        items,
        exact_fit_tolerance=settings.exact_fit_tolerance,
        max_items=settings.max_items,
    )
    result = build_result(bins)
    logger.info(
        "packed_items=%d, bins=%d, fill_rate=%.3f",
        result.item_count,
        result.bin_count,
        result.fill_rate,
    )
    return result

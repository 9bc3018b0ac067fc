from __future__ import annotations

from collections import Counter
from typing import Iterable

from cuboid_packer.models import BinReport, PackingResult
from cuboid_packer.packing.bin import Bin


def compute_metrics(packed: Bin) -> tuple[float, float, float]:
    used_volume = float(packed.used_volume)
    bin_volume = float(packed.volume)
    fill_rate = 0.0 if bin_volume == 0 else used_volume / bin_volume
    return used_volume, bin_volume, fill_rate


def build_result(bins: Iterable[Bin]) -> PackingResult:
    reports: list[BinReport] = []
    counts: Counter = Counter()
    for index, packed in enumerate(bins):
        used_volume, bin_volume, fill_rate = compute_metrics(packed)
        item_ids = [str(i) for i in packed.item_ids]
        counts.update(item_ids)
        reports.append(
            BinReport(
                index=index,
                item_ids=item_ids,
                used_volume=used_volume,
                bin_volume=bin_volume,
                fill_rate=fill_rate,
            )
        )

    used_volume = sum(r.used_volume for r in reports)
    total_bin_volume = sum(r.bin_volume for r in reports)
    return PackingResult(
        bins=reports,
        bin_count=len(reports),
        item_count=sum(len(r.item_ids) for r in reports),
        used_volume=used_volume,
        total_bin_volume=total_bin_volume,
        fill_rate=0.0 if total_bin_volume == 0 else used_volume / total_bin_volume,
        counts_by_id=dict(counts),
    )

# src/cuboid_packer/containers.py
"""Named bin templates: usable interior of ISO shipping containers, in meters."""

from __future__ import annotations

from cuboid_packer.errors import UnknownPresetError
from cuboid_packer.geometry import Cuboid
from cuboid_packer.scalars import coerce_dims

BIN_PRESETS_M: dict[str, tuple[float, float, float]] = {
    "20":   (5.900, 2.352, 2.395),
    "20HC": (5.891, 2.330, 2.700),
    "40":   (12.032, 2.352, 2.395),
    "40HC": (12.032, 2.350, 2.700),
    "48HC": (14.470, 2.352, 2.698),
    "53HC": (15.951, 2.489, 2.769),
}
PRESET_ALIASES: dict[str, str] = {"52HC": "53HC"}


def preset_names() -> list[str]:
    return sorted(list(BIN_PRESETS_M) + list(PRESET_ALIASES))


def get_container_dims(preset: str) -> dict[str, float]:
    key = preset.strip().upper()
    key = PRESET_ALIASES.get(key, key)
    if key not in BIN_PRESETS_M:
        raise UnknownPresetError(preset, preset_names())
    length, width, height = BIN_PRESETS_M[key]
    return {"length": length, "width": width, "height": height}


def preset_cuboid(preset: str, scalar: str = "auto") -> Cuboid:
    dims = get_container_dims(preset)
    return Cuboid(coerce_dims((dims["length"], dims["width"], dims["height"]), scalar))

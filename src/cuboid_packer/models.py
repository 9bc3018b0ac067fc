from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from cuboid_packer.containers import preset_cuboid
from cuboid_packer.geometry import Cuboid
from cuboid_packer.scalars import coerce_dims


class BinSpec(BaseModel):
    """Bin dimensions. Orientation does not matter."""

    length: float = Field(gt=0, description="Length of the bin")
    width: float = Field(gt=0, description="Width of the bin")
    height: float = Field(gt=0, description="Height of the bin")

    def dims(self) -> tuple[float, float, float]:
        return (self.length, self.width, self.height)


class ItemSpec(BaseModel):
    """An item type to pack, repeated `quantity` times under the same id."""

    id: str = Field(min_length=1, description="Identifier reported in the packed bins")
    length: float = Field(gt=0, description="Length of the item")
    width: float = Field(gt=0, description="Width of the item")
    height: float = Field(gt=0, description="Height of the item")
    quantity: int = Field(default=1, ge=1, description="Number of identical copies")

    def dims(self) -> tuple[float, float, float]:
        return (self.length, self.width, self.height)


class PackRequest(BaseModel):
    """Bin template (explicit or preset) plus the items to pack."""

    bin: Optional[BinSpec] = Field(default=None, description="Explicit bin dimensions")
    bin_preset: Optional[str] = Field(default=None, description="Named bin, e.g. '40HC'")
    items: list[ItemSpec] = Field(min_length=1, description="Items to pack")

    @model_validator(mode="after")
    def _one_bin_source(self) -> "PackRequest":
        if (self.bin is None) == (self.bin_preset is None):
            raise ValueError("Request must include exactly one of 'bin' or 'bin_preset'")
        return self

    def bin_cuboid(self, scalar: str = "auto") -> Cuboid:
        """Raises UnknownPresetError for an unknown preset."""
        if self.bin_preset is not None:
            return preset_cuboid(self.bin_preset, scalar)
        return Cuboid(coerce_dims(self.bin.dims(), scalar))

    def expand_items(self) -> list[tuple[str, tuple[float, float, float]]]:
        return [(spec.id, spec.dims()) for spec in self.items for _ in range(spec.quantity)]


class BinReport(BaseModel):
    """One packed bin."""

    index: int = Field(ge=0)
    item_ids: list[str] = Field(default_factory=list)
    used_volume: float = 0.0
    bin_volume: float = 0.0
    fill_rate: float = 0.0


class PackingResult(BaseModel):
    """Standard result returned by the CLI and the API."""

    bins: list[BinReport] = Field(default_factory=list)
    bin_count: int = 0
    item_count: int = 0
    used_volume: float = 0.0
    total_bin_volume: float = 0.0
    fill_rate: float = 0.0
    counts_by_id: dict[str, int] = Field(default_factory=dict)

"""Catalog dataclasses — typed representations of catalog/items/*.json entries."""

from __future__ import annotations

from dataclasses import dataclass


SHAPES = ("circle", "rect", "tube", "diamond")


@dataclass(frozen=True)
class ItemSpec:
    """Geometry of one bead type.

    ``length_mm`` runs along the ring (tangential) for rect/tube and is the
    diagonal span for diamond.  ``diameter_mm`` is the radial extent, or
    the literal diameter for circle.
    """

    id: str
    shape: str                          # "circle" | "rect" | "tube" | "diamond"
    length_mm: float
    diameter_mm: float
    label: str = ""
    source_file: str = ""               # path of the JSON file (for error reporting)


@dataclass
class ValidationError:
    item_id: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.item_id}] {self.field}: {self.message}"


@dataclass
class CatalogResult:
    """Result of loading the catalog — item specs + any validation errors."""
    items: list[ItemSpec]
    errors: list[ValidationError]

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0

    def by_id(self) -> dict[str, ItemSpec]:
        """Lookup table used by the engine (item type key -> spec)."""
        return {s.id: s for s in self.items}

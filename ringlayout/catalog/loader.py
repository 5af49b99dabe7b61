"""Catalog loader — reads catalog/items/*.json files, parses and validates them."""

from __future__ import annotations

import json
from pathlib import Path

from .models import SHAPES, ItemSpec, ValidationError, CatalogResult


CATALOG_DIR = Path(__file__).resolve().parent / "items"


# ── Validation ─────────────────────────────────────────────────────

def _validate_item(spec: ItemSpec) -> list[ValidationError]:
    """Run all validation checks on a single item spec."""
    errs: list[ValidationError] = []
    iid = spec.id

    if spec.shape not in SHAPES:
        errs.append(ValidationError(
            iid, "shape",
            f"Unknown shape '{spec.shape}', expected one of {', '.join(SHAPES)}"))

    if spec.length_mm <= 0:
        errs.append(ValidationError(iid, "length_mm", "Must be > 0"))
    if spec.diameter_mm <= 0:
        errs.append(ValidationError(iid, "diameter_mm", "Must be > 0"))

    # A circle is described by its diameter alone
    if spec.shape == "circle" and spec.length_mm != spec.diameter_mm:
        errs.append(ValidationError(
            iid, "length_mm", "Must equal diameter_mm for circle shape"))

    return errs


# ── Parsing ────────────────────────────────────────────────────────

def _parse_item(data: dict, source_file: str = "") -> ItemSpec:
    diameter = float(data["diameter_mm"])
    return ItemSpec(
        id=data["id"],
        shape=data["shape"],
        length_mm=float(data.get("length_mm", diameter)),
        diameter_mm=diameter,
        label=data.get("label", data["id"]),
        source_file=source_file,
    )


# ── Public API ─────────────────────────────────────────────────────

def load_catalog(catalog_dir: Path | None = None) -> CatalogResult:
    """Load all catalog/items/*.json files, parse and validate.

    Returns a CatalogResult with item specs and any validation errors.
    Items that fail to parse are skipped (error recorded).
    Items that parse but have validation issues are still included.
    """
    d = catalog_dir or CATALOG_DIR
    items: list[ItemSpec] = []
    errors: list[ValidationError] = []

    json_files = sorted(d.glob("*.json"))
    if not json_files:
        errors.append(ValidationError("_catalog", "files", f"No .json files found in {d}"))
        return CatalogResult(items=items, errors=errors)

    for path in json_files:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            errors.append(ValidationError(
                path.stem, "json", f"Parse error: {exc}"))
            continue
        except OSError as exc:
            errors.append(ValidationError(
                path.stem, "file", f"Read error: {exc}"))
            continue

        try:
            spec = _parse_item(raw, source_file=str(path))
        except (KeyError, TypeError, ValueError) as exc:
            errors.append(ValidationError(
                raw.get("id", path.stem) if isinstance(raw, dict) else path.stem,
                "parse", f"Missing/invalid field: {exc}"))
            continue

        errors.extend(_validate_item(spec))
        items.append(spec)

    # Check for duplicate IDs across files
    id_counts: dict[str, int] = {}
    for spec in items:
        id_counts[spec.id] = id_counts.get(spec.id, 0) + 1
    for iid, count in id_counts.items():
        if count > 1:
            errors.append(ValidationError(iid, "id", f"Duplicate item ID (appears {count} times)"))

    return CatalogResult(items=items, errors=errors)


def get_item(catalog: list[ItemSpec] | CatalogResult, item_id: str) -> ItemSpec | None:
    """Look up an item spec by ID. Returns None if not found."""
    specs = catalog.items if isinstance(catalog, CatalogResult) else catalog
    for s in specs:
        if s.id == item_id:
            return s
    return None

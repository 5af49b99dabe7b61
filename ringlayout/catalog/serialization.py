"""Catalog serialization — convert dataclasses to JSON-safe dicts."""

from __future__ import annotations

from .models import ItemSpec, CatalogResult


def catalog_to_dict(result: CatalogResult) -> dict:
    """Serialize a CatalogResult to a JSON-safe dict for the web API."""
    return {
        "ok": result.ok,
        "item_count": len(result.items),
        "items": [item_to_dict(s) for s in result.items],
        "errors": [{"item_id": e.item_id, "field": e.field, "message": e.message}
                   for e in result.errors],
    }


def item_to_dict(s: ItemSpec) -> dict:
    """Serialize an ItemSpec to a JSON-safe dict."""
    return {
        "id": s.id,
        "label": s.label,
        "shape": s.shape,
        "length_mm": s.length_mm,
        "diameter_mm": s.diameter_mm,
    }

"""Layout serialization — JSON conversion."""

from __future__ import annotations

from .models import Layout, PlacedItem, Ring, InvalidParameter, MAX_RADIUS_MM


def placed_item_to_dict(it: PlacedItem) -> dict:
    return {
        "id": it.id,
        "type": it.item_type,
        "r": it.radius_mm,
        "theta": it.angle_deg,
        "ring": it.ring_index,
    }


def layout_to_dict(layout: Layout) -> dict:
    """Serialize a Layout to a JSON-safe dict."""
    return {
        "items": [placed_item_to_dict(it) for it in layout.items],
        "rings": [
            {"radius": rg.radius_mm, "div": rg.division}
            for rg in layout.rings
        ],
        "center_item": layout.center_item,
    }


def parse_layout(data: dict) -> Layout:
    """Parse a layout dict back into a Layout.

    Raises InvalidParameter for missing or mistyped fields, ring radii
    outside the work area, negative division counts and beads that name
    a ring the layout does not have.
    """
    try:
        items = tuple(
            PlacedItem(
                id=str(it["id"]),
                item_type=str(it["type"]),
                radius_mm=float(it["r"]),
                angle_deg=float(it["theta"]),
                ring_index=int(it["ring"]),
            )
            for it in data.get("items", [])
        )
        rings = tuple(
            Ring(radius_mm=float(rg["radius"]), division=int(rg.get("div", 0)))
            for rg in data["rings"]
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise InvalidParameter(f"Malformed layout: {exc!r}") from exc

    for i, rg in enumerate(rings):
        if not 0 <= rg.radius_mm <= MAX_RADIUS_MM:
            raise InvalidParameter(
                f"Ring radius {rg.radius_mm}mm outside [0, {MAX_RADIUS_MM}]",
                ring_index=i,
            )
        if rg.division < 0:
            raise InvalidParameter(
                f"Division count must be >= 0, got {rg.division}", ring_index=i)
    for it in items:
        if not 0 <= it.ring_index < len(rings):
            raise InvalidParameter(
                f"Unknown ring index {it.ring_index}",
                ring_index=it.ring_index, item_id=it.id,
            )

    center = data.get("center_item")
    return Layout(items=items, rings=rings, center_item=center or None)

"""Host-facing layout operations.

Every mutating operation runs in two explicit phases:

  1. apply the requested change and validate it (raising a LayoutError
     subclass if it is rejected);
  2. normalise the radius of every ring the change can affect.

Inputs are frozen ``Layout`` values; each call returns a new one, so a
rejected operation leaves the caller's layout exactly as it was.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from .collision import fits_on_ring
from .grid import reassign_division, snap_angle
from .hitbox import Catalog, center_exclusion_radius, outer_radius, spec_for
from .ids import IdGenerator, UuidIds
from .models import (
    Layout, PlacedItem, Ring,
    CapacityExceeded, GeometricInfeasibility, InvalidParameter,
    DEFAULT_RING_DIVISION, DEFAULT_RING_RADIUS_MM, RING_SPACING_MM,
)
from .planner import plan_placement
from .radius import (
    clamp_radius, min_feasible_radius, normalize_all, normalize_ring,
    with_ring_radius,
)


log = logging.getLogger(__name__)


def new_layout() -> Layout:
    """A fresh layout: one default ring, no beads, no center bead."""
    return Layout(rings=(Ring(DEFAULT_RING_RADIUS_MM, DEFAULT_RING_DIVISION),))


def _require_item(layout: Layout, item_id: str) -> PlacedItem:
    item = layout.find_item(item_id)
    if item is None:
        raise InvalidParameter(f"Unknown bead id '{item_id}'", item_id=item_id)
    return item


# ── Queries ────────────────────────────────────────────────────────


def can_place(
    layout: Layout,
    ring_index: int,
    radius: float,
    angle_deg: float,
    item_type: str,
    catalog: Catalog,
    ignore_id: str | None = None,
) -> bool:
    """Would a bead of *item_type* fit at (radius, angle) on the ring?

    The angle is snapped to the ring's grid first.  *ignore_id* excludes
    a bead from the check (a bead being moved never collides with
    itself).  Unknown rings and negative radii are simply not placeable.
    """
    if not 0 <= ring_index < len(layout.rings) or radius < 0:
        return False
    ring = layout.rings[ring_index]
    theta = snap_angle(angle_deg, ring.division)
    return fits_on_ring(
        layout, ring_index, catalog, item_type, radius, theta,
        ignore_id=ignore_id,
    )


def design_diameter(layout: Layout, catalog: Catalog) -> float:
    """Overall diameter of the finished piece, center bead included."""
    max_r = 0.0
    for it in layout.items:
        max_r = max(max_r, it.radius_mm + outer_radius(spec_for(catalog, it.item_type)))
    if layout.center_item:
        max_r = max(max_r, center_exclusion_radius(spec_for(catalog, layout.center_item)))
    return max_r * 2


# ── Beads ──────────────────────────────────────────────────────────


def place(
    layout: Layout,
    ring_index: int,
    item_type: str,
    catalog: Catalog,
    ids: IdGenerator | None = None,
) -> tuple[Layout, PlacedItem]:
    """Add a bead to a ring at the first feasible position.

    Returns the new layout and the placed bead (with its final radius
    after normalisation).
    """
    angle, r = plan_placement(layout, ring_index, item_type, catalog)

    item_id = (ids or UuidIds()).new_id()
    if layout.find_item(item_id) is not None:
        raise InvalidParameter(f"Duplicate bead id '{item_id}'", item_id=item_id)

    item = PlacedItem(
        id=item_id, item_type=item_type,
        radius_mm=r, angle_deg=angle, ring_index=ring_index,
    )
    placed = replace(layout, items=layout.items + (item,))
    log.info("Placed %s (%s) on ring %d at %.1f°", item_id, item_type, ring_index, angle)

    result = normalize_ring(placed, ring_index, catalog)
    return result, result.find_item(item_id)


def relocate(
    layout: Layout,
    item_id: str,
    angle_deg: float,
    catalog: Catalog,
    ring_index: int | None = None,
) -> Layout:
    """Move a bead to a new angle, optionally onto another ring.

    There is no radius argument: a bead always sits at its ring's radius,
    so the moved bead takes the target ring's radius and its angle is
    snapped to that ring's grid.  Hosts that track a dragged radius drop
    it before calling.

    Raises
    ------
    InvalidParameter
        Unknown bead or ring.
    CapacityExceeded
        The target grid ring is already full.
    GeometricInfeasibility
        The bead would collide at the requested position.
    """
    item = _require_item(layout, item_id)
    target = item.ring_index if ring_index is None else ring_index
    ring = layout.ring(target)

    if target != item.ring_index and ring.division > 0 \
            and len(layout.items_on_ring(target)) >= ring.division:
        raise CapacityExceeded(
            f"Ring holds at most {ring.division} beads",
            ring_index=target, item_id=item_id,
        )

    theta = snap_angle(angle_deg, ring.division)
    if not fits_on_ring(layout, target, catalog, item.item_type,
                        ring.radius_mm, theta, ignore_id=item_id):
        raise GeometricInfeasibility(
            f"Position {theta:.1f}° on ring {target} overlaps another bead",
            ring_index=target, item_id=item_id,
        )

    moved = replace(item, radius_mm=ring.radius_mm, angle_deg=theta, ring_index=target)
    result = replace(
        layout,
        items=tuple(moved if it.id == item_id else it for it in layout.items),
    )
    log.info("Moved %s to ring %d at %.1f°", item_id, target, theta)

    result = normalize_ring(result, target, catalog)
    if target != item.ring_index:
        result = normalize_ring(result, item.ring_index, catalog)
    return result


def remove(layout: Layout, item_id: str, catalog: Catalog) -> Layout:
    """Delete a bead."""
    item = _require_item(layout, item_id)
    result = replace(layout, items=tuple(it for it in layout.items if it.id != item_id))
    log.info("Removed %s from ring %d", item_id, item.ring_index)
    return normalize_ring(result, item.ring_index, catalog)


def reset(layout: Layout) -> Layout:
    """Remove every bead; rings and the center bead stay."""
    return replace(layout, items=())


# ── Rings ──────────────────────────────────────────────────────────


def set_ring_radius(
    layout: Layout, ring_index: int, radius: float, catalog: Catalog,
) -> Layout:
    """Resize a ring, never below the radius its beads need.

    The result is ``max(requested, minimum feasible radius)`` clamped to
    the work area.
    """
    ring = layout.ring(ring_index)
    if radius < 0:
        raise InvalidParameter(f"Radius must be >= 0, got {radius}", ring_index=ring_index)
    exact = min_feasible_radius(
        layout, ring_index, catalog, max(radius, ring.radius_mm),
    )
    final = clamp_radius(max(radius, exact))
    log.info("Ring %d radius %.3f -> %.3fmm (requested %.3f)",
             ring_index, ring.radius_mm, final, radius)
    return with_ring_radius(layout, ring_index, final)


def set_ring_division(
    layout: Layout, ring_index: int, division: int, catalog: Catalog,
) -> Layout:
    """Change a ring's slot count, reflowing its beads onto the new grid."""
    result = reassign_division(layout, ring_index, division, catalog)
    return normalize_ring(result, ring_index, catalog)


def add_ring(
    layout: Layout,
    radius: float | None = None,
    division: int = DEFAULT_RING_DIVISION,
) -> Layout:
    """Append a ring, by default one spacing step outside the last ring."""
    if division < 0:
        raise InvalidParameter(f"Division count must be >= 0, got {division}")
    if radius is not None and radius < 0:
        raise InvalidParameter(f"Radius must be >= 0, got {radius}")
    if radius is None:
        last = layout.rings[-1].radius_mm if layout.rings else DEFAULT_RING_RADIUS_MM
        radius = last + RING_SPACING_MM
    ring = Ring(clamp_radius(radius), division)
    log.info("Added ring %d (radius %.2fmm, %d slots)",
             len(layout.rings), ring.radius_mm, division)
    return replace(layout, rings=layout.rings + (ring,))


def remove_ring(layout: Layout, ring_index: int, catalog: Catalog) -> Layout:
    """Delete a ring together with its beads.

    Beads on later rings move down one index.  The last remaining ring
    cannot be removed.
    """
    layout.ring(ring_index)   # unknown index -> InvalidParameter
    if len(layout.rings) <= 1:
        raise InvalidParameter("Cannot remove the only ring", ring_index=ring_index)

    rings = tuple(rg for i, rg in enumerate(layout.rings) if i != ring_index)
    items = tuple(
        replace(it, ring_index=it.ring_index - 1) if it.ring_index > ring_index else it
        for it in layout.items
        if it.ring_index != ring_index
    )
    dropped = len(layout.items) - len(items)
    log.info("Removed ring %d and %d bead(s)", ring_index, dropped)
    return normalize_all(replace(layout, rings=rings, items=items), catalog)


# ── Center bead ────────────────────────────────────────────────────


def set_center_item(
    layout: Layout, item_type: str | None, catalog: Catalog,
) -> Layout:
    """Set or clear the center bead; every ring is re-normalised."""
    if item_type is not None:
        spec_for(catalog, item_type)
    log.info("Center bead %s -> %s", layout.center_item, item_type)
    return normalize_all(replace(layout, center_item=item_type), catalog)

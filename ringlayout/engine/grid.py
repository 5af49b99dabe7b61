"""Ring grid — angle snapping and division-count changes."""

from __future__ import annotations

import logging
import math
from dataclasses import replace

from .collision import is_feasible
from .hitbox import Catalog
from .models import (
    Layout, PlacedItem,
    CapacityExceeded, GeometricInfeasibility, InvalidParameter,
)


log = logging.getLogger(__name__)


def normalize_angle(angle_deg: float) -> float:
    """Wrap an angle into [0, 360)."""
    a = angle_deg % 360.0
    return 0.0 if a >= 360.0 else a


def snap_angle(angle_deg: float, division: int) -> float:
    """Snap to the nearest grid slot; division 0 only wraps."""
    if division <= 0:
        return normalize_angle(angle_deg)
    step = 360.0 / division
    k = math.floor(normalize_angle(angle_deg) / step + 0.5)   # half a slot rounds up
    return normalize_angle(k * step)


def slot_angles(division: int) -> list[float]:
    """The *division* slot angles in increasing slot order."""
    if division <= 0:
        return []
    step = 360.0 / division
    return [k * step for k in range(division)]


def reassign_division(
    layout: Layout,
    ring_index: int,
    new_division: int,
    catalog: Catalog,
) -> Layout:
    """Move a ring onto a new division grid, keeping the beads' order.

    Beads are sorted by angle and dealt onto slots 0, 1, 2, ... of the new
    grid.  The whole new assignment is checked at the ring's current
    radius and either committed or rejected as a unit.  Radius
    normalisation is left to the caller.

    Raises
    ------
    InvalidParameter
        *new_division* < 1 or unknown ring.
    CapacityExceeded
        More beads than new slots, or shrinking a full ring.
    GeometricInfeasibility
        The reassigned beads would collide at the current radius.
    """
    ring = layout.ring(ring_index)
    if new_division < 1:
        raise InvalidParameter(
            f"Division count must be >= 1, got {new_division}",
            ring_index=ring_index,
        )
    if new_division == ring.division:
        return layout

    on_ring = sorted(layout.items_on_ring(ring_index), key=lambda it: it.angle_deg)

    if len(on_ring) > new_division:
        raise CapacityExceeded(
            f"{len(on_ring)} beads do not fit into {new_division} slots",
            ring_index=ring_index,
        )
    if 0 < new_division < ring.division and len(on_ring) == ring.division:
        raise CapacityExceeded(
            f"Ring is full ({ring.division} slots); free a slot before "
            f"reducing the division count",
            ring_index=ring_index,
        )

    step = 360.0 / new_division
    new_angles = {it.id: normalize_angle(i * step) for i, it in enumerate(on_ring)}
    moved: list[PlacedItem] = [replace(it, angle_deg=new_angles[it.id]) for it in on_ring]

    if not is_feasible(layout, ring_index, catalog, items=moved):
        raise GeometricInfeasibility(
            f"Beads collide on a {new_division}-slot grid at radius "
            f"{ring.radius_mm:.2f}mm",
            ring_index=ring_index,
        )

    rings = tuple(
        replace(rg, division=new_division) if i == ring_index else rg
        for i, rg in enumerate(layout.rings)
    )
    items = tuple(
        replace(it, angle_deg=new_angles[it.id]) if it.id in new_angles else it
        for it in layout.items
    )
    log.info("Ring %d division %d -> %d (%d beads reassigned)",
             ring_index, ring.division, new_division, len(on_ring))
    return replace(layout, rings=rings, items=items)

"""Placement planner — picks the angle for a new bead on a ring."""

from __future__ import annotations

import logging
from typing import Sequence

from .collision import fits_on_ring
from .grid import normalize_angle, slot_angles
from .hitbox import Catalog, spec_for
from .models import Layout, CapacityExceeded, GeometricInfeasibility


log = logging.getLogger(__name__)


def widest_gap_midpoint(angles: Sequence[float]) -> float:
    """Midpoint of the widest angular gap between consecutive angles.

    Gaps wrap around 360°; a lone angle leaves a full 360° gap.  Ties go
    to the first gap in sorted order.  No angles at all -> 0.
    """
    if not angles:
        return 0.0
    ordered = sorted(angles)
    best_gap = -1.0
    best_start = 0.0
    for i, cur in enumerate(ordered):
        nxt = ordered[(i + 1) % len(ordered)]
        gap = (nxt - cur + 360.0) % 360.0 or 360.0
        if gap > best_gap:
            best_gap = gap
            best_start = cur
    return normalize_angle(best_start + best_gap / 2)


def plan_placement(
    layout: Layout,
    ring_index: int,
    item_type: str,
    catalog: Catalog,
) -> tuple[float, float]:
    """Find a collision-free (angle, radius) for a new bead.

    Grid rings take the first free slot in slot order; free rings take the
    middle of the widest gap.  The radius is always the ring's current
    radius: growing the ring is the caller's normalisation step.

    Raises
    ------
    CapacityExceeded
        Every grid slot is already taken.
    GeometricInfeasibility
        No candidate angle is collision-free.
    """
    ring = layout.ring(ring_index)
    spec_for(catalog, item_type)   # unknown type -> InvalidParameter
    on_ring = layout.items_on_ring(ring_index)
    r = ring.radius_mm

    if ring.division > 0:
        if len(on_ring) >= ring.division:
            raise CapacityExceeded(
                f"Ring holds at most {ring.division} beads",
                ring_index=ring_index,
            )
        for angle in slot_angles(ring.division):
            if fits_on_ring(layout, ring_index, catalog, item_type, r, angle):
                log.debug("Ring %d: slot %.1f° free for %s", ring_index, angle, item_type)
                return angle, r
        raise GeometricInfeasibility(
            f"No grid slot fits a '{item_type}' at radius {r:.2f}mm",
            ring_index=ring_index,
        )

    angle = widest_gap_midpoint([it.angle_deg for it in on_ring])
    if not fits_on_ring(layout, ring_index, catalog, item_type, r, angle):
        raise GeometricInfeasibility(
            f"No free gap fits a '{item_type}' at radius {r:.2f}mm",
            ring_index=ring_index,
        )
    return angle, r

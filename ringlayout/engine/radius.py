"""Radius solver — smallest collision-free ring radius for fixed angles.

For a fixed angular assignment, feasibility only improves as the ring
grows: arcs between fixed angles get longer and the beads move away from
the center.  That monotonicity is what makes the bisection valid.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from .collision import is_feasible
from .hitbox import Catalog, center_exclusion_radius, radial_half_span, spec_for
from .models import CLEARANCE_MM, MAX_RADIUS_MM, SEARCH_ITERATIONS, Layout


log = logging.getLogger(__name__)


def clamp_radius(radius: float) -> float:
    return max(0.0, min(MAX_RADIUS_MM, radius))


def center_lower_bound(layout: Layout, ring_index: int, catalog: Catalog) -> float:
    """Smallest radius that keeps every bead on the ring off the center."""
    if not layout.center_item:
        return 0.0
    limit = center_exclusion_radius(spec_for(catalog, layout.center_item)) + CLEARANCE_MM
    lo = 0.0
    for it in layout.items_on_ring(ring_index):
        lo = max(lo, limit + radial_half_span(spec_for(catalog, it.item_type)))
    return lo


def min_feasible_radius(
    layout: Layout,
    ring_index: int,
    catalog: Catalog,
    current_radius: float | None = None,
) -> float:
    """Return the smallest radius at which the ring's beads fit.

    Angles are left untouched; only the shared ring radius varies.  When
    even the work-area cap is infeasible the cap is returned and a
    warning logged.
    """
    ring = layout.ring(ring_index)
    if not layout.items_on_ring(ring_index):
        return 0.0
    if current_radius is None:
        current_radius = ring.radius_mm

    def feasible(r: float) -> bool:
        return is_feasible(layout, ring_index, catalog, radius=r)

    lo = center_lower_bound(layout, ring_index, catalog)

    # Grow until a feasible upper bound is found
    hi = max(current_radius, lo)
    if not feasible(hi):
        step = max(1.0, hi * 0.1)
        while hi < MAX_RADIUS_MM and not feasible(hi):
            hi = min(MAX_RADIUS_MM, hi + step)
            step *= 2
        if not feasible(hi):
            log.warning(
                "Ring %d: no collision-free radius up to %.1fmm; capping",
                ring_index, MAX_RADIUS_MM,
            )
            return MAX_RADIUS_MM

    for _ in range(SEARCH_ITERATIONS):
        mid = (lo + hi) / 2
        if feasible(mid):
            hi = mid
        else:
            lo = mid

    log.debug("Ring %d: minimum radius %.4fmm (current %.4fmm)",
              ring_index, hi, current_radius)
    return hi


def with_ring_radius(layout: Layout, ring_index: int, radius: float) -> Layout:
    """Return a copy with ring *ring_index* and all its beads at *radius*."""
    rings = tuple(
        replace(rg, radius_mm=radius) if i == ring_index else rg
        for i, rg in enumerate(layout.rings)
    )
    items = tuple(
        replace(it, radius_mm=radius) if it.ring_index == ring_index else it
        for it in layout.items
    )
    return replace(layout, rings=rings, items=items)


def normalize_ring(layout: Layout, ring_index: int, catalog: Catalog) -> Layout:
    """Grow ring *ring_index* to its minimum feasible radius if needed.

    Never shrinks a ring, so running it twice changes nothing.
    """
    ring = layout.ring(ring_index)
    exact = min_feasible_radius(layout, ring_index, catalog, ring.radius_mm)
    final = clamp_radius(max(ring.radius_mm, exact))
    if final != ring.radius_mm:
        log.info("Ring %d radius normalised %.3f -> %.3fmm",
                 ring_index, ring.radius_mm, final)
    return with_ring_radius(layout, ring_index, final)


def normalize_all(layout: Layout, catalog: Catalog) -> Layout:
    """Normalise every ring of the layout."""
    for i in range(len(layout.rings)):
        layout = normalize_ring(layout, i, catalog)
    return layout

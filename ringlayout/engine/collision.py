"""Collision detector — separating-axis tests between bead hitboxes.

Touching counts as overlap: hitboxes already carry half the clearance
each, so contact means the beads are exactly at the minimum gap and any
rounding would push them inside it.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from ringlayout.catalog.models import ItemSpec

from .hitbox import (
    Catalog, Hitbox, HitCircle, HitPolygon, Vec,
    hitbox_at, radial_half_span, center_exclusion_radius, spec_for,
)
from .models import CLEARANCE_MM, Layout, PlacedItem


# ── SAT primitives ─────────────────────────────────────────────────


def _dot(a: Vec, b: Vec) -> float:
    return a[0] * b[0] + a[1] * b[1]


def _unit(v: Vec) -> Vec:
    length = math.hypot(v[0], v[1]) or 1.0
    return (v[0] / length, v[1] / length)


def _edge_normals(points: Sequence[Vec]) -> list[Vec]:
    n = len(points)
    normals = []
    for i in range(n):
        ax, ay = points[i]
        bx, by = points[(i + 1) % n]
        normals.append(_unit((-(by - ay), bx - ax)))
    return normals


def _project(axis: Vec, points: Iterable[Vec]) -> tuple[float, float]:
    values = [_dot(axis, p) for p in points]
    return min(values), max(values)


def _project_circle(axis: Vec, circle: HitCircle) -> tuple[float, float]:
    c = _dot(axis, circle.center)
    return c - circle.radius, c + circle.radius


def _intervals_overlap(a: tuple[float, float], b: tuple[float, float]) -> bool:
    return not (a[1] < b[0] or b[1] < a[0])


def _circle_circle(a: HitCircle, b: HitCircle) -> bool:
    dx = a.center[0] - b.center[0]
    dy = a.center[1] - b.center[1]
    reach = a.radius + b.radius
    return dx * dx + dy * dy <= reach * reach


def _circle_polygon(circle: HitCircle, poly: HitPolygon) -> bool:
    for axis in _edge_normals(poly.points):
        if not _intervals_overlap(_project(axis, poly.points),
                                  _project_circle(axis, circle)):
            return False

    # Edge normals alone miss the corner region: also test the axis
    # towards the nearest vertex.
    cx, cy = circle.center
    nearest = min(poly.points, key=lambda p: (p[0] - cx) ** 2 + (p[1] - cy) ** 2)
    axis = _unit((nearest[0] - cx, nearest[1] - cy))
    return _intervals_overlap(_project(axis, poly.points),
                              _project_circle(axis, circle))


def _polygon_polygon(a: HitPolygon, b: HitPolygon) -> bool:
    for axis in _edge_normals(a.points) + _edge_normals(b.points):
        if not _intervals_overlap(_project(axis, a.points),
                                  _project(axis, b.points)):
            return False
    return True


def overlaps(a: Hitbox, b: Hitbox) -> bool:
    """True if the two hitboxes touch or intersect."""
    if isinstance(a, HitCircle) and isinstance(b, HitCircle):
        return _circle_circle(a, b)
    if isinstance(a, HitCircle):
        return _circle_polygon(a, b)
    if isinstance(b, HitCircle):
        return _circle_polygon(b, a)
    return _polygon_polygon(a, b)


# ── Center exclusion ───────────────────────────────────────────────


def clears_center(
    spec: ItemSpec, radius: float, center_spec: ItemSpec | None,
) -> bool:
    """True if a bead at *radius* stays outside the center exclusion disk."""
    if center_spec is None:
        return True
    limit = center_exclusion_radius(center_spec) + CLEARANCE_MM
    return radius - radial_half_span(spec) >= limit


# ── Ring-level predicates ──────────────────────────────────────────


def fits_on_ring(
    layout: Layout,
    ring_index: int,
    catalog: Catalog,
    item_type: str,
    radius: float,
    angle_deg: float,
    *,
    ignore_id: str | None = None,
) -> bool:
    """Check one candidate bead against the center and its ring-mates.

    Every bead on the ring is evaluated at the shared *radius*.
    """
    spec = spec_for(catalog, item_type)
    center_spec = spec_for(catalog, layout.center_item) if layout.center_item else None
    if not clears_center(spec, radius, center_spec):
        return False

    candidate = hitbox_at(spec, radius, angle_deg)
    for other in layout.items_on_ring(ring_index):
        if other.id == ignore_id:
            continue
        other_box = hitbox_at(spec_for(catalog, other.item_type), radius, other.angle_deg)
        if overlaps(candidate, other_box):
            return False
    return True


def is_feasible(
    layout: Layout,
    ring_index: int,
    catalog: Catalog,
    *,
    radius: float | None = None,
    items: Sequence[PlacedItem] | None = None,
) -> bool:
    """True if no pair on the ring overlaps and nobody hits the center.

    *radius* defaults to the ring's own radius; *items* defaults to the
    beads currently on the ring (pass a modified list to test a
    hypothetical assignment).
    """
    r = layout.ring(ring_index).radius_mm if radius is None else radius
    on_ring = layout.items_on_ring(ring_index) if items is None else list(items)
    center_spec = spec_for(catalog, layout.center_item) if layout.center_item else None

    specs = [spec_for(catalog, it.item_type) for it in on_ring]
    for spec in specs:
        if not clears_center(spec, r, center_spec):
            return False

    boxes = [hitbox_at(spec, r, it.angle_deg) for spec, it in zip(specs, on_ring)]
    for i in range(len(boxes)):
        for j in range(i + 1, len(boxes)):
            if overlaps(boxes[i], boxes[j]):
                return False
    return True

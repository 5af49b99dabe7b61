"""Layout audit — re-checks a finished layout on Shapely geometry.

The engine decides feasibility with its own separating-axis tests; this
module repeats the checks with Shapely polygons and reports every
violation it finds.
"""

from __future__ import annotations

from shapely.geometry import Point, Polygon
from shapely.geometry.base import BaseGeometry

from ringlayout.catalog.models import ItemSpec

from .hitbox import Catalog, Hitbox, HitCircle, hitbox_at, center_exclusion_radius
from .models import CLEARANCE_MM, MAX_RADIUS_MM, Layout


AREA_EPS = 1e-9         # intersections below this area count as touching
LENGTH_EPS = 1e-6


def hitbox_geometry(hb: Hitbox) -> BaseGeometry:
    """Convert a hitbox into a Shapely geometry.

    Circles become an inscribed polygon, which can only under-report an
    overlap by a hair, never invent one.
    """
    if isinstance(hb, HitCircle):
        return Point(hb.center).buffer(hb.radius, quad_segs=32)
    return Polygon(hb.points)


def bead_geometry(spec: ItemSpec, radius: float, angle_deg: float, clearance: float) -> BaseGeometry:
    return hitbox_geometry(hitbox_at(spec, radius, angle_deg, clearance))


def _on_grid(angle_deg: float, division: int) -> bool:
    step = 360.0 / division
    k = angle_deg / step
    return abs(k - round(k)) * step < LENGTH_EPS


def audit_layout(layout: Layout, catalog: Catalog) -> list[str]:
    """Validate a layout. Returns violation messages (empty = valid)."""
    problems: list[str] = []

    center_spec = None
    if layout.center_item:
        center_spec = catalog.get(layout.center_item)
        if center_spec is None:
            problems.append(f"Center bead: unknown item type '{layout.center_item}'")

    for i, ring in enumerate(layout.rings):
        if ring.radius_mm < 0 or ring.radius_mm > MAX_RADIUS_MM + LENGTH_EPS:
            problems.append(
                f"Ring {i}: radius {ring.radius_mm:.3f}mm outside [0, {MAX_RADIUS_MM:.1f}]")
        if ring.division < 0:
            problems.append(f"Ring {i}: negative division {ring.division}")

    # ── Per-bead checks ──
    by_ring: dict[int, list[tuple[str, BaseGeometry]]] = {}
    for it in layout.items:
        spec = catalog.get(it.item_type)
        if spec is None:
            problems.append(f"Bead '{it.id}': unknown item type '{it.item_type}'")
            continue
        if not 0 <= it.ring_index < len(layout.rings):
            problems.append(f"Bead '{it.id}': unknown ring {it.ring_index}")
            continue
        ring = layout.rings[it.ring_index]

        if abs(it.radius_mm - ring.radius_mm) > LENGTH_EPS:
            problems.append(
                f"Bead '{it.id}': radius {it.radius_mm:.3f}mm differs from "
                f"ring {it.ring_index} radius {ring.radius_mm:.3f}mm")
        if not 0 <= it.angle_deg < 360:
            problems.append(f"Bead '{it.id}': angle {it.angle_deg} outside [0, 360)")
        if ring.division > 0 and not _on_grid(it.angle_deg, ring.division):
            problems.append(
                f"Bead '{it.id}': angle {it.angle_deg:.4f}° is off the "
                f"{ring.division}-slot grid")

        if center_spec is not None:
            # Physical outline (no clearance) against the inflated center disk
            body = bead_geometry(spec, ring.radius_mm, it.angle_deg, 0.0)
            limit = center_exclusion_radius(center_spec) + CLEARANCE_MM
            gap = Point(0.0, 0.0).distance(body)
            if gap < limit - LENGTH_EPS:
                problems.append(
                    f"Bead '{it.id}': {gap:.3f}mm from the center, "
                    f"needs {limit:.3f}mm")

        by_ring.setdefault(it.ring_index, []).append(
            (it.id, bead_geometry(spec, ring.radius_mm, it.angle_deg, CLEARANCE_MM)))

    # ── Per-ring checks ──
    for idx, beads in sorted(by_ring.items()):
        ring = layout.rings[idx]
        if ring.division > 0 and len(beads) > ring.division:
            problems.append(
                f"Ring {idx}: {len(beads)} beads on {ring.division} slots")
        for a in range(len(beads)):
            for b in range(a + 1, len(beads)):
                id_a, geom_a = beads[a]
                id_b, geom_b = beads[b]
                if not geom_a.intersects(geom_b):
                    continue
                area = geom_a.intersection(geom_b).area
                if area > AREA_EPS:
                    problems.append(
                        f"Ring {idx}: '{id_a}' and '{id_b}' overlap "
                        f"({area:.4f}mm²)")

    return problems


def is_valid_layout(layout: Layout, catalog: Catalog) -> bool:
    return not audit_layout(layout, catalog)

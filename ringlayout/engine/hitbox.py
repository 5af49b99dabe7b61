"""Hitbox builder — collision primitives for beads sitting on a ring.

A bead is always oriented with its long (tangential) axis along the ring,
i.e. rotated by ``angle + 90°`` from the x-axis.  Every primitive is
inflated by half the clearance so two touching hitboxes mean the physical
beads are exactly one clearance apart.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Union

from ringlayout.catalog.models import ItemSpec

from .models import CLEARANCE_MM, InvalidParameter


Vec = tuple[float, float]
Catalog = Mapping[str, ItemSpec]


@dataclass(frozen=True)
class HitCircle:
    center: Vec
    radius: float


@dataclass(frozen=True)
class HitPolygon:
    points: tuple[Vec, ...]     # convex, in winding order


Hitbox = Union[HitCircle, HitPolygon]


def spec_for(catalog: Catalog, item_type: str) -> ItemSpec:
    """Catalog lookup that raises InvalidParameter for unknown types."""
    spec = catalog.get(item_type)
    if spec is None:
        raise InvalidParameter(f"Unknown item type '{item_type}'")
    return spec


# ── Polar helpers ──────────────────────────────────────────────────


def polar_to_xy(radius: float, angle_deg: float) -> Vec:
    th = math.radians(angle_deg)
    return (radius * math.cos(th), radius * math.sin(th))


def ring_basis(angle_deg: float) -> tuple[Vec, Vec]:
    """Return (tangential, radial) unit vectors at *angle_deg*."""
    th = math.radians(angle_deg)
    c, s = math.cos(th), math.sin(th)
    return (-s, c), (c, s)


def _offset(center: Vec, t: Vec, r: Vec, dt: float, dr: float) -> Vec:
    return (
        center[0] + t[0] * dt + r[0] * dr,
        center[1] + t[1] * dt + r[1] * dr,
    )


# ── Hitboxes ───────────────────────────────────────────────────────


def make_hitbox(
    spec: ItemSpec,
    center: Vec,
    angle_deg: float,
    clearance: float = CLEARANCE_MM,
) -> Hitbox:
    """Build the inflated collision primitive for a bead at *center*."""
    pad = clearance / 2
    t, r = ring_basis(angle_deg)

    if spec.shape == "circle":
        return HitCircle(center, spec.diameter_mm / 2 + pad)

    if spec.shape in ("rect", "tube"):
        hx = spec.length_mm / 2 + pad     # tangential half-length
        hy = spec.diameter_mm / 2 + pad   # radial half-thickness
        return HitPolygon((
            _offset(center, t, r, +hx, +hy),
            _offset(center, t, r, -hx, +hy),
            _offset(center, t, r, -hx, -hy),
            _offset(center, t, r, +hx, -hy),
        ))

    if spec.shape == "diamond":
        # Rhombus with its tips on the tangential and radial axes
        h = spec.diameter_mm / 2 + pad
        return HitPolygon((
            _offset(center, t, r, 0.0, +h),
            _offset(center, t, r, +h, 0.0),
            _offset(center, t, r, 0.0, -h),
            _offset(center, t, r, -h, 0.0),
        ))

    # Unknown shape: fall back to the circumscribing circle
    return HitCircle(center, outer_radius(spec) + pad)


def hitbox_at(
    spec: ItemSpec, radius: float, angle_deg: float,
    clearance: float = CLEARANCE_MM,
) -> Hitbox:
    """Hitbox of a bead placed at polar position (radius, angle)."""
    return make_hitbox(spec, polar_to_xy(radius, angle_deg), angle_deg, clearance)


# ── Radial extents ─────────────────────────────────────────────────


def radial_half_span(spec: ItemSpec) -> float:
    """Half the bead's extent along the ring normal."""
    return spec.diameter_mm / 2


def center_exclusion_radius(spec: ItemSpec | None) -> float:
    """Radius of the disk reserved by the center bead.

    Uses the circumscribing circle, since the center bead's orientation
    relative to each ring bead is not modelled.
    """
    if spec is None:
        return 0.0
    if spec.shape == "circle":
        return spec.diameter_mm / 2
    if spec.shape == "diamond":
        return spec.length_mm / 2       # the diagonal is the length
    return math.hypot(spec.length_mm / 2, spec.diameter_mm / 2)


def outer_radius(spec: ItemSpec) -> float:
    """Circumscribing radius of a ring bead, used for the design diameter."""
    if spec.shape == "diamond":
        return spec.length_mm / 2
    return math.hypot(spec.length_mm / 2, spec.diameter_mm / 2)

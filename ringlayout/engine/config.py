"""Shared physical constants for the ring-layout engine.

These values describe the workspace and the minimum gap kept between
beads.  The hitbox builder, the collision detector and the radius solver
all derive their parameters from this single source of truth.

Change a value here and every stage will stay in sync automatically.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutRules:
    """Physical layout rules.

    All distances are in millimetres.
    """

    clearance_mm: float = 0.2
    """Minimum surface-to-surface gap between two beads (and between a
    ring bead and the center bead)."""

    guide_diameters_mm: tuple[float, ...] = (20.0, 40.0, 60.0)
    """Diameters of the printed guide circles.  The largest one bounds
    the work area."""

    radius_search_iterations: int = 40
    """Bisection rounds for the minimum-radius search.  40 rounds over a
    30mm bracket converge well below a micrometre."""

    default_ring_radius_mm: float = 8.0
    """Radius of the first ring of a new layout."""

    default_ring_division: int = 12
    """Grid slots on a newly added ring."""

    ring_spacing_mm: float = 2.0
    """Radius step used when a ring is added without an explicit radius."""

    # ── Derived helpers ────────────────────────────────────────────

    @property
    def workarea_diameter_mm(self) -> float:
        """Diameter of the usable work area (largest guide circle)."""
        return max(self.guide_diameters_mm)

    @property
    def max_radius_mm(self) -> float:
        """Hard cap for any ring radius."""
        return self.workarea_diameter_mm / 2


# Module-level singleton; models.py derives its constants from it.
LAYOUT_RULES = LayoutRules()

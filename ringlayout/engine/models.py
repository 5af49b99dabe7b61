"""Layout dataclasses, error types and configuration constants."""

from __future__ import annotations

from dataclasses import dataclass


# ── Layout dataclasses ─────────────────────────────────────────────


@dataclass(frozen=True)
class PlacedItem:
    """A bead with a resolved polar position on a ring."""

    id: str
    item_type: str          # catalog key
    radius_mm: float
    angle_deg: float        # [0, 360)
    ring_index: int


@dataclass(frozen=True)
class Ring:
    """A circle the beads sit on.

    ``division == 0`` leaves the angle free; ``division == n`` allows only
    the ``n`` slots at ``k * 360 / n`` degrees.
    """

    radius_mm: float
    division: int = 0


@dataclass(frozen=True)
class Layout:
    """Complete snapshot handed to (and returned by) every engine call.

    Frozen: operations build a new Layout instead of editing this one, so
    a failed operation leaves the caller's layout untouched.
    """

    items: tuple[PlacedItem, ...] = ()
    rings: tuple[Ring, ...] = ()
    center_item: str | None = None

    def items_on_ring(self, ring_index: int) -> list[PlacedItem]:
        return [it for it in self.items if it.ring_index == ring_index]

    def find_item(self, item_id: str) -> PlacedItem | None:
        for it in self.items:
            if it.id == item_id:
                return it
        return None

    def ring(self, ring_index: int) -> Ring:
        """Return ring *ring_index* or raise InvalidParameter."""
        if not 0 <= ring_index < len(self.rings):
            raise InvalidParameter(
                f"Unknown ring index {ring_index} "
                f"(layout has {len(self.rings)} ring(s))",
                ring_index=ring_index,
            )
        return self.rings[ring_index]


# ── Errors ─────────────────────────────────────────────────────────


class LayoutError(Exception):
    """Base class for every rejected engine operation."""

    kind = "layout_error"

    def __init__(
        self,
        reason: str,
        *,
        ring_index: int | None = None,
        item_id: str | None = None,
    ) -> None:
        self.reason = reason
        self.ring_index = ring_index
        self.item_id = item_id
        where = []
        if ring_index is not None:
            where.append(f"ring {ring_index}")
        if item_id is not None:
            where.append(f"item '{item_id}'")
        prefix = f"[{', '.join(where)}] " if where else ""
        super().__init__(f"{prefix}{reason}")


class GeometricInfeasibility(LayoutError):
    """No collision-free position or radius exists under the constraints."""

    kind = "geometric_infeasibility"


class CapacityExceeded(LayoutError):
    """The ring's grid slots are all taken."""

    kind = "capacity_exceeded"


class InvalidParameter(LayoutError):
    """Bad division count, unknown ring index, item id or item type."""

    kind = "invalid_parameter"


# ── Configuration ──────────────────────────────────────────────────

from .config import LAYOUT_RULES

# ── Derived from shared LayoutRules (ringlayout.engine.config) ─────
# Changing LAYOUT_RULES automatically updates these.
CLEARANCE_MM = LAYOUT_RULES.clearance_mm
MAX_RADIUS_MM = LAYOUT_RULES.max_radius_mm
SEARCH_ITERATIONS = LAYOUT_RULES.radius_search_iterations
DEFAULT_RING_RADIUS_MM = LAYOUT_RULES.default_ring_radius_mm
DEFAULT_RING_DIVISION = LAYOUT_RULES.default_ring_division
RING_SPACING_MM = LAYOUT_RULES.ring_spacing_mm

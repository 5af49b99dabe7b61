"""Engine — collision-free bead placement on concentric rings.

Submodules:
  config        Shared physical rules (clearance, work area, search depth).
  models        Layout dataclasses, error types and derived constants.
  hitbox        Oriented collision primitives for beads on a ring.
  collision     Separating-axis tests, center exclusion, ring feasibility.
  grid          Angle snapping and division-count reflow.
  radius        Minimum feasible ring radius and normalisation.
  planner       Angle choice for a new bead.
  operations    Host-facing operations (place, relocate, rings, center).
  audit         Independent Shapely re-check of a finished layout.
  serialization JSON conversion (layout_to_dict, parse_layout).
"""

from .config import LayoutRules, LAYOUT_RULES
from .models import (
    PlacedItem, Ring, Layout,
    LayoutError, GeometricInfeasibility, CapacityExceeded, InvalidParameter,
)
from .hitbox import HitCircle, HitPolygon, hitbox_at, make_hitbox
from .collision import overlaps, fits_on_ring, is_feasible
from .grid import snap_angle, reassign_division
from .radius import min_feasible_radius, normalize_ring, normalize_all
from .planner import plan_placement, widest_gap_midpoint
from .ids import SequentialIds, UuidIds
from .operations import (
    new_layout, can_place, design_diameter,
    place, relocate, remove, reset,
    set_ring_radius, set_ring_division, add_ring, remove_ring,
    set_center_item,
)
from .audit import audit_layout, is_valid_layout
from .serialization import layout_to_dict, parse_layout, placed_item_to_dict

__all__ = [
    # Config
    "LayoutRules", "LAYOUT_RULES",
    # Models
    "PlacedItem", "Ring", "Layout",
    "LayoutError", "GeometricInfeasibility", "CapacityExceeded", "InvalidParameter",
    # Geometry
    "HitCircle", "HitPolygon", "hitbox_at", "make_hitbox",
    "overlaps", "fits_on_ring", "is_feasible",
    # Grid / radius / planner
    "snap_angle", "reassign_division",
    "min_feasible_radius", "normalize_ring", "normalize_all",
    "plan_placement", "widest_gap_midpoint",
    # Ids
    "SequentialIds", "UuidIds",
    # Operations
    "new_layout", "can_place", "design_diameter",
    "place", "relocate", "remove", "reset",
    "set_ring_radius", "set_ring_division", "add_ring", "remove_ring",
    "set_center_item",
    # Audit / serialization
    "audit_layout", "is_valid_layout",
    "layout_to_dict", "parse_layout", "placed_item_to_dict",
]

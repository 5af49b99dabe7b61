"""Tests for the host-facing layout operations.

Covers the four reference scenarios:
  - 12 × ⌀1 beads fill a 12-slot ring of radius 8; the 13th is rejected
  - a tube between two tubes 10° apart at radius 5 does not fit
  - a ⌀2 bead clears a ⌀10 center bead at r=6.5 but not at r=4
  - 12 → 6 slots reflows six beads in order; 6 → 5 is rejected

plus relocation, removal, ring management, the center bead and the
design diameter.  Every operation returns a new Layout and leaves its
input untouched.
"""

from __future__ import annotations

import math
import unittest

from ringlayout.engine import operations as ops
from ringlayout.engine.ids import SequentialIds
from ringlayout.engine.models import (
    Layout, Ring, MAX_RADIUS_MM,
    CapacityExceeded, GeometricInfeasibility, InvalidParameter,
)
from tests.layout_fixture import (
    make_catalog, bead, make_ring_of_dots, make_two_tubes, make_centered_layout,
)


class TestScenarios(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_fill_grid_ring(self):
        ids = SequentialIds()
        layout = ops.new_layout()
        for k in range(12):
            layout, item = ops.place(layout, 0, "dot1", self.catalog, ids=ids)
            self.assertAlmostEqual(item.angle_deg, 30.0 * k)
            self.assertEqual(item.radius_mm, 8.0)
        self.assertEqual(len(layout.items), 12)
        self.assertEqual(layout.rings[0].radius_mm, 8.0)
        with self.assertRaises(CapacityExceeded):
            ops.place(layout, 0, "dot1", self.catalog, ids=ids)

    def test_tube_between_tubes(self):
        self.assertFalse(ops.can_place(make_two_tubes(), 0, 5.0, 5.0, "tube4", self.catalog))

    def test_center_clearance(self):
        layout = make_centered_layout()
        self.assertFalse(ops.can_place(layout, 0, 4.0, 0.0, "dot2", self.catalog))
        self.assertTrue(ops.can_place(layout, 0, 6.5, 0.0, "dot2", self.catalog))

    def test_division_reflow(self):
        items = tuple(bead(f"d{k}", "dot1", 8.0, 30.0 + 60.0 * k) for k in range(6))
        layout = Layout(items=items, rings=(Ring(8.0, 12),))

        result = ops.set_ring_division(layout, 0, 6, self.catalog)
        angles = [result.find_item(f"d{k}").angle_deg for k in range(6)]
        for got, want in zip(angles, [0, 60, 120, 180, 240, 300]):
            self.assertAlmostEqual(got, want)

        with self.assertRaises(CapacityExceeded):
            ops.set_ring_division(result, 0, 5, self.catalog)


class TestCanPlace(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_angle_snapped_to_grid(self):
        layout = make_ring_of_dots(1)
        self.assertFalse(ops.can_place(layout, 0, 8.0, 5.0, "dot1", self.catalog))
        self.assertTrue(ops.can_place(layout, 0, 8.0, 25.0, "dot1", self.catalog))

    def test_unknown_ring(self):
        self.assertFalse(ops.can_place(make_ring_of_dots(1), 2, 8.0, 90.0, "dot1", self.catalog))

    def test_negative_radius(self):
        """A mirrored point through the origin is not a placement."""
        layout = Layout(rings=(Ring(8.0, 12),))
        self.assertFalse(ops.can_place(layout, 0, -8.0, 0.0, "dot1", self.catalog))
        self.assertTrue(ops.can_place(layout, 0, 8.0, 0.0, "dot1", self.catalog))

    def test_ignore_self(self):
        layout = make_ring_of_dots(1)
        self.assertTrue(ops.can_place(layout, 0, 8.0, 0.0, "dot1", self.catalog,
                                      ignore_id="d0"))


class TestPlace(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_input_untouched(self):
        layout = ops.new_layout()
        result, item = ops.place(layout, 0, "dot1", self.catalog, ids=SequentialIds())
        self.assertEqual(layout.items, ())
        self.assertEqual(result.items, (item,))
        self.assertEqual(item.id, "bead_1")

    def test_duplicate_id(self):
        layout = Layout(items=(bead("bead_1", "dot1", 8.0, 0.0),), rings=(Ring(8.0, 12),))
        with self.assertRaises(InvalidParameter):
            ops.place(layout, 0, "dot1", self.catalog, ids=SequentialIds())

    def test_default_ids_are_unique(self):
        layout = ops.new_layout()
        layout, a = ops.place(layout, 0, "dot1", self.catalog)
        layout, b = ops.place(layout, 0, "dot1", self.catalog)
        self.assertNotEqual(a.id, b.id)

    def test_unknown_type(self):
        with self.assertRaises(InvalidParameter):
            ops.place(ops.new_layout(), 0, "nope", self.catalog)


class TestRelocate(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_snapped_move(self):
        layout = ops.relocate(make_ring_of_dots(3), "d0", 100.0, self.catalog)
        self.assertAlmostEqual(layout.find_item("d0").angle_deg, 90.0)

    def test_ring_radius_wins(self):
        """A stale bead radius is replaced by the ring's radius on a move."""
        layout = Layout(items=(bead("a", "dot1", 7.0, 0.0),), rings=(Ring(8.0, 12),))
        result = ops.relocate(layout, "a", 120.0, self.catalog)
        self.assertEqual(result.find_item("a").radius_mm, 8.0)

    def test_half_slot_move_rounds_up(self):
        layout = Layout(items=(bead("a", "dot1", 8.0, 0.0),), rings=(Ring(8.0, 12),))
        result = ops.relocate(layout, "a", 75.0, self.catalog)
        self.assertEqual(result.find_item("a").angle_deg, 90.0)

    def test_move_onto_neighbour(self):
        layout = make_ring_of_dots(3)
        with self.assertRaises(GeometricInfeasibility):
            ops.relocate(layout, "d0", 35.0, self.catalog)
        self.assertEqual(layout.find_item("d0").angle_deg, 0.0)

    def test_move_in_place(self):
        layout = make_ring_of_dots(3)
        self.assertEqual(ops.relocate(layout, "d1", 30.0, self.catalog), layout)

    def test_move_to_other_ring(self):
        layout = Layout(
            items=(bead("a", "dot1", 8.0, 0.0),),
            rings=(Ring(8.0, 12), Ring(12.0, 12)),
        )
        result = ops.relocate(layout, "a", 61.0, self.catalog, ring_index=1)
        moved = result.find_item("a")
        self.assertEqual(moved.ring_index, 1)
        self.assertEqual(moved.radius_mm, 12.0)
        self.assertAlmostEqual(moved.angle_deg, 60.0)

    def test_target_ring_full(self):
        full = make_ring_of_dots(12)
        layout = Layout(
            items=full.items + (bead("x", "dot1", 5.0, 0.0, ring=1),),
            rings=(Ring(8.0, 12), Ring(5.0, 0)),
        )
        with self.assertRaises(CapacityExceeded):
            ops.relocate(layout, "x", 15.0, self.catalog, ring_index=0)

    def test_unknown_item(self):
        with self.assertRaises(InvalidParameter):
            ops.relocate(make_ring_of_dots(1), "ghost", 0.0, self.catalog)

    def test_unknown_ring(self):
        with self.assertRaises(InvalidParameter):
            ops.relocate(make_ring_of_dots(1), "d0", 0.0, self.catalog, ring_index=5)


class TestRemoveAndReset(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_remove(self):
        layout = make_ring_of_dots(3)
        result = ops.remove(layout, "d1", self.catalog)
        self.assertEqual([it.id for it in result.items], ["d0", "d2"])
        self.assertEqual(len(layout.items), 3)

    def test_remove_unknown(self):
        with self.assertRaises(InvalidParameter):
            ops.remove(make_ring_of_dots(3), "ghost", self.catalog)

    def test_reset_keeps_rings_and_center(self):
        layout = Layout(
            items=(bead("a", "dot2", 8.0, 0.0),),
            rings=(Ring(8.0, 12), Ring(10.0, 6)),
            center_item="center10",
        )
        result = ops.reset(layout)
        self.assertEqual(result.items, ())
        self.assertEqual(result.rings, layout.rings)
        self.assertEqual(result.center_item, "center10")


class TestRingRadius(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_request_below_minimum(self):
        layout = ops.set_ring_radius(make_two_tubes(), 0, 1.0, self.catalog)
        r = layout.rings[0].radius_mm
        self.assertGreater(r, 5.0)
        self.assertTrue(all(it.radius_mm == r for it in layout.items))

    def test_request_above_minimum(self):
        layout = ops.set_ring_radius(make_two_tubes(), 0, 28.0, self.catalog)
        self.assertEqual(layout.rings[0].radius_mm, 28.0)

    def test_shrink_allowed(self):
        layout = ops.set_ring_radius(make_ring_of_dots(12), 0, 5.0, self.catalog)
        self.assertEqual(layout.rings[0].radius_mm, 5.0)

    def test_clamped_to_work_area(self):
        layout = ops.set_ring_radius(make_ring_of_dots(1), 0, 100.0, self.catalog)
        self.assertEqual(layout.rings[0].radius_mm, MAX_RADIUS_MM)

    def test_negative(self):
        with self.assertRaises(InvalidParameter):
            ops.set_ring_radius(make_ring_of_dots(1), 0, -1.0, self.catalog)


class TestRingManagement(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_new_layout(self):
        layout = ops.new_layout()
        self.assertEqual(layout.rings, (Ring(8.0, 12),))
        self.assertEqual(layout.items, ())
        self.assertIsNone(layout.center_item)

    def test_add_ring_defaults(self):
        layout = ops.add_ring(ops.new_layout())
        self.assertEqual(layout.rings[1], Ring(10.0, 12))

    def test_add_ring_to_empty_layout(self):
        self.assertEqual(ops.add_ring(Layout()).rings, (Ring(10.0, 12),))

    def test_add_ring_clamped(self):
        layout = ops.add_ring(Layout(rings=(Ring(29.5, 0),)))
        self.assertEqual(layout.rings[1].radius_mm, MAX_RADIUS_MM)

    def test_add_ring_explicit(self):
        layout = ops.add_ring(ops.new_layout(), radius=15.0, division=0)
        self.assertEqual(layout.rings[1], Ring(15.0, 0))

    def test_add_ring_invalid(self):
        with self.assertRaises(InvalidParameter):
            ops.add_ring(ops.new_layout(), division=-1)
        with self.assertRaises(InvalidParameter):
            ops.add_ring(ops.new_layout(), radius=-2.0)

    def test_remove_ring_shifts_indices(self):
        layout = Layout(
            items=(
                bead("a", "dot1", 8.0, 0.0, ring=0),
                bead("b", "dot1", 10.0, 0.0, ring=1),
                bead("c", "dot1", 12.0, 0.0, ring=2),
            ),
            rings=(Ring(8.0, 12), Ring(10.0, 12), Ring(12.0, 12)),
        )
        result = ops.remove_ring(layout, 1, self.catalog)
        self.assertEqual(result.rings, (Ring(8.0, 12), Ring(12.0, 12)))
        self.assertIsNone(result.find_item("b"))
        self.assertEqual(result.find_item("a").ring_index, 0)
        self.assertEqual(result.find_item("c").ring_index, 1)

    def test_remove_only_ring(self):
        with self.assertRaises(InvalidParameter):
            ops.remove_ring(ops.new_layout(), 0, self.catalog)

    def test_remove_unknown_ring(self):
        with self.assertRaises(InvalidParameter):
            ops.remove_ring(ops.add_ring(ops.new_layout()), 4, self.catalog)


class TestCenterItem(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_center_grows_rings(self):
        layout = Layout(items=(bead("a", "dot2", 5.0, 0.0),), rings=(Ring(5.0, 12),))
        result = ops.set_center_item(layout, "center10", self.catalog)
        self.assertEqual(result.center_item, "center10")
        self.assertAlmostEqual(result.rings[0].radius_mm, 6.2, places=6)
        self.assertAlmostEqual(result.find_item("a").radius_mm, 6.2, places=6)

    def test_clear_center(self):
        layout = make_centered_layout()
        self.assertIsNone(ops.set_center_item(layout, None, self.catalog).center_item)

    def test_unknown_center(self):
        with self.assertRaises(InvalidParameter):
            ops.set_center_item(ops.new_layout(), "nope", self.catalog)


class TestDesignDiameter(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_empty(self):
        self.assertEqual(ops.design_diameter(ops.new_layout(), self.catalog), 0.0)

    def test_ring_beads(self):
        layout = Layout(
            items=(bead("a", "dot2", 8.0, 0.0), bead("b", "dia3", 10.0, 0.0, ring=1)),
            rings=(Ring(8.0, 12), Ring(10.0, 12)),
        )
        expected = 2 * max(8.0 + math.hypot(1.0, 1.0), 10.0 + 1.5)
        self.assertAlmostEqual(ops.design_diameter(layout, self.catalog), expected)

    def test_center_only(self):
        self.assertAlmostEqual(
            ops.design_diameter(make_centered_layout(), self.catalog), 10.0)


if __name__ == "__main__":
    unittest.main()

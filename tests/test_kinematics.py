import unittest
from pinchchem.core.kinematics import PinchStateMachine, clamp_position, centered_position
from pinchchem.core.types import PinchEvent, Point2D


class TestPinchStateMachine(unittest.TestCase):
    def setUp(self):
        self.pinch = PinchStateMachine(threshold=0.08, refractory=0.120)

    def feed(self, samples):
        return [self.pinch.update(d, t) for t, d in samples]

    def test_single_pinch_fires_one_start_one_release(self):
        """Down-crossing then up-crossing -> exactly one START and one RELEASE."""
        events = self.feed([(0.00, 0.20), (0.05, 0.05), (0.10, 0.03), (0.15, 0.04), (0.20, 0.15), (0.25, 0.30)])
        self.assertEqual(events.count(PinchEvent.START), 1)
        self.assertEqual(events.count(PinchEvent.RELEASE), 1)
        self.assertEqual(events[1], PinchEvent.START)
        self.assertEqual(events[4], PinchEvent.RELEASE)

    def test_refractory_window_blocks_quick_repinch(self):
        """A second down-crossing within 120ms of release fires nothing."""
        self.feed([(0.0, 0.05), (1.0, 0.20)])  # release at t=1.0
        self.assertEqual(self.pinch.update(0.05, 1.05), PinchEvent.NONE)
        self.assertFalse(self.pinch.is_active)
        self.assertEqual(self.pinch.update(0.20, 1.08), PinchEvent.NONE)

    def test_repinch_after_refractory(self):
        self.feed([(0.0, 0.05), (1.0, 0.20)])
        self.assertEqual(self.pinch.update(0.05, 1.12), PinchEvent.START)

    def test_held_closed_through_refractory_starts_once_elapsed(self):
        self.feed([(0.0, 0.05), (1.0, 0.20)])
        self.assertEqual(self.pinch.update(0.05, 1.05), PinchEvent.NONE)
        self.assertEqual(self.pinch.update(0.05, 1.20), PinchEvent.START)

    def test_threshold_is_exclusive(self):
        """Exactly 0.08 is not a pinch."""
        self.assertEqual(self.pinch.update(0.08, 0.0), PinchEvent.NONE)
        self.assertFalse(self.pinch.is_active)

    def test_first_pinch_has_no_debounce(self):
        self.assertEqual(self.pinch.update(0.01, 0.0), PinchEvent.START)

    def test_missing_hand_leaves_state_untouched(self):
        self.pinch.update(0.01, 0.0)
        for t in (0.1, 5.0, 60.0):
            self.assertEqual(self.pinch.update_missing(t), PinchEvent.NONE)
        self.assertTrue(self.pinch.is_active)

    def test_opt_in_tracking_loss_release(self):
        pinch = PinchStateMachine(threshold=0.08, refractory=0.120, loss_release=0.5)
        pinch.update(0.01, 0.0)
        self.assertEqual(pinch.update_missing(0.4), PinchEvent.NONE)
        self.assertEqual(pinch.update_missing(0.6), PinchEvent.RELEASE)
        self.assertFalse(pinch.is_active)
        self.assertEqual(pinch.update_missing(0.7), PinchEvent.NONE)


class TestClamping(unittest.TestCase):
    def test_box_always_inside_display(self):
        """For any pointer target the clamped box is fully contained."""
        W, H, size = 1280, 720, 60
        for x in (-1000, -1, 0, 600, 1219, 1221, 5000):
            for y in (-1000, 0, 300, 659, 661, 5000):
                p = clamp_position(Point2D(x, y), size, size, W, H)
                self.assertGreaterEqual(p.x, 0)
                self.assertGreaterEqual(p.y, 0)
                self.assertLessEqual(p.x + size, W)
                self.assertLessEqual(p.y + size, H)

    def test_inside_position_unchanged(self):
        p = clamp_position(Point2D(100, 200), 60, 60, 1280, 720)
        self.assertEqual((p.x, p.y), (100, 200))

    def test_centered_position(self):
        p = centered_position(Point2D(500, 400), 240, 1280, 720)
        self.assertEqual((p.x, p.y), (380, 280))
        # Near the corner the box is pushed back inside
        p = centered_position(Point2D(10, 10), 240, 1280, 720)
        self.assertEqual((p.x, p.y), (0, 0))


if __name__ == '__main__':
    unittest.main()

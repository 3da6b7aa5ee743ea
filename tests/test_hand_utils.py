import math
import unittest
from pinchchem.hand_utils import preprocess_hand

# Mock for MediaPipe Landmark structure
class MockLandmark:
    def __init__(self, x, y):
        self.x = x
        self.y = y

class MockHand:
    def __init__(self, t_x, t_y, i_x, i_y):
        self.landmark = [MockLandmark(0.5, 0.5) for _ in range(21)]
        self.landmark[4] = MockLandmark(t_x, t_y) # Thumb
        self.landmark[8] = MockLandmark(i_x, i_y) # Index


class TestPreprocess(unittest.TestCase):
    def test_pinch_distance(self):
        """Distance of 0.1 on X axis, normalized space."""
        frame = preprocess_hand(MockHand(0.0, 0.0, 0.1, 0.0), 1280, 720)
        self.assertAlmostEqual(frame.pinch_distance, 0.1)

    def test_pointer_is_mirrored_index_tip(self):
        frame = preprocess_hand(MockHand(0.3, 0.5, 0.25, 0.5), 1000, 800)
        self.assertAlmostEqual(frame.pointer.x, 750.0)
        self.assertAlmostEqual(frame.pointer.y, 400.0)

    def test_raw_tuples_accepted(self):
        pts = [(0.5, 0.5, 0.0)] * 21
        pts[4] = (0.5, 0.5, 0.0)
        pts[8] = (0.5, 0.56, 0.0)
        frame = preprocess_hand(pts, 1280, 720)
        self.assertAlmostEqual(frame.pinch_distance, 0.06)
        self.assertAlmostEqual(frame.pointer.x, 640.0)

    def test_no_hand(self):
        self.assertIsNone(preprocess_hand(None, 1280, 720))

    def test_partial_landmarks(self):
        """Fewer than 9 points means no index tip: not a gesture."""
        self.assertIsNone(preprocess_hand([(0.1, 0.1)] * 5, 1280, 720))

    def test_nan_tip_is_ignored(self):
        hand = MockHand(0.3, 0.3, math.nan, 0.3)
        self.assertIsNone(preprocess_hand(hand, 1280, 720))

    def test_missing_tip_object(self):
        hand = MockHand(0.3, 0.3, 0.3, 0.3)
        hand.landmark[4] = None
        self.assertIsNone(preprocess_hand(hand, 1280, 720))


if __name__ == '__main__':
    unittest.main()

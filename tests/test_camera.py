import unittest
from unittest import mock

import numpy as np

from pinchchem.main import ThreadedCamera


class FakeCapture:
    """Delivers `count` numbered frames, then reports the device as gone."""
    def __init__(self, count):
        self.frames = [np.full((4, 4, 3), i, dtype=np.uint8) for i in range(1, count + 1)]
        self.released = False

    def set(self, prop, value):
        return True

    def read(self):
        if self.frames:
            return True, self.frames.pop(0)
        return False, None

    def release(self):
        self.released = True


class TestThreadedCamera(unittest.TestCase):
    def open(self, count):
        fake = FakeCapture(count)
        with mock.patch("pinchchem.main.cv2.VideoCapture", return_value=fake):
            cam = ThreadedCamera(0)
        cam._thread.join(timeout=1.0)
        return cam, fake

    def test_keeps_only_newest_frame_with_sequence(self):
        cam, _ = self.open(3)
        seq, frame = cam.latest()
        self.assertEqual(seq, 3)
        self.assertEqual(int(frame[0, 0, 0]), 3)
        cam.release()

    def test_latest_returns_a_copy(self):
        cam, _ = self.open(2)
        _, frame = cam.latest()
        frame[:] = 0
        _, again = cam.latest()
        self.assertEqual(int(again[0, 0, 0]), 2)
        cam.release()

    def test_device_loss_stops_the_reader(self):
        cam, _ = self.open(1)
        self.assertFalse(cam.alive)

    def test_no_frame_yet(self):
        cam, _ = self.open(0)
        self.assertEqual(cam.latest(), (0, None))

    def test_context_manager_releases_hardware(self):
        cam, fake = self.open(2)
        with cam:
            pass
        self.assertTrue(fake.released)
        self.assertFalse(cam.alive)


if __name__ == '__main__':
    unittest.main()

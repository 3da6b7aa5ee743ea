"""
PinchChem - Main Entry Point.
============================

This module is the host loop around the PinchChem core:
1. Initializing the Perception Layer (MediaPipe + Camera Thread).
2. Linking the Control Nervous System (PinchChemController).
3. Rendering the Feedback Loop (HUD).

Usage:
    Run directly to start the application:
    $ python -m pinchchem.main
"""
import logging
import threading
import time
from typing import Optional, Tuple

import cv2
import mediapipe as mp
import numpy as np

# Internal Modules
from pinchchem.config import CONFIG
from pinchchem.control.controller import PinchChemController
from pinchchem.ui.hud import HUD

logger = logging.getLogger(__name__)


class ThreadedCamera:
    """
    Latest-frame camera reader for the PinchChem table.

    A background thread keeps only the newest frame. Every grabbed frame gets
    a sequence number, so the main loop can skip a frame it already fed to
    MediaPipe instead of re-tracking (and re-ticking the controller on) a
    stale image.
    """
    def __init__(self, src: int = 0, width: int = None, height: int = None):
        self.cap = cv2.VideoCapture(src)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, width or CONFIG["VIEWPORT_WIDTH"])
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height or CONFIG["VIEWPORT_HEIGHT"])
        self.cap.set(cv2.CAP_PROP_FPS, CONFIG["TARGET_FPS"])

        self._frame: Optional[np.ndarray] = None
        self._seq = 0
        self._lock = threading.Lock()
        self._stopped = threading.Event()

        ok, frame = self.cap.read()
        if ok:
            self._frame, self._seq = frame, 1

        self._thread = threading.Thread(target=self._grab_loop, name="pinchchem-camera", daemon=True)
        self._thread.start()

    def _grab_loop(self):
        while not self._stopped.is_set():
            ok, frame = self.cap.read()
            if not ok:
                logger.warning("camera stopped delivering frames")
                self._stopped.set()
                break
            with self._lock:
                self._frame = frame
                self._seq += 1

    @property
    def alive(self) -> bool:
        return not self._stopped.is_set()

    def latest(self) -> Tuple[int, Optional[np.ndarray]]:
        """(sequence number, copy of the newest frame). Sequence 0 means nothing arrived yet."""
        with self._lock:
            if self._frame is None:
                return self._seq, None
            return self._seq, self._frame.copy()

    def release(self):
        self._stopped.set()
        self._thread.join(timeout=1.0)
        self.cap.release()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()
        return False


def _wait_for_first_frame(cam: ThreadedCamera, timeout: float = 3.0) -> np.ndarray:
    deadline = time.time() + timeout
    while True:
        _, frame = cam.latest()
        if frame is not None:
            return frame
        if not cam.alive or time.time() > deadline:
            break
        time.sleep(0.01)
    raise RuntimeError("❌ Camera not available")


def main():
    """
    Main Event Loop.
    """
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    # 1. Boot Sequence
    print("🧪 PINCHCHEM: ONLINE")
    print("   -> Press 'ESC' to Exit")
    print("   -> Press 'C' to Clear the table")

    with ThreadedCamera(CONFIG["CAMERA_INDEX"]) as cam:
        # 2. Initialize Subsystems (table sized to what the camera really delivers)
        h, w, _ = _wait_for_first_frame(cam).shape
        hud = HUD()
        pilot = PinchChemController(width=w, height=h, renderer=hud, sinks=[hud])
        window_name = "PinchChem"
        cv2.namedWindow(window_name)

        # MediaPipe Setup (single hand)
        hands = mp.solutions.hands.Hands(
            max_num_hands=1,
            min_detection_confidence=CONFIG["MIN_DETECTION_CONFIDENCE"],
            min_tracking_confidence=CONFIG["MIN_TRACKING_CONFIDENCE"],
            model_complexity=0
        )

        last_seq = 0
        prev_time = 0

        try:
            while cam.alive:
                # --- 1. PERCEPTION ---
                seq, frame = cam.latest()
                if frame is None or seq == last_seq:
                    if cv2.waitKey(1) == 27: break
                    continue
                last_seq = seq

                # Landmarks come from the raw frame; the core mirrors X itself
                results = hands.process(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
                hand = results.multi_hand_landmarks[0] if results.multi_hand_landmarks else None

                # --- 2. CONTROL ---
                pilot.process(hand)

                # --- 3. FEEDBACK ---
                frame = cv2.flip(frame, 1)
                hud.render(frame, pilot)

                curr = time.time()
                fps = 1/(curr-prev_time) if (curr-prev_time)>0 else 0
                prev_time = curr
                hud.draw_fps(frame, fps)

                cv2.imshow(window_name, frame)

                # Input Handling
                k = cv2.waitKey(1)
                if k == 27: break # ESC
                elif k in (ord('c'), ord('C')): pilot.clear()

        finally:
            # Graceful Shutdown
            hands.close()
            cv2.destroyAllWindows()
            print("🔴 SYSTEM OFFLINE")


if __name__ == "__main__":
    main()

"""
PinchChem Kinematics.
Pinch edge detection and display-bounds math.
"""
import numpy as np
from typing import Optional

from pinchchem.config import CONFIG
from pinchchem.core.types import PinchEvent, Point2D


class PinchStateMachine:
    """
    Debounced edge detector for the thumb/index pinch.

    Idle -> Active when the distance drops below the threshold and the
    refractory window since the last release has elapsed.
    Active -> Idle when the distance reaches the threshold again.
    """
    def __init__(self, threshold=None, refractory=None, loss_release=None):
        self.threshold = threshold if threshold is not None else CONFIG["PINCH_THRESHOLD"]
        self.refractory = refractory if refractory is not None else CONFIG["PINCH_REFRACTORY"]
        self.loss_release = loss_release if loss_release is not None else CONFIG["TRACKING_LOSS_RELEASE"]

        self.is_active = False
        self.last_release_time: Optional[float] = None
        self.last_seen_time: Optional[float] = None

    def update(self, distance: float, now: float) -> PinchEvent:
        """Feeds one tracked frame. Returns at most one edge."""
        self.last_seen_time = now
        is_closed = distance < self.threshold

        if is_closed and not self.is_active:
            if self.last_release_time is None or (now - self.last_release_time) >= self.refractory:
                self.is_active = True
                return PinchEvent.START
        elif not is_closed and self.is_active:
            self.is_active = False
            self.last_release_time = now
            return PinchEvent.RELEASE

        return PinchEvent.NONE

    def update_missing(self, now: float) -> PinchEvent:
        """
        Feeds one frame without a hand.
        State is left untouched unless the opt-in loss timeout has expired.
        """
        if not self.is_active or self.loss_release is None or self.last_seen_time is None:
            return PinchEvent.NONE
        if (now - self.last_seen_time) > self.loss_release:
            self.is_active = False
            self.last_release_time = now
            return PinchEvent.RELEASE
        return PinchEvent.NONE


def clamp_position(pos: Point2D, w: float, h: float, bounds_w: float, bounds_h: float) -> Point2D:
    """
    Clamps a top-left corner so a (w, h) box stays inside the display.
    A box larger than the display is pinned to the origin.
    """
    x = float(np.clip(pos.x, 0, max(bounds_w - w, 0)))
    y = float(np.clip(pos.y, 0, max(bounds_h - h, 0)))
    return Point2D(x, y)


def centered_position(center: Point2D, size: float, bounds_w: float, bounds_h: float) -> Point2D:
    """Top-left corner of a square box centered on `center`, clamped to the display."""
    return clamp_position(Point2D(center.x - size / 2, center.y - size / 2), size, size, bounds_w, bounds_h)

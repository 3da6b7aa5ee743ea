"""
PinchChem Landmark Processing Utilities.
=======================================

Turns one hand's raw landmark set into the two numbers the core cares about:
1. Where the pointer is on the display (mirrored, in pixels).
2. How far apart thumb and index tips are (normalized).

Anything that is not a usable hand comes back as `None`.
The controller treats `None` as "no gesture this tick".
"""

import numpy as np
from typing import Any, Optional

from pinchchem.core.types import HandFrame, Point2D

THUMB_TIP = 4
INDEX_TIP = 8


def _landmark_rows(landmark_list: Any) -> Optional[np.ndarray]:
    """
    Converts MediaPipe objects or raw sequences to an (N, 2) NumPy matrix.
    """
    if landmark_list is None:
        return None
    # MediaPipe NormalizedLandmarkList -> repeated field
    if hasattr(landmark_list, "landmark"):
        landmark_list = landmark_list.landmark
    try:
        if len(landmark_list) <= INDEX_TIP:
            return None
    except TypeError:
        return None

    rows = []
    for lm in landmark_list:
        if lm is None:
            rows.append((np.nan, np.nan))
        elif hasattr(lm, "x"):
            rows.append((lm.x, lm.y))
        else:
            rows.append((lm[0], lm[1]))
    return np.array(rows, dtype=np.float64)


def preprocess_hand(landmark_list: Any, viewport_w: float, viewport_h: float) -> Optional[HandFrame]:
    """
    Transforms a raw landmark set into a HandFrame.

    Steps:
    1. Convert to NumPy.
    2. Pinch distance: Euclidean norm of Index(8) - Thumb(4), normalized space.
    3. Pointer: Index(8), mirrored on X, scaled to the viewport.
    """
    coords = _landmark_rows(landmark_list)
    if coords is None:
        return None

    thumb = coords[THUMB_TIP]
    index = coords[INDEX_TIP]
    if np.isnan(thumb).any() or np.isnan(index).any():
        return None

    pinch_distance = float(np.linalg.norm(index - thumb))

    # Selfie view: the camera sees the hand mirrored
    x = viewport_w - index[0] * viewport_w
    y = index[1] * viewport_h

    return HandFrame(Point2D(float(x), float(y)), pinch_distance)

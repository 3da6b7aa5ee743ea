"""
PinchChem State Management.
Holds the per-gesture interaction state: the one drag and the one popup.
"""
from typing import Optional

from pinchchem.core.types import DragSession, PendingBondChoice, Point2D


class StateManager:
    def __init__(self):
        # --- TRANSACTIONS (at most one of each) ---
        self.drag: Optional[DragSession] = None
        self.pending_choice: Optional[PendingBondChoice] = None

        # --- POINTER (exposed for the HUD cursor) ---
        self.pointer: Optional[Point2D] = None
        self.hand_visible = False
        self.is_pinching = False

    @property
    def is_dragging(self) -> bool:
        return self.drag is not None

    @property
    def has_popup(self) -> bool:
        return self.pending_choice is not None

    def reset_interaction(self):
        """Drops any open drag or popup (used by clear)."""
        self.drag = None
        self.pending_choice = None

"""
PinchChem Controller.
Acts as the central nervous system: one call per camera frame.
"""

import logging
import time
from typing import Any, Iterable, Optional

from pinchchem.chemistry.bonding import BondIntermediateMachine
from pinchchem.chemistry.clustering import ClusterEngine
from pinchchem.config import CONFIG
from pinchchem.control.event_dispatcher import EventDispatcher
from pinchchem.control.handlers import HandlerContext
from pinchchem.core.interfaces import ISceneEventSink, ISceneRenderer
from pinchchem.core.kinematics import PinchStateMachine
from pinchchem.core.state_manager import StateManager
from pinchchem.core.types import BondChoice, PinchEvent
from pinchchem.hand_utils import preprocess_hand
from pinchchem.scene.hit_tester import HitTester
from pinchchem.scene.registry import SceneRegistry

# HANDLERS
from pinchchem.control.handlers.bond_choice_handler import BondChoiceHandler
from pinchchem.control.handlers.drag_handler import DragHandler
from pinchchem.control.handlers.drop_handler import DropHandler
from pinchchem.control.handlers.system_handler import SystemHandler

logger = logging.getLogger(__name__)


class PinchChemController:
    def __init__(self, width=None, height=None, renderer: Optional[ISceneRenderer] = None,
                 sinks: Iterable[ISceneEventSink] = (), palette=None, clear_button=None):
        self.config = CONFIG
        self.state = StateManager()
        self.events = EventDispatcher(*sinks)
        self.registry = SceneRegistry(width, height, renderer)
        self.pinch = PinchStateMachine(
            threshold=self.config["PINCH_THRESHOLD"],
            refractory=self.config["PINCH_REFRACTORY"],
            loss_release=self.config["TRACKING_LOSS_RELEASE"],
        )
        self.hit_tester = HitTester(self.registry, self.state, palette, clear_button)

        # Engines
        self.bonding = BondIntermediateMachine(self.registry, self.events)
        self.clustering = ClusterEngine(self.registry, self.events, radius=self.config["CLUSTER_RADIUS"])

        # Handlers
        self.system_handler = SystemHandler()
        self.choice_handler = BondChoiceHandler()
        self.drop_handler = DropHandler(self.choice_handler)
        self.drag_handler = DragHandler(self.choice_handler, self.drop_handler, self.system_handler)

    def _context(self, frame, event, now) -> HandlerContext:
        return HandlerContext(frame, event, now, self.state, self.registry, self.events,
                              self.hit_tester, self.bonding, self.clustering, self.config)

    def process(self, hand: Any, now: Optional[float] = None) -> PinchEvent:
        """
        One tick. `hand` is a single hand's landmarks, or None when no hand is tracked.
        Every transition completes before this returns.
        """
        now = time.time() if now is None else now

        # 1. Perception
        frame = preprocess_hand(hand, self.registry.width, self.registry.height)
        if frame is None:
            self.state.hand_visible = False
            event = self.pinch.update_missing(now)
            if event == PinchEvent.RELEASE:
                logger.warning("tracking lost for too long, forcing pinch release")
        else:
            self.state.hand_visible = True
            self.state.pointer = frame.pointer
            event = self.pinch.update(frame.pinch_distance, now)
        self.state.is_pinching = self.pinch.is_active

        ctx = self._context(frame, event, now)

        # 2. Timers (run even without a hand)
        self.choice_handler.check_timeout(ctx)

        # 3. Edges
        if event == PinchEvent.START:
            self.drag_handler.on_pinch_start(ctx)
        elif event == PinchEvent.RELEASE:
            self.drag_handler.on_pinch_release(ctx)

        # 4. Hold
        if self.pinch.is_active:
            self.drag_handler.on_drag(ctx)

        return event

    # --- DIRECT ACTIONS (host keyboard / mouse) ---
    def clear(self, now: Optional[float] = None):
        now = time.time() if now is None else now
        self.system_handler.clear(self._context(None, PinchEvent.NONE, now))

    def choose(self, choice: BondChoice, now: Optional[float] = None):
        now = time.time() if now is None else now
        return self.choice_handler.resolve(self._context(None, PinchEvent.NONE, now), choice)

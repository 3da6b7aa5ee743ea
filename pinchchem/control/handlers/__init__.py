"""
Handler Context Definition.
Defines the Data Transfer Object (DTO) for the Control Layer.
"""

from typing import Optional

from pinchchem.core.types import HandFrame, PinchEvent, Point2D


class HandlerContext:
    """
    A unified context object containing all data required for a Handler to make decisions.
    Wraps the tick's Hand Frame, Pinch Edge, Interaction State, Scene, Engines and Configuration.
    """
    def __init__(self, frame: Optional[HandFrame], event: PinchEvent, now: float,
                 state, registry, events, hit_tester, bonding, clustering, config):
        # 1. This Tick's Input
        self.frame = frame
        self.event = event
        self.now = now

        # 2. Shared State
        self.state = state           # StateManager (drag + popup)
        self.registry = registry     # SceneRegistry

        # 3. Collaborators & Engines
        self.events = events         # EventDispatcher
        self.hit_tester = hit_tester
        self.bonding = bonding       # BondIntermediateMachine
        self.clustering = clustering # ClusterEngine
        self.config = config         # Master Config Dict

    @property
    def pointer(self) -> Optional[Point2D]:
        if self.frame is not None:
            return self.frame.pointer
        return self.state.pointer

"""
PinchChem Event Dispatcher (The Announcer).
==========================================

This module decouples scene mutations ("a molecule formed") from whoever
wants to hear about them (HUD, discovered panel, tests).

Features:
- **Fan-out:** Any number of `ISceneEventSink` subscribers.
- **Logged:** Every event is written to the log, so a headless run is traceable.
- **Recording Backend:** A sink that stores events for Unit Tests.
"""

import logging
from typing import List, Tuple, Any

from pinchchem.core.interfaces import ISceneEventSink

logger = logging.getLogger(__name__)


class EventDispatcher(ISceneEventSink):
    """
    Concrete sink that forwards every event to its subscribers.
    """
    def __init__(self, *sinks: ISceneEventSink):
        self.sinks: List[ISceneEventSink] = list(sinks)
        self.last_status = ""

    def spawn(self, kind) -> None:
        logger.info("spawn %s", kind.value)
        for s in self.sinks: s.spawn(kind)

    def fragment_created(self, kind, bond_info) -> None:
        logger.info("fragment created %s (%s)", kind.value, bond_info)
        for s in self.sinks: s.fragment_created(kind, bond_info)

    def hydrogen_attached(self, fragment_id, count, required) -> None:
        logger.info("H attached to %s: %d/%d", fragment_id, count, required)
        for s in self.sinks: s.hydrogen_attached(fragment_id, count, required)

    def molecule_formed(self, name, formula) -> None:
        logger.info("molecule formed %s (%s)", name, formula)
        for s in self.sinks: s.molecule_formed(name, formula)

    def cleared_all(self) -> None:
        logger.info("scene cleared")
        for s in self.sinks: s.cleared_all()

    def status_message(self, text) -> None:
        self.last_status = text
        logger.info("status: %s", text)
        for s in self.sinks: s.status_message(text)


# =============================================================================
# RECORDING BACKEND (Testing)
# =============================================================================
class RecordingEventSink(ISceneEventSink):
    """
    Silent implementation for Unit Tests.
    Stores (event_name, args) tuples instead of showing anything.
    """
    def __init__(self):
        self.events: List[Tuple[str, Tuple[Any, ...]]] = []

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def of(self, name: str) -> List[Tuple[Any, ...]]:
        return [args for n, args in self.events if n == name]

    def spawn(self, kind): self.events.append(("spawn", (kind,)))
    def fragment_created(self, kind, bond_info): self.events.append(("fragment_created", (kind, bond_info)))
    def hydrogen_attached(self, fragment_id, count, required): self.events.append(("hydrogen_attached", (fragment_id, count, required)))
    def molecule_formed(self, name, formula): self.events.append(("molecule_formed", (name, formula)))
    def cleared_all(self): self.events.append(("cleared_all", ()))
    def status_message(self, text): self.events.append(("status_message", (text,)))

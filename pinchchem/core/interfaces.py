"""
PinchChem Core Interfaces.
Defines the abstract contracts for the rendering and UI collaborators.
"""

from abc import ABC, abstractmethod
from typing import Any

from pinchchem.core.types import ElementKind, FragmentKind, SceneEntity


class ISceneRenderer(ABC):
    """
    Abstract Protocol for the visual layer.
    The Scene Registry owns boxes and z-order; the renderer only mirrors them.
    """
    @abstractmethod
    def register(self, entity: SceneEntity) -> Any: pass
    @abstractmethod
    def unregister(self, entity: SceneEntity) -> None: pass
    @abstractmethod
    def move(self, entity: SceneEntity) -> None: pass


class ISceneEventSink(ABC):
    """
    Abstract Protocol for UI collaborators (status bar, discovered panel).
    """
    @abstractmethod
    def spawn(self, kind: ElementKind) -> None: pass
    @abstractmethod
    def fragment_created(self, kind: FragmentKind, bond_info: str) -> None: pass
    @abstractmethod
    def hydrogen_attached(self, fragment_id: str, count: int, required: int) -> None: pass
    @abstractmethod
    def molecule_formed(self, name: str, formula: str) -> None: pass
    @abstractmethod
    def cleared_all(self) -> None: pass
    @abstractmethod
    def status_message(self, text: str) -> None: pass


class NullSceneRenderer(ISceneRenderer):
    """Headless renderer. Hands out integer handles and draws nothing."""
    def __init__(self):
        self._next = 0

    def register(self, entity):
        self._next += 1
        return self._next

    def unregister(self, entity): pass
    def move(self, entity): pass

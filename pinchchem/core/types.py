"""
PinchChem Types.
Central definition of Data Contracts to prevent circular imports.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, List, Optional, Tuple, Union
import math


class InvariantViolation(RuntimeError):
    """Raised when the scene reaches a state the single-writer tick forbids."""


# --- GEOMETRY TYPES ---
@dataclass
class Point2D:
    x: float
    y: float

    def distance_to(self, other: "Point2D") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def __sub__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Box:
    """Axis aligned rectangle. (x, y) is the top-left corner."""
    x: float
    y: float
    w: float
    h: float

    @property
    def center(self) -> Point2D:
        return Point2D(self.x + self.w / 2, self.y + self.h / 2)

    def contains(self, p: Point2D) -> bool:
        return self.x <= p.x <= self.x + self.w and self.y <= p.y <= self.y + self.h

    def within(self, width: float, height: float) -> bool:
        return self.x >= 0 and self.y >= 0 and self.x + self.w <= width and self.y + self.h <= height


# --- CHEMISTRY TYPES ---
class ElementKind(Enum):
    C = "C"
    H = "H"
    O = "O"


class FragmentKind(Enum):
    C2 = "C2"
    C3 = "C3"


class BondMultiplicity(Enum):
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"


# --- SCENE ENTITIES ---
@dataclass
class AtomInstance:
    id: str
    kind: ElementKind
    position: Point2D
    size: float = 60.0
    render_handle: Any = None

    @property
    def box(self) -> Box:
        return Box(self.position.x, self.position.y, self.size, self.size)

    @property
    def center(self) -> Point2D:
        return self.box.center


@dataclass
class HydrogenAnchor:
    """Where an attached hydrogen is drawn. carbon is None for C3 rings."""
    carbon: Optional[int]
    slot: int
    offset: Point2D


@dataclass
class IntermediateFragment:
    id: str
    kind: FragmentKind
    position: Point2D
    required_h: int
    bond: Optional[BondMultiplicity] = None
    attached_h: int = 0
    size: float = 240.0
    z: int = 0
    anchors: List[HydrogenAnchor] = field(default_factory=list)
    render_handle: Any = None

    @property
    def box(self) -> Box:
        return Box(self.position.x, self.position.y, self.size, self.size)

    @property
    def center(self) -> Point2D:
        return self.box.center

    @property
    def needs_hydrogen(self) -> bool:
        return self.attached_h < self.required_h


@dataclass
class MoleculeInstance:
    id: str
    name: str
    formula: str
    position: Point2D
    size: float = 240.0
    z: int = 0
    render_handle: Any = None

    @property
    def box(self) -> Box:
        return Box(self.position.x, self.position.y, self.size, self.size)

    @property
    def center(self) -> Point2D:
        return self.box.center


SceneEntity = Union[AtomInstance, IntermediateFragment, MoleculeInstance]


# --- INTERACTION TYPES ---
class BondChoice(Enum):
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    CANCEL = "cancel"


@dataclass
class PendingBondChoice:
    atom_a: AtomInstance
    atom_b: AtomInstance
    opened_at: float
    popup: Box
    buttons: List[Tuple[BondChoice, Box]] = field(default_factory=list)

    def button_at(self, p: Point2D) -> Optional[BondChoice]:
        for choice, box in self.buttons:
            if box.contains(p):
                return choice
        return None


@dataclass
class DragSession:
    ref: SceneEntity
    offset: Point2D

    @property
    def is_atom(self) -> bool:
        return isinstance(self.ref, AtomInstance)


class PinchEvent(Enum):
    NONE = auto()
    START = auto()
    RELEASE = auto()


class HitLayer(Enum):
    POPUP_BUTTON = auto()
    CLEAR = auto()
    STRUCTURE = auto()   # Molecules and fragments
    ATOM = auto()
    PALETTE = auto()


@dataclass(frozen=True)
class PaletteEntry:
    kind: ElementKind
    box: Box


@dataclass(frozen=True)
class Hit:
    layer: HitLayer
    target: Any


@dataclass(frozen=True)
class HandFrame:
    pointer: Point2D
    pinch_distance: float


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    formula: str
    counts: Tuple[Tuple[ElementKind, int], ...]

    def required(self, kind: ElementKind) -> int:
        for k, n in self.counts:
            if k == kind:
                return n
        return 0

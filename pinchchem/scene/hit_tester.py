"""
PinchChem Spatial Hit-Tester.
============================

Resolves a display point to the single entity a pinch should act on.

Priority (first hit wins):
1. Buttons of an open bond-choice popup.
2. The clear control.
3. Molecules and fragments, topmost first.
4. Loose atoms, most recently spawned first.
5. Palette entries.

While a popup is open only layer 1 is consulted, so a pinch that misses the
buttons can never spawn, drag or clear by accident.
"""
from typing import List, Optional

from pinchchem.config import CONFIG
from pinchchem.core.state_manager import StateManager
from pinchchem.core.types import Box, ElementKind, Hit, HitLayer, PaletteEntry, Point2D
from pinchchem.scene.registry import SceneRegistry


def default_palette() -> List[PaletteEntry]:
    """Vertical column of C, H, O templates down the left edge."""
    ox, oy = CONFIG["PALETTE_ORIGIN"]
    w, h = CONFIG["PALETTE_ENTRY_SIZE"]
    gap = CONFIG["PALETTE_GAP"]
    return [
        PaletteEntry(kind, Box(ox, oy + i * (h + gap), w, h))
        for i, kind in enumerate(ElementKind)
    ]


def default_clear_button() -> Box:
    return Box(*CONFIG["CLEAR_BUTTON"])


class HitTester:
    def __init__(self, registry: SceneRegistry, state: StateManager,
                 palette: Optional[List[PaletteEntry]] = None, clear_button: Optional[Box] = None):
        self.registry = registry
        self.state = state
        self.palette = palette if palette is not None else default_palette()
        self.clear_button = clear_button if clear_button is not None else default_clear_button()

    def hit_test(self, p: Point2D) -> Optional[Hit]:
        # 1. Popup pre-empts everything else
        if self.state.pending_choice is not None:
            choice = self.state.pending_choice.button_at(p)
            return Hit(HitLayer.POPUP_BUTTON, choice) if choice is not None else None

        # 2. Destructive control
        if self.clear_button is not None and self.clear_button.contains(p):
            return Hit(HitLayer.CLEAR, self.clear_button)

        # 3. Structures (explicit z-order)
        for entity in self.registry.structures_topmost():
            if entity.box.contains(p):
                return Hit(HitLayer.STRUCTURE, entity)

        # 4. Loose atoms
        for atom in self.registry.atoms_topmost():
            if atom.box.contains(p):
                return Hit(HitLayer.ATOM, atom)

        # 5. Palette templates
        for entry in self.palette:
            if entry.box.contains(p):
                return Hit(HitLayer.PALETTE, entry)

        return None

"""
PinchChem HUD.
Draws the scene the controller owns on top of the mirrored camera frame.
"""

import time
from collections import deque

import cv2
import numpy as np

from pinchchem.chemistry.catalog import C2_CARBON_SPACING, FRAGMENT_LABELS
from pinchchem.core.interfaces import ISceneEventSink, ISceneRenderer
from pinchchem.core.types import BondMultiplicity, ElementKind, FragmentKind, IntermediateFragment


class HUD(ISceneRenderer, ISceneEventSink):
    def __init__(self):
        # --- THEME COLORS (BGR) ---
        self.C_CYAN   = (255, 255, 0)    # Standard UI
        self.C_RED    = (0, 0, 255)      # Clear / Critical
        self.C_ORANGE = (0, 165, 255)    # Dragging / Active
        self.C_GREEN  = (136, 255, 0)    # Bonds / Success
        self.C_WHITE  = (255, 255, 255)
        self.C_DARK   = (20, 20, 20)     # Backgrounds

        self.ATOM_COLORS = {
            ElementKind.C: (60, 60, 60),
            ElementKind.H: (235, 235, 235),
            ElementKind.O: (40, 40, 220),
        }

        # --- ANIMATION STATE ---
        self._handles = 0
        self._born = {}               # handle -> time registered (pop-in)
        self.status = "Ready! Pinch over palette to spawn atoms, then drag them"
        self.discovered = deque(maxlen=12)

    # =========================================================
    # RENDERER CONTRACT
    # =========================================================
    def register(self, entity):
        self._handles += 1
        self._born[self._handles] = time.time()
        return self._handles

    def unregister(self, entity):
        self._born.pop(entity.render_handle, None)

    def move(self, entity): pass

    # =========================================================
    # EVENT CONTRACT
    # =========================================================
    def spawn(self, kind): pass
    def fragment_created(self, kind, bond_info): pass
    def hydrogen_attached(self, fragment_id, count, required): pass

    def molecule_formed(self, name, formula):
        if all(f != formula for _, f in self.discovered):
            self.discovered.append((name, formula))

    def cleared_all(self): pass

    def status_message(self, text):
        self.status = text

    # =========================================================
    # DRAWING
    # =========================================================
    def _draw_glass_panel(self, img, x, y, w, h, color, alpha=0.6):
        """Draws a semi-transparent 'Glass' background."""
        x, y, w, h = int(x), int(y), int(w), int(h)
        # Safety check for image bounds
        if y+h > img.shape[0] or x+w > img.shape[1] or x < 0 or y < 0: return

        sub_img = img[y:y+h, x:x+w]
        rect = np.full(sub_img.shape, color, dtype=np.uint8)
        img[y:y+h, x:x+w] = cv2.addWeighted(sub_img, 1 - alpha, rect, alpha, 1.0)
        cv2.rectangle(img, (x, y), (x+w, y+h), color, 1)

    def _scale(self, handle):
        """Pop-in: 0.6 -> 1.0 over 420ms."""
        t = (time.time() - self._born.get(handle, 0)) / 0.42
        return 0.6 + 0.4 * min(max(t, 0.0), 1.0)

    def _draw_atom(self, frame, cx, cy, kind, radius):
        cv2.circle(frame, (int(cx), int(cy)), int(radius), self.ATOM_COLORS[kind], -1)
        cv2.circle(frame, (int(cx), int(cy)), int(radius), self.C_WHITE, 1)
        text_color = self.C_DARK if kind == ElementKind.H else self.C_WHITE
        cv2.putText(frame, kind.value, (int(cx) - 8, int(cy) + 8),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, text_color, 2)

    def _draw_bond(self, frame, p1, p2, order=1):
        (x1, y1), (x2, y2) = p1, p2
        length = np.hypot(x2 - x1, y2 - y1) or 1.0
        nx, ny = -(y2 - y1) / length, (x2 - x1) / length
        spread = {1: [0], 2: [-6, 6], 3: [-8, 0, 8]}[order]
        for off in spread:
            a = (int(x1 + nx * off), int(y1 + ny * off))
            b = (int(x2 + nx * off), int(y2 + ny * off))
            cv2.line(frame, a, b, self.C_GREEN, 3)

    def _draw_fragment(self, frame, frag: IntermediateFragment):
        c = frag.center
        s = self._scale(frag.render_handle)
        self._draw_glass_panel(frame, frag.position.x, frag.position.y, frag.size, frag.size, self.C_DARK, 0.3)

        if frag.kind == FragmentKind.C3:
            r = 72 * s
            pts = [(c.x + np.cos(np.radians(a)) * r, c.y + np.sin(np.radians(a)) * r) for a in (-90, 30, 150)]
            for i in range(3):
                self._draw_bond(frame, pts[i], pts[(i + 1) % 3])
            for p in pts:
                self._draw_atom(frame, p[0], p[1], ElementKind.C, 27)
        else:
            carbons = [(c.x - C2_CARBON_SPACING, c.y), (c.x + C2_CARBON_SPACING, c.y)]
            order = {BondMultiplicity.SINGLE: 1, BondMultiplicity.DOUBLE: 2, BondMultiplicity.TRIPLE: 3}[frag.bond]
            self._draw_bond(frame, carbons[0], carbons[1], order)
            # Hydrogens originate at their carbon
            for anchor in frag.anchors:
                base = carbons[anchor.carbon]
                tip = (base[0] + anchor.offset.x, base[1] + anchor.offset.y)
                self._draw_bond(frame, base, tip)
                self._draw_atom(frame, tip[0], tip[1], ElementKind.H, 20)
            for p in carbons:
                self._draw_atom(frame, p[0], p[1], ElementKind.C, 27)

        # Hershey fonts are ASCII only
        label = FRAGMENT_LABELS[(frag.kind, frag.bond)].replace("–", "-").replace("≡", "#")
        cv2.putText(frame, f"{label}  {frag.attached_h}/{frag.required_h} H",
                    (int(frag.position.x) + 10, int(frag.position.y) + 22),
                    cv2.FONT_HERSHEY_PLAIN, 1.2, self.C_CYAN, 1)

    def _draw_molecule(self, frame, mol):
        self._draw_glass_panel(frame, mol.position.x, mol.position.y, mol.size, mol.size, self.C_DARK, 0.5)
        c = mol.center
        cv2.putText(frame, f"{mol.name} - {mol.formula}", (int(mol.position.x) + 10, int(mol.position.y) + 22),
                    cv2.FONT_HERSHEY_PLAIN, 1.2, self.C_CYAN, 1)
        cv2.putText(frame, mol.formula, (int(c.x) - 40, int(c.y) + 10),
                    cv2.FONT_HERSHEY_SIMPLEX, 1.0, self.C_WHITE, 2)

    def _draw_popup(self, frame, pending):
        p = pending.popup
        self._draw_glass_panel(frame, p.x, p.y, p.w, p.h, self.C_DARK, 0.9)
        cv2.putText(frame, "Create bond between selected atoms?", (int(p.x) + 8, int(p.y) + 18),
                    cv2.FONT_HERSHEY_PLAIN, 0.9, self.C_WHITE, 1)
        for choice, box in pending.buttons:
            self._draw_glass_panel(frame, box.x, box.y, box.w, box.h, (68, 68, 68), 0.9)
            text = "x" if choice.value == "cancel" else choice.value.capitalize()
            cv2.putText(frame, text, (int(box.x) + 4, int(box.y + box.h / 2) + 5),
                        cv2.FONT_HERSHEY_PLAIN, 1.0, self.C_WHITE, 1)

    def render(self, frame, pilot):
        h, w, _ = frame.shape
        state = pilot.state

        # 1. PALETTE + CLEAR
        for entry in pilot.hit_tester.palette:
            b = entry.box
            self._draw_glass_panel(frame, b.x, b.y, b.w, b.h, self.C_DARK, 0.6)
            self._draw_atom(frame, b.center.x, b.center.y, entry.kind, 26)
        cb = pilot.hit_tester.clear_button
        self._draw_glass_panel(frame, cb.x, cb.y, cb.w, cb.h, self.C_RED, 0.5)
        cv2.putText(frame, "CLEAR", (int(cb.x) + 28, int(cb.y) + 29), cv2.FONT_HERSHEY_SIMPLEX, 0.7, self.C_WHITE, 2)

        # 2. STRUCTURES (bottom-up so the topmost paints last)
        for entity in reversed(pilot.registry.structures_topmost()):
            if isinstance(entity, IntermediateFragment):
                self._draw_fragment(frame, entity)
            else:
                self._draw_molecule(frame, entity)

        # 3. LOOSE ATOMS (+ the one in hand)
        atoms = pilot.registry.loose_atoms()
        if state.drag is not None and state.drag.is_atom:
            atoms.append(state.drag.ref)
        for atom in atoms:
            c = atom.center
            self._draw_atom(frame, c.x, c.y, atom.kind, atom.size / 2 * self._scale(atom.render_handle))

        # 4. POPUP
        if state.pending_choice is not None:
            self._draw_popup(frame, state.pending_choice)

        # 5. FINGER CURSOR
        if state.hand_visible and state.pointer is not None:
            color = self.C_ORANGE if state.is_pinching else self.C_CYAN
            cv2.circle(frame, (int(state.pointer.x), int(state.pointer.y)), 12, color, 2)

        # 6. STATUS BAR
        self._draw_glass_panel(frame, 160, 20, min(700, w - 180), 44, self.C_DARK, 0.4)
        cv2.putText(frame, self.status, (175, 48), cv2.FONT_HERSHEY_PLAIN, 1.2, self.C_CYAN, 1)

        # 7. DISCOVERED PANEL
        panel_x = w - 230
        self._draw_glass_panel(frame, panel_x, 80, 210, 30 + 22 * max(len(self.discovered), 1), self.C_DARK, 0.5)
        cv2.putText(frame, "DISCOVERED", (panel_x + 10, 100), cv2.FONT_HERSHEY_PLAIN, 1.1, self.C_GREEN, 1)
        if not self.discovered:
            cv2.putText(frame, "No molecules yet", (panel_x + 10, 122), cv2.FONT_HERSHEY_PLAIN, 1.0, self.C_WHITE, 1)
        for i, (name, formula) in enumerate(self.discovered):
            cv2.putText(frame, f"{name} ({formula})", (panel_x + 10, 122 + 22 * i),
                        cv2.FONT_HERSHEY_PLAIN, 1.0, self.C_WHITE, 1)

    def draw_fps(self, frame, fps):
        cv2.putText(frame, f"{int(fps)} FPS", (frame.shape[1]-100, 40),
                    cv2.FONT_HERSHEY_PLAIN, 1.2, self.C_GREEN, 1)

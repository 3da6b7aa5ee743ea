import unittest
from pinchchem.core.state_manager import StateManager
from pinchchem.core.types import (
    BondChoice, Box, ElementKind, FragmentKind, HitLayer, PaletteEntry, PendingBondChoice, Point2D,
)
from pinchchem.scene.hit_tester import HitTester, default_palette
from pinchchem.scene.registry import SceneRegistry


class TestHitTester(unittest.TestCase):
    def setUp(self):
        self.scene = SceneRegistry(1280, 720)
        self.state = StateManager()
        self.palette = [PaletteEntry(ElementKind.C, Box(0, 300, 100, 100))]
        self.clear = Box(0, 0, 100, 50)
        self.tester = HitTester(self.scene, self.state, self.palette, self.clear)

    def test_miss_returns_none(self):
        self.assertIsNone(self.tester.hit_test(Point2D(900, 600)))

    def test_palette(self):
        hit = self.tester.hit_test(Point2D(50, 350))
        self.assertEqual(hit.layer, HitLayer.PALETTE)
        self.assertEqual(hit.target.kind, ElementKind.C)

    def test_atom_beats_palette(self):
        atom = self.scene.add_atom(ElementKind.H, Point2D(50, 350))
        hit = self.tester.hit_test(Point2D(50, 350))
        self.assertEqual(hit.layer, HitLayer.ATOM)
        self.assertIs(hit.target, atom)

    def test_newest_atom_first(self):
        self.scene.add_atom(ElementKind.H, Point2D(500, 350))
        top = self.scene.add_atom(ElementKind.O, Point2D(510, 350))
        self.assertIs(self.tester.hit_test(Point2D(505, 350)).target, top)

    def test_structure_beats_atom(self):
        self.scene.add_atom(ElementKind.H, Point2D(500, 350))
        frag = self.scene.add_fragment(FragmentKind.C3, Point2D(500, 350), 6)
        hit = self.tester.hit_test(Point2D(500, 350))
        self.assertEqual(hit.layer, HitLayer.STRUCTURE)
        self.assertIs(hit.target, frag)

    def test_topmost_structure_first(self):
        self.scene.add_fragment(FragmentKind.C3, Point2D(500, 350), 6)
        mol = self.scene.add_molecule("Water", "H2O", Point2D(520, 350))
        self.assertIs(self.tester.hit_test(Point2D(510, 350)).target, mol)

    def test_clear_beats_structures(self):
        self.scene.add_molecule("Water", "H2O", Point2D(50, 25))
        self.assertEqual(self.tester.hit_test(Point2D(50, 25)).layer, HitLayer.CLEAR)

    def test_popup_preempts_everything(self):
        a = self.scene.add_atom(ElementKind.C, Point2D(600, 400))
        b = self.scene.add_atom(ElementKind.C, Point2D(640, 400))
        self.state.pending_choice = PendingBondChoice(
            a, b, 0.0, Box(0, 0, 300, 80),
            [(BondChoice.DOUBLE, Box(10, 10, 50, 30)), (BondChoice.CANCEL, Box(70, 10, 50, 30))],
        )
        hit = self.tester.hit_test(Point2D(30, 20))
        self.assertEqual(hit.layer, HitLayer.POPUP_BUTTON)
        self.assertEqual(hit.target, BondChoice.DOUBLE)

        # Clear control, atoms and palette are all masked by the open popup
        self.assertIsNone(self.tester.hit_test(Point2D(90, 45)))
        self.assertIsNone(self.tester.hit_test(Point2D(600, 400)))
        self.assertIsNone(self.tester.hit_test(Point2D(50, 350)))

    def test_default_palette_has_one_entry_per_element(self):
        kinds = [e.kind for e in default_palette()]
        self.assertEqual(kinds, [ElementKind.C, ElementKind.H, ElementKind.O])


if __name__ == '__main__':
    unittest.main()

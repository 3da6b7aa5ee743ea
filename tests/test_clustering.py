import itertools
import unittest

import numpy as np

from pinchchem.chemistry.clustering import ClusterEngine, connected_components, match_component, pick_nearest
from pinchchem.control.event_dispatcher import RecordingEventSink
from pinchchem.core.types import AtomInstance, ElementKind, Point2D
from pinchchem.scene.registry import SceneRegistry

C, H, O = ElementKind.C, ElementKind.H, ElementKind.O


def atom(kind, cx, cy, idx=0):
    """Free-standing 60px atom centered at (cx, cy)."""
    return AtomInstance(f"a{idx}", kind, Point2D(cx - 30, cy - 30), 60)


class TestConnectedComponents(unittest.TestCase):
    def test_far_apart_never_merge(self):
        centers = np.array([[0, 0], [61, 0], [122, 0], [0, 61]], dtype=float)
        self.assertEqual(connected_components(centers, 60), [[0], [1], [2], [3]])

    def test_exactly_radius_is_not_an_edge(self):
        centers = np.array([[0, 0], [60, 0]], dtype=float)
        self.assertEqual(len(connected_components(centers, 60)), 2)

    def test_transitive_chain_is_one_component_in_any_order(self):
        chain = [[0, 0], [50, 0], [100, 0], [150, 0], [150, 50]]
        for perm in itertools.permutations(range(len(chain))):
            centers = np.array([chain[i] for i in perm], dtype=float)
            comps = connected_components(centers, 60)
            self.assertEqual(len(comps), 1)
            self.assertEqual(sorted(comps[0]), list(range(len(chain))))

    def test_two_groups(self):
        centers = np.array([[0, 0], [500, 500], [30, 0], [520, 500]], dtype=float)
        self.assertEqual(connected_components(centers, 60), [[0, 2], [1, 3]])

    def test_empty(self):
        self.assertEqual(connected_components(np.zeros((0, 2)), 60), [])


class TestCatalogMatch(unittest.TestCase):
    def blob(self, counts):
        atoms, i = [], 0
        for kind, n in counts:
            for _ in range(n):
                atoms.append(atom(kind, 500 + (i % 4) * 5, 400 + (i // 4) * 5, i))
                i += 1
        return atoms

    def test_propanol_beats_propane(self):
        """{C:3, H:8, O:1} satisfies both; catalog order picks Propanol."""
        entry, selected = match_component(self.blob([(C, 3), (H, 8), (O, 1)]))
        self.assertEqual(entry.name, "Propanol")
        self.assertEqual(len(selected), 12)

    def test_containment_not_equality(self):
        """Extra atoms still match; the surplus is not selected."""
        entry, selected = match_component(self.blob([(C, 1), (H, 5)]))
        self.assertEqual(entry.name, "Methane")
        self.assertEqual(sorted(a.kind.value for a in selected), ["C", "H", "H", "H", "H"])

    def test_no_match(self):
        self.assertIsNone(match_component(self.blob([(C, 2), (H, 1)])))

    def test_water(self):
        entry, _ = match_component(self.blob([(H, 2), (O, 1)]))
        self.assertEqual(entry.formula, "H2O")

    def test_pick_nearest_is_stable_on_ties(self):
        atoms = [atom(H, 510, 400, 0), atom(H, 490, 400, 1), atom(H, 500, 430, 2)]
        picked = pick_nearest(atoms, Point2D(500, 400), H, 2)
        self.assertEqual([a.id for a in picked], ["a0", "a1"])

    def test_pick_nearest_shortfall(self):
        self.assertIsNone(pick_nearest([atom(H, 0, 0)], Point2D(0, 0), H, 2))
        self.assertEqual(pick_nearest([], Point2D(0, 0), O, 0), [])


class TestClusterEngine(unittest.TestCase):
    def setUp(self):
        self.scene = SceneRegistry(1280, 720)
        self.events = RecordingEventSink()
        self.engine = ClusterEngine(self.scene, self.events, radius=60)

    def add(self, kind, x, y):
        return self.scene.add_atom(kind, Point2D(x, y))

    def test_formaldehyde_cluster(self):
        self.add(C, 600, 400); self.add(H, 630, 400); self.add(H, 570, 400); self.add(O, 600, 430)
        formed = self.engine.run()
        self.assertEqual([m.name for m in formed], ["Formaldehyde"])
        self.assertEqual(self.scene.loose_atoms(), [])
        self.assertAlmostEqual(formed[0].center.x, 600.0)
        self.assertAlmostEqual(formed[0].center.y, 407.5)

    def test_leftovers_stay_loose(self):
        self.add(O, 600, 400); self.add(H, 630, 400); self.add(H, 570, 400); self.add(H, 600, 440)
        formed = self.engine.run()
        self.assertEqual([m.formula for m in formed], ["H2O"])
        left = self.scene.loose_atoms()
        self.assertEqual([a.kind for a in left], [H])

    def test_one_molecule_per_component_per_pass(self):
        # Two waters worth of atoms in one blob -> only one forms this pass
        for x in (600, 620, 640):
            self.add(H, x, 400)
        self.add(H, 660, 400); self.add(O, 610, 420); self.add(O, 650, 420)
        self.assertEqual(len(self.engine.run()), 1)
        self.assertEqual(len(self.engine.run()), 1)
        self.assertEqual(self.scene.loose_atoms(), [])

    def test_components_are_independent(self):
        self.add(H, 200, 400); self.add(H, 230, 400); self.add(O, 215, 430)
        self.add(C, 900, 400); self.add(O, 930, 400); self.add(O, 870, 400)
        self.add(C, 600, 100)
        names = sorted(m.name for m in self.engine.run())
        self.assertEqual(names, ["Carbon Dioxide", "Water"])
        self.assertEqual(len(self.scene.loose_atoms()), 1)

    def test_non_matching_component_untouched(self):
        a = self.add(C, 600, 400); b = self.add(C, 640, 400)
        self.assertEqual(self.engine.run(), [])
        self.assertEqual(self.scene.loose_atoms(), [a, b])

    def test_single_atom_does_nothing(self):
        self.add(H, 600, 400)
        self.assertEqual(self.engine.run(), [])
        self.assertEqual(self.events.events, [])


if __name__ == '__main__':
    unittest.main()

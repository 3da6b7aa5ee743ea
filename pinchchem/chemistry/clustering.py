"""
PinchChem Molecule Clustering & Recognition Engine.
==================================================

Runs after every drop that did not bond or merge anything.

Pipeline:
1. **Proximity Graph:** Loose atoms are nodes; an edge joins two atoms whose
   centers are closer than CLUSTER_RADIUS (vectorized NumPy distance matrix).
2. **Components:** Iterative DFS. Membership is what matters, not visit order.
3. **Tally:** Count C/H/O per component.
4. **Catalog Match:** First catalog entry whose counts all fit inside the tally.
5. **Selection:** For each required kind, the N atoms nearest the component
   centroid. Shortfall aborts that entry and the next one is tried.
6. **Commit:** Selected atoms are consumed, the molecule appears at the
   centroid. Leftover atoms stay loose.
"""
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from pinchchem.chemistry.catalog import CATALOG
from pinchchem.config import CONFIG
from pinchchem.core.interfaces import ISceneEventSink
from pinchchem.core.types import AtomInstance, CatalogEntry, ElementKind, MoleculeInstance, Point2D
from pinchchem.scene.registry import SceneRegistry

logger = logging.getLogger(__name__)


def atom_centers(atoms: Sequence[AtomInstance]) -> np.ndarray:
    return np.array([[a.center.x, a.center.y] for a in atoms], dtype=np.float64).reshape(-1, 2)


def connected_components(centers: np.ndarray, radius: float) -> List[List[int]]:
    """
    Groups point indices whose centers are transitively closer than `radius`.
    Each component lists its indices in ascending (input) order.
    """
    n = len(centers)
    if n == 0:
        return []

    # Vectorized pairwise distances: (N, 1, 2) - (1, N, 2) -> (N, N)
    deltas = centers[:, None, :] - centers[None, :, :]
    dist = np.linalg.norm(deltas, axis=2)
    adjacency = dist < radius
    np.fill_diagonal(adjacency, False)

    visited = np.zeros(n, dtype=bool)
    components = []
    for start in range(n):
        if visited[start]:
            continue
        visited[start] = True
        stack = [start]
        members = []
        while stack:
            u = stack.pop()
            members.append(u)
            for v in np.flatnonzero(adjacency[u] & ~visited):
                visited[v] = True
                stack.append(int(v))
        components.append(sorted(members))
    return components


def tally(atoms: Sequence[AtomInstance]) -> dict:
    counts = {kind: 0 for kind in ElementKind}
    for a in atoms:
        counts[a.kind] += 1
    return counts


def centroid(atoms: Sequence[AtomInstance]) -> Point2D:
    c = atom_centers(atoms).mean(axis=0)
    return Point2D(float(c[0]), float(c[1]))


def pick_nearest(atoms: Sequence[AtomInstance], center: Point2D, kind: ElementKind,
                 number: int) -> Optional[List[AtomInstance]]:
    """
    The `number` atoms of `kind` closest to `center`.
    Ties keep input order (stable sort). None if there are not enough.
    """
    if number == 0:
        return []
    candidates = [a for a in atoms if a.kind == kind]
    if len(candidates) < number:
        return None
    d = np.linalg.norm(atom_centers(candidates) - np.array([center.x, center.y]), axis=1)
    order = np.argsort(d, kind="stable")[:number]
    return [candidates[i] for i in order]


def match_component(atoms: Sequence[AtomInstance], catalog=CATALOG) -> Optional[Tuple[CatalogEntry, List[AtomInstance]]]:
    """
    Containment match against the ordered catalog.
    Returns the winning entry and the atoms it would consume.
    """
    counts = tally(atoms)
    center = centroid(atoms)

    for entry in catalog:
        if any(counts[kind] < entry.required(kind) for kind in ElementKind):
            continue

        selected: List[AtomInstance] = []
        for kind in ElementKind:
            picked = pick_nearest(atoms, center, kind, entry.required(kind))
            if picked is None:
                selected = None
                break
            selected.extend(picked)

        if selected is None:
            logger.debug("shortfall selecting %s, trying next entry", entry.name)
            continue
        return entry, selected
    return None


class ClusterEngine:
    def __init__(self, registry: SceneRegistry, events: ISceneEventSink, radius=None):
        self.registry = registry
        self.events = events
        self.radius = radius if radius is not None else CONFIG["CLUSTER_RADIUS"]

    def components(self) -> List[List[AtomInstance]]:
        atoms = self.registry.loose_atoms()
        return [[atoms[i] for i in comp] for comp in connected_components(atom_centers(atoms), self.radius)]

    def run(self) -> List[MoleculeInstance]:
        """One recognition pass over the loose pool. At most one molecule per component."""
        if len(self.registry.atoms) < 2:
            return []

        formed = []
        for component in self.components():
            if len(component) < 2:
                continue
            result = match_component(component)
            if result is None:
                continue

            entry, selected = result
            center = centroid(component)
            self.registry.remove_atoms(selected)
            mol = self.registry.add_molecule(entry.name, entry.formula, center)
            formed.append(mol)

            self.events.molecule_formed(entry.name, entry.formula)
            self.events.status_message(f"{entry.name} formed ({entry.formula})")
        return formed

"""
PinchChem Scene Registry.
========================

The authoritative store of everything on the table:
- the loose atom pool,
- bond intermediates (fragments),
- finished molecules,
- the discovered-molecule set.

Every mutation goes through this class and is mirrored to the renderer.
Fragments and molecules carry an explicit `z` so "topmost first" is a query,
not an accident of paint order.
"""
import itertools
import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional

from pinchchem.config import CONFIG
from pinchchem.core.interfaces import ISceneRenderer, NullSceneRenderer
from pinchchem.core.kinematics import centered_position, clamp_position
from pinchchem.core.types import (
    AtomInstance, BondMultiplicity, ElementKind, FragmentKind,
    IntermediateFragment, MoleculeInstance, Point2D, SceneEntity,
)

logger = logging.getLogger(__name__)


class SceneRegistry:
    def __init__(self, width=None, height=None, renderer: Optional[ISceneRenderer] = None):
        self.width = width or CONFIG["VIEWPORT_WIDTH"]
        self.height = height or CONFIG["VIEWPORT_HEIGHT"]
        self.renderer = renderer or NullSceneRenderer()

        self.atoms: "OrderedDict[str, AtomInstance]" = OrderedDict()
        self.fragments: "OrderedDict[str, IntermediateFragment]" = OrderedDict()
        self.molecules: "OrderedDict[str, MoleculeInstance]" = OrderedDict()
        self.discovered: "OrderedDict[str, str]" = OrderedDict()  # formula -> name

        self._ids = itertools.count(1)
        self._z = itertools.count(1)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    # --- QUERIES ---
    def loose_atoms(self) -> List[AtomInstance]:
        return list(self.atoms.values())

    def atoms_topmost(self) -> List[AtomInstance]:
        return list(reversed(self.atoms.values()))

    def structures_topmost(self) -> List[SceneEntity]:
        """Fragments and molecules, most recently registered first."""
        items = list(self.fragments.values()) + list(self.molecules.values())
        return sorted(items, key=lambda e: e.z, reverse=True)

    def is_loose(self, atom: AtomInstance) -> bool:
        return self.atoms.get(atom.id) is atom

    def clamp(self, entity: SceneEntity, pos: Point2D) -> Point2D:
        return clamp_position(pos, entity.size, entity.size, self.width, self.height)

    # --- ATOMS ---
    def add_atom(self, kind: ElementKind, center: Point2D) -> AtomInstance:
        size = CONFIG["ATOM_SIZE"]
        atom = AtomInstance(
            id=self._next_id("atom"),
            kind=kind,
            position=centered_position(center, size, self.width, self.height),
            size=size,
        )
        atom.render_handle = self.renderer.register(atom)
        self.atoms[atom.id] = atom
        return atom

    def detach_atom(self, atom: AtomInstance) -> AtomInstance:
        """Takes an atom out of the loose pool (it is now owned by a drag)."""
        return self.atoms.pop(atom.id)

    def restore_atom(self, atom: AtomInstance) -> None:
        """Puts a dropped atom back on top of the loose pool."""
        self.atoms[atom.id] = atom

    def remove_atoms(self, atoms: Iterable[AtomInstance]) -> None:
        """Consumes atoms. Works for loose atoms and detached (dragged) ones."""
        for atom in atoms:
            self.atoms.pop(atom.id, None)
            self.renderer.unregister(atom)

    # --- FRAGMENTS ---
    def add_fragment(self, kind: FragmentKind, center: Point2D, required_h: int,
                     bond: Optional[BondMultiplicity] = None) -> IntermediateFragment:
        size = CONFIG["C3_FRAGMENT_SIZE"] if kind == FragmentKind.C3 else CONFIG["C2_FRAGMENT_SIZE"]
        frag = IntermediateFragment(
            id=self._next_id("frag"),
            kind=kind,
            position=centered_position(center, size, self.width, self.height),
            required_h=required_h,
            bond=bond,
            size=size,
            z=next(self._z),
        )
        frag.render_handle = self.renderer.register(frag)
        self.fragments[frag.id] = frag
        return frag

    def remove_fragment(self, frag: IntermediateFragment) -> None:
        if self.fragments.pop(frag.id, None) is not None:
            self.renderer.unregister(frag)

    # --- MOLECULES ---
    def add_molecule(self, name: str, formula: str, center: Point2D) -> MoleculeInstance:
        size = CONFIG["MOLECULE_SIZE"]
        mol = MoleculeInstance(
            id=self._next_id("mol"),
            name=name,
            formula=formula,
            position=centered_position(center, size, self.width, self.height),
            size=size,
            z=next(self._z),
        )
        mol.render_handle = self.renderer.register(mol)
        self.molecules[mol.id] = mol
        self.discover(name, formula)
        return mol

    def promote_fragment(self, frag: IntermediateFragment, name: str, formula: str) -> MoleculeInstance:
        """Atomic replace: the fragment disappears and the molecule appears at its center."""
        center = frag.center
        self.remove_fragment(frag)
        return self.add_molecule(name, formula, center)

    def discover(self, name: str, formula: str) -> bool:
        if formula in self.discovered:
            return False
        self.discovered[formula] = name
        logger.info("discovered %s (%s)", name, formula)
        return True

    # --- MOVEMENT ---
    def move(self, entity: SceneEntity, pos: Point2D) -> Point2D:
        """Repositions an entity, clamped so its box stays on the display."""
        entity.position = self.clamp(entity, pos)
        self.renderer.move(entity)
        return entity.position

    # --- RESET ---
    def clear(self) -> None:
        """Empties atoms, fragments and molecules. The discovered set survives."""
        for entity in list(self.atoms.values()) + list(self.fragments.values()) + list(self.molecules.values()):
            self.renderer.unregister(entity)
        self.atoms.clear()
        self.fragments.clear()
        self.molecules.clear()

    def counts(self) -> Dict[str, int]:
        return {"atoms": len(self.atoms), "fragments": len(self.fragments), "molecules": len(self.molecules)}

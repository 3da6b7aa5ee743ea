"""
PinchChem Bond-Intermediate State Machine.
=========================================

Tracks unsaturated carbon skeletons (fragments) while the user feeds them
hydrogen one atom at a time.

    Forming (attached < required)  --H-->  Forming ... --H-->  Complete

Complete is never stored: the hydrogen that saturates a fragment replaces it
with a finished molecule inside the same call.

C2 hydrogens are anchored to a specific carbon. Slots are handed out in a
fixed cyclic order (carbon 0 first, then carbon 1) with a per-carbon slot
count that depends on the bond: single 3, double 2, triple 1.
C3 ring saturation is only an aggregate count.
"""
import logging
from typing import Optional, Sequence

from pinchchem.chemistry.catalog import (
    FRAGMENT_LABELS, FRAGMENT_PRODUCTS, HYDROGEN_OFFSETS, REQUIRED_HYDROGEN,
)
from pinchchem.core.interfaces import ISceneEventSink
from pinchchem.core.types import (
    AtomInstance, BondMultiplicity, ElementKind, FragmentKind, HydrogenAnchor,
    IntermediateFragment, InvariantViolation, MoleculeInstance, Point2D,
)
from pinchchem.scene.registry import SceneRegistry

logger = logging.getLogger(__name__)


def allocate_anchor(bond: Optional[BondMultiplicity], count: int) -> HydrogenAnchor:
    """
    Returns the anchor for the `count`-th hydrogen (1-based).
    """
    if bond is None:
        return HydrogenAnchor(carbon=None, slot=count - 1, offset=Point2D(0.0, 0.0))

    per_carbon = len(HYDROGEN_OFFSETS[bond][0])
    which = (count - 1) % (2 * per_carbon)
    carbon = 0 if which < per_carbon else 1
    slot = which % per_carbon
    offset = HYDROGEN_OFFSETS[bond][carbon][slot]
    return HydrogenAnchor(carbon=carbon, slot=slot, offset=Point2D(offset.x, offset.y))


class BondIntermediateMachine:
    def __init__(self, registry: SceneRegistry, events: ISceneEventSink):
        self.registry = registry
        self.events = events

    # --- CREATION ---
    def create_c2(self, atom_a: AtomInstance, atom_b: AtomInstance,
                  bond: BondMultiplicity) -> Optional[IntermediateFragment]:
        """
        Consumes two loose carbons and places a C2 fragment at their midpoint.
        Returns None when either carbon is gone by the time the choice lands.
        """
        if not (self.registry.is_loose(atom_a) and self.registry.is_loose(atom_b)):
            self.events.status_message("Bond cancelled - atoms are no longer available")
            return None

        ca, cb = atom_a.center, atom_b.center
        mid = Point2D((ca.x + cb.x) / 2, (ca.y + cb.y) / 2)
        self.registry.remove_atoms([atom_a, atom_b])

        key = (FragmentKind.C2, bond)
        frag = self.registry.add_fragment(FragmentKind.C2, mid, REQUIRED_HYDROGEN[key], bond=bond)

        label = FRAGMENT_LABELS[key]
        self.events.fragment_created(FragmentKind.C2, bond.value)
        self.events.status_message(f"{label} created - attach H atoms to convert to full molecule")
        return frag

    def create_c3(self, carbons: Sequence[AtomInstance], center: Point2D) -> IntermediateFragment:
        """Consumes three carbons (one may still be detached by a drag) into a C3 ring."""
        self.registry.remove_atoms(carbons)

        key = (FragmentKind.C3, None)
        frag = self.registry.add_fragment(FragmentKind.C3, center, REQUIRED_HYDROGEN[key])

        name, formula = FRAGMENT_PRODUCTS[key]
        self.events.fragment_created(FragmentKind.C3, "cyclic")
        self.events.status_message(
            f"C3 intermediate created - attach {frag.required_h} H atoms to form {name} ({formula})"
        )
        return frag

    # --- SATURATION ---
    def attach_hydrogen(self, frag: IntermediateFragment, hydrogen: AtomInstance) -> Optional[MoleculeInstance]:
        """
        Consumes one hydrogen into the fragment.
        Returns the finished molecule when this hydrogen completes it.
        """
        if hydrogen.kind != ElementKind.H:
            raise InvariantViolation(f"only hydrogen can saturate a fragment, got {hydrogen.kind.value}")
        if frag.id not in self.registry.fragments:
            raise InvariantViolation(f"fragment {frag.id} is not in the scene")
        if not frag.needs_hydrogen:
            raise InvariantViolation(f"fragment {frag.id} is already saturated")

        frag.attached_h += 1
        frag.anchors.append(allocate_anchor(frag.bond, frag.attached_h))
        self.registry.remove_atoms([hydrogen])

        self.events.hydrogen_attached(frag.id, frag.attached_h, frag.required_h)
        if frag.kind == FragmentKind.C3:
            self.events.status_message(
                f"Attached H to C3 intermediate - {frag.attached_h}/{frag.required_h} H attached"
            )
        else:
            self.events.status_message(
                f"Attached H to {frag.bond.value} bond - {frag.attached_h}/{frag.required_h} H attached"
            )

        if frag.attached_h < frag.required_h:
            return None
        return self._promote(frag)

    def _promote(self, frag: IntermediateFragment) -> MoleculeInstance:
        name, formula = FRAGMENT_PRODUCTS[(frag.kind, frag.bond)]
        mol = self.registry.promote_fragment(frag, name, formula)
        logger.info("%s promoted to %s", frag.id, mol.id)

        self.events.molecule_formed(name, formula)
        self.events.status_message(f"{name} formed ({formula})")
        return mol

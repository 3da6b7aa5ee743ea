"""
PinchChem Drop Logic (Merge / Bond Detection).
=============================================

Decides what a released loose atom turns into. Rules run in order and the
first one that applies wins:

1. Hydrogen dropped on a C3 ring that still needs hydrogen -> attach.
2. Hydrogen dropped on a C2 fragment that still needs hydrogen -> attach.
3. Carbon dropped near a resting carbon pair -> C3 ring.
4. Carbon dropped next to another carbon -> ask for the bond order (popup).

"Dropped on" means the atom's center is inside the fragment box.
"""
import itertools
import logging

from pinchchem.control.handlers import HandlerContext
from pinchchem.control.handlers.bond_choice_handler import BondChoiceHandler
from pinchchem.core.types import AtomInstance, ElementKind, FragmentKind, IntermediateFragment, Point2D

logger = logging.getLogger(__name__)


class DropHandler:
    def __init__(self, choice_handler: BondChoiceHandler):
        self.choices = choice_handler

    def handle(self, ctx: HandlerContext, atom: AtomInstance) -> bool:
        """
        Returns True when the drop was absorbed (consumed or a popup opened),
        False when the atom simply stays loose.
        """
        if atom.kind == ElementKind.H:
            # 1 + 2. SATURATION (rings first)
            for kind in (FragmentKind.C3, FragmentKind.C2):
                frag = self._fragment_under(ctx, atom, kind)
                if frag is not None:
                    ctx.bonding.attach_hydrogen(frag, atom)
                    return True

        if atom.kind == ElementKind.C:
            # 3. RING CLOSURE
            if self._try_ring(ctx, atom):
                return True

            # 4. BOND ORDER QUESTION
            if ctx.state.pending_choice is None:
                partner = self._merge_candidate(ctx, atom)
                if partner is not None and partner.kind == ElementKind.C:
                    self.choices.open(ctx, partner, atom)
                    return True

        return False

    def _fragment_under(self, ctx: HandlerContext, atom: AtomInstance, kind: FragmentKind):
        center = atom.center
        for entity in ctx.registry.structures_topmost():
            if not isinstance(entity, IntermediateFragment) or entity.kind != kind:
                continue
            if entity.needs_hydrogen and entity.box.contains(center):
                return entity
        return None

    def _try_ring(self, ctx: HandlerContext, atom: AtomInstance) -> bool:
        pair_radius = ctx.config["C3_PAIR_RADIUS"]
        centroid_radius = ctx.config["C3_CENTROID_RADIUS"]
        center = atom.center

        others = [a for a in ctx.registry.loose_atoms() if a is not atom and a.kind == ElementKind.C]
        for a, b in itertools.combinations(others, 2):
            if a.center.distance_to(b.center) >= pair_radius:
                continue
            mid = Point2D((a.center.x + b.center.x) / 2, (a.center.y + b.center.y) / 2)
            if center.distance_to(mid) < centroid_radius:
                logger.info("ring closure %s + %s + %s", a.id, b.id, atom.id)
                ctx.bonding.create_c3([a, b, atom], mid)
                return True
        return False

    def _merge_candidate(self, ctx: HandlerContext, atom: AtomInstance):
        """First other loose atom, in pool order, inside MERGE_RADIUS. None if there is none."""
        radius = ctx.config["MERGE_RADIUS"]
        center = atom.center
        for other in ctx.registry.loose_atoms():
            if other is not atom and center.distance_to(other.center) < radius:
                return other
        return None

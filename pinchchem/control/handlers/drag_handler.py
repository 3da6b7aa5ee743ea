"""
PinchChem Drag/Drop Logic.
=========================

Owns the single drag transaction of a gesture:

    pinch START  -> popup button / clear / grab / spawn
    every tick   -> dragged entity follows the pointer (clamped)
    pinch RELEASE-> commit position, then let the chemistry react

A dragged atom leaves the loose pool for the whole gesture, so nothing else
can bond, merge or cluster it mid-air.
"""
import logging

from pinchchem.config import ELEMENT_NAMES
from pinchchem.control.handlers import HandlerContext
from pinchchem.control.handlers.bond_choice_handler import BondChoiceHandler
from pinchchem.control.handlers.drop_handler import DropHandler
from pinchchem.control.handlers.system_handler import SystemHandler
from pinchchem.core.types import AtomInstance, DragSession, HitLayer

logger = logging.getLogger(__name__)


class DragHandler:
    def __init__(self, choice_handler: BondChoiceHandler, drop_handler: DropHandler, system_handler: SystemHandler):
        self.choices = choice_handler
        self.drops = drop_handler
        self.system = system_handler

    # --- 1. PINCH START ---
    def on_pinch_start(self, ctx: HandlerContext):
        p = ctx.pointer

        # Popup open: buttons act, anything else is swallowed
        if ctx.state.pending_choice is not None:
            hit = ctx.hit_tester.hit_test(p)
            if hit is not None and hit.layer == HitLayer.POPUP_BUTTON:
                self.choices.resolve(ctx, hit.target)
            return

        if ctx.state.drag is not None:
            logger.debug("pinch start ignored, drag already active")
            return

        hit = ctx.hit_tester.hit_test(p)
        if hit is None:
            return

        if hit.layer == HitLayer.CLEAR:
            self.system.clear(ctx)

        elif hit.layer in (HitLayer.STRUCTURE, HitLayer.ATOM):
            self._start_drag(ctx, hit.target)

        elif hit.layer == HitLayer.PALETTE:
            kind = hit.target.kind
            ctx.registry.add_atom(kind, p)
            ctx.events.spawn(kind)
            ctx.events.status_message(f"Spawned {ELEMENT_NAMES[kind.value]} atom - pinch to drag")

    def _start_drag(self, ctx: HandlerContext, entity):
        offset = ctx.pointer - entity.position
        if isinstance(entity, AtomInstance):
            ctx.registry.detach_atom(entity)
            ctx.events.status_message(f"Grabbed {ELEMENT_NAMES[entity.kind.value]} atom")
        else:
            ctx.events.status_message("Grabbed molecule (drag to move)")
        ctx.state.drag = DragSession(ref=entity, offset=offset)

    # --- 2. HOLD ---
    def on_drag(self, ctx: HandlerContext):
        drag = ctx.state.drag
        if drag is None or ctx.frame is None:
            return
        ctx.registry.move(drag.ref, ctx.pointer - drag.offset)

    # --- 3. PINCH RELEASE ---
    def on_pinch_release(self, ctx: HandlerContext):
        drag = ctx.state.drag
        if drag is None:
            return

        ctx.registry.move(drag.ref, ctx.pointer - drag.offset)
        ctx.state.drag = None

        if not drag.is_atom:
            ctx.events.status_message("Moved molecule")
            return

        atom = drag.ref
        ctx.registry.restore_atom(atom)
        if self.drops.handle(ctx, atom):
            return

        ctx.events.status_message(f"Dropped {ELEMENT_NAMES[atom.kind.value]} atom")
        ctx.clustering.run()

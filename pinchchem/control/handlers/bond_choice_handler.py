"""
PinchChem Bond Choice Handler (The Popup).
=========================================

Two carbons dropped close together do not bond on their own: the user must
pick single, double or triple. While the question is open every pinch is
routed here and nowhere else.

Resolution:
- A bond button -> C2 fragment with that multiplicity.
- Cancel, or BOND_CHOICE_TIMEOUT seconds of silence -> nothing is consumed,
  and the recognition pass the triggering drop skipped runs now.
"""
import logging
from typing import List, Tuple

from pinchchem.control.handlers import HandlerContext
from pinchchem.core.types import AtomInstance, BondChoice, BondMultiplicity, Box, PendingBondChoice

logger = logging.getLogger(__name__)

CHOICE_TO_BOND = {
    BondChoice.SINGLE: BondMultiplicity.SINGLE,
    BondChoice.DOUBLE: BondMultiplicity.DOUBLE,
    BondChoice.TRIPLE: BondMultiplicity.TRIPLE,
}


def layout_popup(atom_a: AtomInstance, atom_b: AtomInstance, config,
                 vw: float, vh: float) -> Tuple[Box, List[Tuple[BondChoice, Box]]]:
    """
    Places the popup just above the pair, centered on it, kept on screen.
    Buttons sit in one row: Single | Double | Triple | x
    """
    pw, ph = config["POPUP_SIZE"]
    margin = config["POPUP_MARGIN"]
    btn_h = config["POPUP_BUTTON_HEIGHT"]
    cancel_w = config["POPUP_CANCEL_WIDTH"]

    mid_x = (atom_a.center.x + atom_b.center.x) / 2
    top = min(atom_a.position.y, atom_b.position.y) - 10 - ph

    x = min(max(mid_x - pw / 2, margin), max(vw - pw - margin, margin))
    y = min(max(top, margin), max(vh - ph - margin, margin))
    popup = Box(x, y, pw, ph)

    gap = 6
    bond_w = (pw - 2 * margin - cancel_w - 3 * gap) / 3
    row_y = y + ph - margin - btn_h
    buttons = []
    bx = x + margin
    for choice in (BondChoice.SINGLE, BondChoice.DOUBLE, BondChoice.TRIPLE):
        buttons.append((choice, Box(bx, row_y, bond_w, btn_h)))
        bx += bond_w + gap
    buttons.append((BondChoice.CANCEL, Box(bx, row_y, cancel_w, btn_h)))
    return popup, buttons


class BondChoiceHandler:
    def open(self, ctx: HandlerContext, atom_a: AtomInstance, atom_b: AtomInstance) -> PendingBondChoice:
        popup, buttons = layout_popup(atom_a, atom_b, ctx.config, ctx.registry.width, ctx.registry.height)
        choice = PendingBondChoice(atom_a=atom_a, atom_b=atom_b, opened_at=ctx.now, popup=popup, buttons=buttons)
        ctx.state.pending_choice = choice
        logger.info("bond choice opened for %s + %s", atom_a.id, atom_b.id)
        ctx.events.status_message("Create bond between selected atoms? Pinch Single, Double, Triple or x")
        return choice

    def resolve(self, ctx: HandlerContext, choice: BondChoice):
        """Direct action for a popup button. Closes the popup before acting."""
        pending = ctx.state.pending_choice
        if pending is None:
            return None
        ctx.state.pending_choice = None

        if choice == BondChoice.CANCEL:
            ctx.events.status_message("Bond cancelled")
            ctx.clustering.run()
            return None

        return ctx.bonding.create_c2(pending.atom_a, pending.atom_b, CHOICE_TO_BOND[choice])

    def check_timeout(self, ctx: HandlerContext) -> bool:
        pending = ctx.state.pending_choice
        if pending is None:
            return False
        if (ctx.now - pending.opened_at) < ctx.config["BOND_CHOICE_TIMEOUT"]:
            return False

        logger.info("bond choice timed out")
        ctx.state.pending_choice = None
        ctx.events.status_message("Bond choice timed out")
        ctx.clustering.run()
        return True

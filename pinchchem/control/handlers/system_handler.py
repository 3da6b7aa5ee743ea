"""PinchChem System Handler (Clear / Reset)."""
import logging

from pinchchem.control.handlers import HandlerContext

logger = logging.getLogger(__name__)


class SystemHandler:
    def clear(self, ctx: HandlerContext):
        """
        Wipes atoms, fragments and molecules and drops any open drag or popup.
        The discovered set is kept.
        """
        drag = ctx.state.drag
        if drag is not None and drag.is_atom:
            # Detached atoms are not in the pool, remove them explicitly
            ctx.registry.remove_atoms([drag.ref])

        ctx.registry.clear()
        ctx.state.reset_interaction()
        logger.info("scene cleared, %d formulas discovered so far", len(ctx.registry.discovered))

        ctx.events.cleared_all()
        ctx.events.status_message("Cleared all atoms and molecules.")

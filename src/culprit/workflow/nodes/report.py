"""Report node - render the outcome and choose the exit code."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from culprit.core.config import State
from culprit.core.log import logger
from culprit.core.result import Status

# Operator interrupt, as a shell reports SIGINT
EXIT_ABORTED = 130
EXIT_FATAL = 1


@dataclass
class Report(BaseNode[State, None, int]):
    """Show how the session ended and check nothing was left disabled.

    exit_code is set by nodes that end the session without an outcome
    (declined, fatal errors).
    """

    exit_code: int | None = None

    async def run(self, ctx: GraphRunContext[State]) -> End[int]:
        session = ctx.state.runtime.session
        renderer = session.renderer
        outcome = session.outcome

        if outcome is not None:
            renderer.report(outcome)
            if outcome.status is Status.ABORTED:
                session.status = "aborted"
                code = EXIT_ABORTED
            elif outcome.status is Status.EMPTY:
                session.status = "failed"
                code = EXIT_FATAL
            else:
                session.status = "complete"
                code = 0
            logger.info(
                "Session finished: {status}",
                status=outcome.status.value,
                strategy=outcome.strategy,
                questions=outcome.questions,
                culprit=outcome.culprit.id if outcome.culprit else None,
            )
        else:
            code = self.exit_code or 0

        # Everything must be back on unless the operator aborted
        if session.gateway is not None and session.status != "aborted":
            leftover = session.gateway.disabled()
            if leftover:
                logger.error(
                    "Units left disabled at session end",
                    units=[c.id for c in leftover],
                )
                renderer.error(
                    "These units are still disabled: "
                    + ", ".join(renderer.names(c) for c in leftover)
                )
                code = code or EXIT_FATAL

        return End(code)

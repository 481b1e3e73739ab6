"""Initialize node - build the candidate pool and confirm with the
operator."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from culprit.core.config import State
from culprit.core.errors import EmptyPoolError, HostError
from culprit.core.log import logger
from culprit.core.oracle import Answer
from culprit.core.toggle import ToggleGateway, ToggleState
from culprit.host.discovery import Discovery
from culprit.workflow.nodes.report import EXIT_ABORTED, EXIT_FATAL, Report
from culprit.workflow.nodes.strategy import Scan, Search


@dataclass
class Initialize(BaseNode[State]):
    """Discover candidates, show them, and ask to begin."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> Scan | Search | Report:
        """
        Returns:
            Scan or Search: per the session's strategy
            Report: if there is nothing to test or the operator declines
        """
        session = ctx.state.runtime.session
        renderer = session.renderer
        discovery = Discovery(session.host, ctx.state.config.protected)

        try:
            pool = discovery.candidates()
        except HostError as e:
            logger.error("Could not list units", error=str(e))
            renderer.error(f"Could not list units: {e}")
            session.status = "failed"
            return Report(exit_code=EXIT_FATAL)
        except EmptyPoolError as e:
            logger.error("Candidate pool is empty after filtering")
            renderer.error(str(e))
            session.status = "failed"
            return Report(exit_code=EXIT_FATAL)

        session.pool = pool
        session.gateway = ToggleGateway(session.host, ToggleState(pool))

        renderer.intro(pool, session.strategy)
        answer = session.oracle.ask("Ready to begin?")
        if answer is Answer.ABORT:
            session.status = "aborted"
            return Report(exit_code=EXIT_ABORTED)
        if answer is Answer.NO:
            session.status = "declined"
            renderer.success("Exiting without changes.")
            return Report(exit_code=0)

        logger.info(
            f"Starting {session.strategy}",
            units=[c.id for c in pool],
        )
        if session.strategy == "scan":
            return Scan()
        return Search()

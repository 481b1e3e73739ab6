"""Scan and Search nodes - run one search strategy over the pool."""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from culprit.core.config import SessionState, State
from culprit.core.errors import ToggleError
from culprit.core.log import logger
from culprit.strategy import BisectionSearch, LinearScan, Strategy
from culprit.workflow.nodes.report import EXIT_FATAL, Report


@dataclass
class RunStrategy(BaseNode[State]):
    """Shared body of Scan and Search."""

    @abstractmethod
    def build(self, session: SessionState) -> Strategy:
        """Strategy to run over the session pool."""

    async def run(self, ctx: GraphRunContext[State]) -> Report:
        """Run the strategy and hand its outcome to Report.

        A ToggleError ends the session as fatal; the strategy has
        already put back whatever it could.
        """
        session = ctx.state.runtime.session
        strategy = self.build(session)
        session.status = "running"

        try:
            with logger.span(
                "{strategy} over {units} units",
                strategy=strategy.name,
                units=len(session.pool),
            ):
                session.outcome = strategy.run(session.pool)
        except ToggleError as e:
            session.status = "failed"
            session.renderer.error(str(e))
            if e.enabling:
                session.renderer.warning(
                    "Re-enable the units listed above by hand."
                )
            return Report(exit_code=EXIT_FATAL)

        return Report()


@dataclass
class Scan(RunStrategy):
    """Disable units one at a time."""

    def build(self, session: SessionState) -> Strategy:
        return LinearScan(
            session.gateway,
            session.oracle,
            render=session.renderer.scan_frame,
        )


@dataclass
class Search(RunStrategy):
    """Bisect the pool down to one unit."""

    def build(self, session: SessionState) -> Strategy:
        return BisectionSearch(
            session.gateway,
            session.oracle,
            render=session.renderer.search_step,
        )

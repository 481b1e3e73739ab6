"""Scan and search commands - run one interactive session."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from pydantic import BaseModel
from rich.console import Console

from culprit.core.display import ConsoleRenderer, NameResolver
from culprit.core.log import logger
from culprit.core.oracle import ConsoleOracle
from culprit.host.command import CommandHost

if TYPE_CHECKING:
    from culprit.core.config import State


class SessionCommand(BaseModel):
    """Base for the two session subcommands."""

    strategy: ClassVar[str]

    def prepare(self, state: State) -> None:
        """Fill in the collaborators the session has not been given.

        Tests preset host, oracle and renderer; from the command line
        they come from the configuration.
        """
        session = state.runtime.session
        session.strategy = self.strategy

        console = Console()
        if session.host is None:
            session.host = CommandHost(state.config.host)
        if session.renderer is None:
            session.renderer = ConsoleRenderer(
                console,
                NameResolver(session.host),
                clear_screen=state.config.display.clear_screen,
            )
        if session.oracle is None:
            session.oracle = ConsoleOracle(console)

    async def run_workflow(self, state: State) -> int:
        """Run the session workflow.

        Returns:
            Exit code (0 = success, 1 = fatal, 130 = aborted)
        """
        from culprit.workflow.graph import create_workflow
        from culprit.workflow.nodes import Initialize

        self.prepare(state)
        workflow = create_workflow()

        async with workflow.iter(Initialize(), state=state) as run:
            async for node in run:
                logger.debug(f"Workflow node: {type(node).__name__}")

        return run.result.output


class ScanCommand(SessionCommand):
    """Disable each enabled unit in turn, asking after each one.

    Every unit is re-enabled before moving on. Answer y to continue to
    the next unit or n to stop.
    """

    strategy: ClassVar[str] = "scan"


class SearchCommand(SessionCommand):
    """Find the problematic unit by binary search.

    Disables half of the remaining units, asks whether the problem is
    gone, re-enables them and keeps searching in the half that contains
    the problem until one unit is left.
    """

    strategy: ClassVar[str] = "search"

"""Operator-facing output: display names and terminal rendering."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePosixPath

from rich.console import Console
from rich.markup import escape

from culprit.core.candidate import Candidate
from culprit.core.errors import HostError
from culprit.core.log import logger
from culprit.core.result import Outcome, Status
from culprit.host.base import Host
from culprit.strategy.bisect import SearchStep
from culprit.strategy.linear import ScanFrame


class NameResolver:
    """Resolve and cache human-readable names for candidates.

    Names are only ever displayed; identity is always the candidate id.
    """

    def __init__(self, host: Host | None = None):
        self.host = host
        self._names: dict[Candidate, str] = {}

    @staticmethod
    def fallback(candidate: Candidate) -> str:
        """``dir/file.php`` for nested units, the id otherwise."""
        path = PurePosixPath(candidate.id)
        if len(path.parts) > 1:
            return f"{path.parent.name}/{path.name}"
        return candidate.id

    def __call__(self, candidate: Candidate) -> str:
        if candidate not in self._names:
            name = None
            if self.host is not None:
                try:
                    name = self.host.display_name(candidate)
                except HostError as e:
                    logger.debug(
                        "Could not resolve display name",
                        unit=candidate.id,
                        error=str(e),
                    )
            self._names[candidate] = name or self.fallback(candidate)
        return self._names[candidate]


class ConsoleRenderer:
    """Renders session progress with rich."""

    def __init__(
        self,
        console: Console,
        names: NameResolver,
        clear_screen: bool = True,
    ):
        self.console = console
        self.names = names
        self.clear_screen = clear_screen

    def _name(self, candidate: Candidate) -> str:
        return escape(self.names(candidate))

    # Message primitives

    def line(self, message: str = "") -> None:
        self.console.print(escape(message))

    def success(self, message: str) -> None:
        self.console.print(f"[green]Success:[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]Error:[/red] {escape(message)}")

    def clear(self) -> None:
        if self.clear_screen:
            self.console.clear()

    def banner(self, title: str) -> None:
        self.console.print(f"[bold]=== {escape(title)} ===[/bold]")
        self.console.print()

    def listing(
        self,
        pool: Sequence[Candidate],
        marked: int | None = None,
        numbered: bool = True,
    ) -> None:
        for index, candidate in enumerate(pool):
            prefix = f"{index + 1}." if numbered else "-"
            if index == marked:
                self.console.print(
                    f"[red]{prefix} {self._name(candidate)} "
                    f"(currently disabled)[/red]"
                )
            else:
                self.console.print(f"{prefix} {self._name(candidate)}")

    # Session screens

    def intro(self, pool: Sequence[Candidate], strategy: str) -> None:
        """Initial screen listing every candidate."""
        self.clear()
        title, plan = {
            "scan": (
                "Debug Cycle",
                "This will disable and re-enable each unit in turn.",
            ),
            "search": (
                "Binary Search",
                "This will use binary search to find the problematic unit.",
            ),
        }[strategy]
        self.console.print()
        self.banner(title)
        self.success(
            f"Found {len(pool)} enabled units "
            f"(excluding protected units):"
        )
        self.console.print()
        self.listing(pool)
        self.console.print()
        self.warning(plan)
        self.warning(
            "Pressing Ctrl+C while a unit is disabled exits without "
            "re-enabling it."
        )
        self.console.print()

    def scan_frame(self, frame: ScanFrame) -> None:
        self.clear()
        self.banner("Current Status")
        self.listing(frame.pool, marked=frame.index)
        self.console.print()

        if frame.restored is not None:
            self.success(
                f"{self.names(frame.restored)} has been re-enabled"
            )
            self.console.print()
        if frame.failed is not None:
            self.error(f"Could not disable {self.names(frame.failed)}, "
                       f"skipped it")
            self.console.print()

        self.warning(
            f"Disabled unit {frame.index + 1} of {len(frame.pool)}: "
            f"{self.names(frame.current)}"
        )
        self.console.print()
        self.console.print("[blue]Options:[/blue]")
        self.console.print("  y - Re-enable unit and continue to next one")
        self.console.print("  n - Re-enable unit and exit")
        self.console.print(
            "  Ctrl+C - Exit without re-enabling (not recommended)"
        )
        self.console.print()

    def search_step(self, step: SearchStep) -> None:
        if step.answer is None:
            self.clear()
            self.banner(f"Step {step.number}")
            self.warning(f"Disabled {len(step.probe)} units:")
            self.listing(step.probe, numbered=False)
            self.console.print()
            self.console.print("Remaining active units:")
            self.listing(step.held, numbered=False)
            self.console.print()
            return

        group = "disabled" if step.answer.affirmative else "active"
        self.success(f"Problem is in the {group} group. Narrowing search.")
        self.console.print()

    def report(self, outcome: Outcome) -> None:
        """Final status for a finished strategy run."""
        if outcome.skipped:
            self.error(
                "Skipped (could not disable): "
                + ", ".join(self.names(c) for c in outcome.skipped)
            )

        if outcome.status is Status.IDENTIFIED:
            self.clear()
            self.success(
                f"Identified problematic unit: {self.names(outcome.culprit)}"
            )
        elif outcome.status is Status.SUSPENDED:
            self.warning(
                f"Search stopped with {len(outcome.remaining)} "
                f"candidates left:"
            )
            self.listing(outcome.remaining, numbered=False)
            self.success("Exiting binary search.")
        elif outcome.status is Status.STOPPED:
            self.success("Exiting debug cycle.")
        elif outcome.status is Status.EXHAUSTED:
            self.success("Debug cycle completed!")
            self.line(
                "No single unit was isolated; the problem may need "
                "several units disabled together."
            )
        elif outcome.status is Status.ABORTED:
            if outcome.left_disabled:
                self.warning("Aborted. These units are still disabled:")
                self.listing(outcome.left_disabled, numbered=False)
            else:
                self.warning("Aborted.")
        elif outcome.status is Status.EMPTY:
            self.error("Nothing to test.")

"""Linear scan - disable units one at a time, in order."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from culprit.core.candidate import Candidate
from culprit.core.errors import ToggleError
from culprit.core.log import logger
from culprit.core.oracle import Answer, Oracle
from culprit.core.result import Outcome, Status
from culprit.core.toggle import ToggleGateway


@dataclass
class ScanFrame:
    """What the operator sees while one unit is disabled."""

    pool: list[Candidate]
    index: int
    restored: Candidate | None = None  # re-enabled after the last frame
    failed: Candidate | None = None    # could not be disabled, skipped

    @property
    def current(self) -> Candidate:
        return self.pool[self.index]


class LinearScan:
    """Visit every candidate once: disable, ask, re-enable.

    The candidate is re-enabled whatever the answer. Answering no ends
    the scan after re-enabling. A candidate that cannot be disabled is
    skipped; one that cannot be re-enabled ends the scan with a
    ToggleError.
    """

    QUESTION = "Continue?"

    def __init__(
        self,
        gateway: ToggleGateway,
        oracle: Oracle,
        render: Callable[[ScanFrame], None] | None = None,
    ):
        self.gateway = gateway
        self.oracle = oracle
        self.render = render

    @property
    def name(self) -> str:
        return "scan"

    def run(self, pool: Sequence[Candidate]) -> Outcome:
        pool = list(pool)
        if not pool:
            logger.warn("Nothing to test")
            return Outcome(strategy=self.name, status=Status.EMPTY)

        visited: list[Candidate] = []
        skipped: list[Candidate] = []
        restored = failed = None

        for index, candidate in enumerate(pool):
            try:
                with self.gateway.probe([candidate]) as probe:
                    if self.render:
                        self.render(ScanFrame(pool, index, restored, failed))
                    answer = self.oracle.ask(self.QUESTION)
                    visited.append(candidate)

                    if answer is Answer.ABORT:
                        probe.abandon()
                        return Outcome(
                            strategy=self.name,
                            status=Status.ABORTED,
                            visited=visited,
                            skipped=skipped,
                            left_disabled=probe.disabled,
                            questions=len(visited),
                        )
            except ToggleError as e:
                if e.enabling:
                    raise
                skipped.append(candidate)
                failed, restored = candidate, None
                continue

            restored, failed = candidate, None
            if answer is Answer.NO:
                logger.info(f"Scan stopped at {candidate}", unit=candidate.id)
                return Outcome(
                    strategy=self.name,
                    status=Status.STOPPED,
                    visited=visited,
                    skipped=skipped,
                    questions=len(visited),
                )

        logger.info(
            "Scan completed without isolating a unit",
            visited=len(visited),
            skipped=len(skipped),
        )
        return Outcome(
            strategy=self.name,
            status=Status.EXHAUSTED,
            visited=visited,
            skipped=skipped,
            questions=len(visited),
        )

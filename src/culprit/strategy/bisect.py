"""Bisection search - halve the pool until one unit remains."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from culprit.core.candidate import Candidate
from culprit.core.log import logger
from culprit.core.oracle import Answer, Oracle
from culprit.core.result import Outcome, Status
from culprit.core.toggle import ToggleGateway


@dataclass
class SearchStep:
    """One bisection round.

    Rendered once before the question (answer and narrowed unset) and
    once after narrowing, then dropped.
    """

    number: int
    pool: list[Candidate]
    mid: int
    probe: list[Candidate]
    held: list[Candidate]
    answer: Answer | None = None
    narrowed: list[Candidate] | None = None

    @classmethod
    def split(cls, pool: Sequence[Candidate], number: int) -> SearchStep:
        """Split the pool at floor(n / 2).

        The probe group is the front half and, for odd sizes, the
        smaller one.
        """
        pool = list(pool)
        mid = len(pool) // 2
        return cls(
            number=number,
            pool=pool,
            mid=mid,
            probe=pool[:mid],
            held=pool[mid:],
        )


class BisectionSearch:
    """Find the unit causing the problem in ceil(log2(n)) questions.

    Each step disables the probe group, asks whether the problem is
    gone and re-enables the group before narrowing. "Fixed" keeps the
    probe group, "not fixed" keeps the held group. Between steps the
    operator may stop; the search then ends suspended with the current
    pool as the best narrowing.

    Assumes exactly one unit causes the problem and the operator
    answers about the configuration in front of them.
    """

    FIXED_QUESTION = "Is the issue fixed with these units disabled?"
    CONTINUE_QUESTION = "Continue to next step?"

    def __init__(
        self,
        gateway: ToggleGateway,
        oracle: Oracle,
        render: Callable[[SearchStep], None] | None = None,
    ):
        self.gateway = gateway
        self.oracle = oracle
        self.render = render

    @property
    def name(self) -> str:
        return "search"

    def run(self, pool: Sequence[Candidate]) -> Outcome:
        pool = list(pool)
        if not pool:
            logger.warn("No candidates to search")
            return Outcome(strategy=self.name, status=Status.EMPTY)

        questions = 0
        number = 0
        while len(pool) > 1:
            number += 1
            step = SearchStep.split(pool, number)

            with logger.span(
                "Bisection step {number}",
                number=number,
                probe=[c.id for c in step.probe],
                held=[c.id for c in step.held],
            ), self.gateway.probe(step.probe) as probe:
                if self.render:
                    self.render(step)
                answer = self.oracle.ask(self.FIXED_QUESTION)
                questions += 1

                if answer is Answer.ABORT:
                    probe.abandon()
                    return Outcome(
                        strategy=self.name,
                        status=Status.ABORTED,
                        remaining=pool,
                        left_disabled=probe.disabled,
                        questions=questions,
                    )

            # The probe group is enabled again from here on
            step.answer = answer
            step.narrowed = step.probe if answer.affirmative else step.held
            pool = step.narrowed
            logger.info(
                "Problem is in the {group} group",
                group="disabled" if answer.affirmative else "active",
                remaining=len(pool),
            )
            if self.render:
                self.render(step)

            if len(pool) > 1:
                control = self.oracle.ask(self.CONTINUE_QUESTION)
                if control is not Answer.YES:
                    status = (
                        Status.ABORTED if control is Answer.ABORT
                        else Status.SUSPENDED
                    )
                    logger.info(
                        f"Search {status.value} with {len(pool)} units left"
                    )
                    return Outcome(
                        strategy=self.name,
                        status=status,
                        remaining=pool,
                        questions=questions,
                    )

        culprit = pool[0]
        logger.info(f"Identified {culprit}", unit=culprit.id)
        return Outcome(
            strategy=self.name,
            status=Status.IDENTIFIED,
            culprit=culprit,
            remaining=pool,
            questions=questions,
        )

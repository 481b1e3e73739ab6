"""Value objects produced by the search strategies."""

from enum import Enum

from pydantic import BaseModel, Field

from culprit.core.candidate import Candidate


class Status(str, Enum):
    """How a strategy run ended."""

    IDENTIFIED = "identified"  # bisection resolved to one candidate
    SUSPENDED = "suspended"    # bisection stopped with pool > 1
    EXHAUSTED = "exhausted"    # scan visited every candidate
    STOPPED = "stopped"        # scan stopped by the operator
    ABORTED = "aborted"        # interrupted, toggles not reverted
    EMPTY = "empty"            # nothing to test


class Outcome(BaseModel):
    """Result of one Linear Scan or Bisection Search run."""

    strategy: str
    status: Status
    culprit: Candidate | None = None
    remaining: list[Candidate] = Field(
        default_factory=list,
        description="Best-known narrowing of the pool when the run ended",
    )
    visited: list[Candidate] = Field(
        default_factory=list,
        description="Candidates that were disabled and asked about",
    )
    skipped: list[Candidate] = Field(
        default_factory=list,
        description="Candidates whose disable failed and were passed over",
    )
    left_disabled: list[Candidate] = Field(
        default_factory=list,
        description="Candidates still disabled because the run aborted",
    )
    questions: int = Field(
        default=0,
        description="Number of probe questions the oracle answered",
    )

    @property
    def clean(self) -> bool:
        """True if the run ended without leaving anything disabled."""
        return not self.left_disabled

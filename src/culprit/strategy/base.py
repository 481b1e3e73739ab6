"""Base strategy interface."""

from abc import abstractmethod
from collections.abc import Sequence
from typing import Protocol

from culprit.core.candidate import Candidate
from culprit.core.result import Outcome


class Strategy(Protocol):
    """Protocol for search strategies.

    A strategy decides which units to disable, asks the oracle about
    each configuration and puts every unit back before returning,
    except after an abort.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name (scan, search)."""
        pass

    @abstractmethod
    def run(self, pool: Sequence[Candidate]) -> Outcome:
        """Search the pool and report what was found.

        Args:
            pool: Ordered candidates, no duplicates

        Returns:
            Outcome describing how the run ended

        Raises:
            ToggleError: If a unit could not be restored, or (bisection)
                a probe group could not be disabled
        """
        pass

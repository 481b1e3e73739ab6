"""Host interface - the environment that owns the units."""

from abc import abstractmethod
from typing import Protocol

from culprit.core.candidate import Candidate


class Host(Protocol):
    """Protocol for environments whose units can be toggled.

    Implementations raise HostError when the host rejects an operation
    or cannot be reached.
    """

    @abstractmethod
    def list_enabled(self) -> list[str]:
        """Identifiers of the currently enabled units, in host order."""
        pass

    @abstractmethod
    def set_enabled(self, candidate: Candidate, enabled: bool) -> None:
        """Enable or disable exactly one unit."""
        pass

    @abstractmethod
    def display_name(self, candidate: Candidate) -> str | None:
        """Human-readable name, or None if the host has none."""
        pass

"""Exception types raised by culprit."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from culprit.core.candidate import Candidate


class CulpritError(Exception):
    """Base class for all culprit errors."""


class HostError(CulpritError):
    """A host command failed, timed out, or printed unusable output."""


class ToggleError(CulpritError):
    """One or more units could not be enabled or disabled.

    Attributes:
        candidates: The units whose toggle failed
        enabling: True if the failed operation was an enable
    """

    def __init__(
        self,
        message: str,
        candidates: list[Candidate],
        enabling: bool,
    ):
        super().__init__(message)
        self.candidates = candidates
        self.enabling = enabling


class ProbeInProgressError(CulpritError):
    """A probe was opened while another one was still outstanding."""


class EmptyPoolError(CulpritError):
    """No candidates are left after discovery and filtering."""

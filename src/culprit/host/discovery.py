"""Discovery - build the candidate pool from the host."""

from __future__ import annotations

from typing import TYPE_CHECKING

from culprit.core.candidate import Candidate
from culprit.core.errors import EmptyPoolError
from culprit.core.log import logger
from culprit.host.base import Host

if TYPE_CHECKING:
    from culprit.core.config import ProtectedConfig


class Discovery:
    """Lists enabled units and drops the ones that must never be toggled.

    A unit is protected when its identifier contains one of the
    configured path fragments (``mu-plugins/``) or its file name is one
    of the reserved names (WordPress drop-ins). The search strategies
    never see protected units and never filter again.
    """

    def __init__(self, host: Host, protected: ProtectedConfig):
        self.host = host
        self.protected = protected

    def is_protected(self, unit: str) -> bool:
        if any(fragment in unit for fragment in self.protected.path_fragments):
            return True
        return Candidate(id=unit).basename in self.protected.names

    def candidates(self) -> list[Candidate]:
        """Enabled, unprotected units in host order, without duplicates.

        Raises:
            HostError: If the host cannot list its units
            EmptyPoolError: If nothing is left to test
        """
        pool: list[Candidate] = []
        seen: set[str] = set()

        for unit in self.host.list_enabled():
            if unit in seen:
                continue
            seen.add(unit)
            if self.is_protected(unit):
                logger.debug(f"Skipping protected unit {unit}", unit=unit)
                continue
            pool.append(Candidate(id=unit))

        logger.info(
            f"Discovered {len(pool)} candidate(s)",
            protected=len(seen) - len(pool),
        )
        if not pool:
            raise EmptyPoolError(
                "No regular enabled units found "
                "(excluding protected units)."
            )
        return pool

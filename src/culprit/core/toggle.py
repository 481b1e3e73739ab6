"""Toggle gateway - apply and revert the enabled state of units."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from culprit.core.candidate import Candidate
from culprit.core.errors import HostError, ProbeInProgressError, ToggleError
from culprit.core.log import logger

if TYPE_CHECKING:
    from culprit.host.base import Host


class ToggleState:
    """Explicit map of candidate -> enabled.

    Candidates come out of discovery enabled, so a candidate the map
    has never seen counts as enabled.
    """

    def __init__(self, candidates: Iterable[Candidate] = ()):
        self._enabled: dict[Candidate, bool] = {c: True for c in candidates}

    def is_enabled(self, candidate: Candidate) -> bool:
        return self._enabled.get(candidate, True)

    def set(self, candidate: Candidate, enabled: bool) -> None:
        self._enabled[candidate] = enabled

    def disabled(self) -> list[Candidate]:
        return [c for c, enabled in self._enabled.items() if not enabled]


class ToggleGateway:
    """The only path through which a candidate's state changes.

    Every change goes to the host first and is recorded in the
    ToggleState only once the host accepted it, so a failure for one
    unit never disturbs the bookkeeping of another.
    """

    def __init__(self, host: Host, state: ToggleState | None = None):
        self.host = host
        self.state = state if state is not None else ToggleState()
        self._outstanding: Probe | None = None

    def disable(self, candidate: Candidate) -> None:
        """Disable one unit. No-op if it is already disabled."""
        self._set(candidate, False)

    def enable(self, candidate: Candidate) -> None:
        """Enable one unit. No-op if it is already enabled."""
        self._set(candidate, True)

    def _set(self, candidate: Candidate, enabled: bool) -> None:
        verb = "enable" if enabled else "disable"
        if self.state.is_enabled(candidate) == enabled:
            logger.spew(f"{candidate} already {verb}d", unit=candidate.id)
            return

        try:
            self.host.set_enabled(candidate, enabled)
        except HostError as e:
            logger.error(
                f"Failed to {verb} {candidate}",
                unit=candidate.id,
                error=str(e),
            )
            raise ToggleError(
                f"Could not {verb} {candidate}: {e}",
                [candidate],
                enabling=enabled,
            ) from e

        self.state.set(candidate, enabled)
        logger.debug(f"{verb.capitalize()}d {candidate}", unit=candidate.id)

    def disable_group(self, group: Sequence[Candidate]) -> list[Candidate]:
        """Disable every member of a group, all or nothing.

        If one member cannot be disabled, the members this call already
        disabled are enabled again before the error is raised.

        Returns:
            The members whose state this call changed
        """
        changed: list[Candidate] = []
        for candidate in group:
            if not self.state.is_enabled(candidate):
                continue
            try:
                self.disable(candidate)
            except ToggleError:
                if changed:
                    logger.warn(
                        f"Rolling back {len(changed)} unit(s) disabled "
                        f"before the failure"
                    )
                    self.enable_group(changed)
                raise
            changed.append(candidate)
        return changed

    def enable_group(self, group: Sequence[Candidate]) -> None:
        """Enable every member, then report all failures at once.

        Raises:
            ToggleError: naming every member that stayed disabled
        """
        failed: list[Candidate] = []
        for candidate in group:
            try:
                self.enable(candidate)
            except ToggleError:
                failed.append(candidate)
        if failed:
            names = ", ".join(c.id for c in failed)
            raise ToggleError(
                f"Could not re-enable: {names}", failed, enabling=True
            )

    def probe(self, group: Sequence[Candidate]) -> Probe:
        """Disable a group for the span of a `with` block.

            with gateway.probe(group) as probe:
                answer = oracle.ask(...)
                if answer is Answer.ABORT:
                    probe.abandon()
        """
        return Probe(self, list(group))

    def disabled(self) -> list[Candidate]:
        return self.state.disabled()

    @property
    def probing(self) -> bool:
        return self._outstanding is not None


class Probe:
    """A group disabled for one question.

    Leaving the block re-enables the group, also when an ordinary
    exception unwinds through it. It stays disabled when the probe was
    abandoned or a KeyboardInterrupt/SystemExit passes through; the
    probe then remains outstanding and no further probe can be opened.
    """

    def __init__(self, gateway: ToggleGateway, group: list[Candidate]):
        self.gateway = gateway
        self.group = group
        self.disabled: list[Candidate] = []
        self.abandoned = False

    def __enter__(self) -> Probe:
        if self.gateway._outstanding is not None:
            raise ProbeInProgressError(
                "Another probe group is still disabled"
            )
        self.disabled = self.gateway.disable_group(self.group)
        self.gateway._outstanding = self
        return self

    def abandon(self) -> None:
        """Leave the group disabled when the block exits."""
        self.abandoned = True

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.abandoned or (
            exc_type is not None and not issubclass(exc_type, Exception)
        ):
            logger.warn(
                "Probe abandoned, units left disabled",
                units=[c.id for c in self.disabled],
            )
            return False

        self.gateway._outstanding = None
        if exc_type is None:
            self.gateway.enable_group(self.disabled)
            return False

        try:
            self.gateway.enable_group(self.disabled)
        except ToggleError as e:
            # The original exception keeps propagating
            logger.error(
                "Could not restore probe group while unwinding",
                error=str(e),
                units=[c.id for c in e.candidates],
            )
        return False

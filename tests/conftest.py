"""Pytest configuration and fixtures for culprit tests."""

import io
import sys
import tempfile
from collections import deque
from pathlib import Path

import pytest
from rich.console import Console

from culprit.core.candidate import Candidate
from culprit.core.errors import HostError
from culprit.core.log import ConsoleSink, setup_logger
from culprit.core.oracle import Answer


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Configure logging for console-only mode during tests.

    This enables debug output during test runs without requiring
    authentication or sending logs to logfire.dev.
    """
    test_log_root = Path(tempfile.gettempdir()) / "culprit-tests"
    setup_logger(
        log_root=test_log_root,
        session_name="test",
        console=ConsoleSink(level="debug"),
    )


class FakeHost:
    """In-memory host that records every call.

    Units listed in fail_disable / fail_enable make the matching
    set_enabled() call raise HostError.
    """

    def __init__(self, units, names=None, fail_disable=(), fail_enable=()):
        self.units = list(units)
        self.enabled = set(self.units)
        self.names = names or {}
        self.fail_disable = set(fail_disable)
        self.fail_enable = set(fail_enable)
        self.calls: list[tuple[str, str]] = []

    def list_enabled(self) -> list[str]:
        return [unit for unit in self.units if unit in self.enabled]

    def set_enabled(self, candidate: Candidate, enabled: bool) -> None:
        action = "enable" if enabled else "disable"
        self.calls.append((action, candidate.id))
        failing = self.fail_enable if enabled else self.fail_disable
        if candidate.id in failing:
            raise HostError(f"{action} {candidate.id} failed")
        if enabled:
            self.enabled.add(candidate.id)
        else:
            self.enabled.discard(candidate.id)

    def display_name(self, candidate: Candidate) -> str | None:
        return self.names.get(candidate.id)

    @property
    def disabled(self) -> set[str]:
        return set(self.units) - self.enabled

    @property
    def toggles(self) -> int:
        return len(self.calls)


class ScriptedOracle:
    """Oracle answering from a queue or from a function.

    The function receives the question and the set of unit ids the
    host currently has disabled, so answers can depend on the toggle
    configuration actually in place.
    """

    def __init__(self, answers=(), respond=None, host=None):
        self.answers = deque(answers)
        self.respond = respond
        self.host = host
        self.asked: list[str] = []
        self.seen: list[set[str]] = []

    def ask(self, question: str) -> Answer:
        self.asked.append(question)
        disabled = self.host.disabled if self.host else set()
        self.seen.append(set(disabled))
        if self.answers:
            return self.answers.popleft()
        if self.respond is None:
            raise AssertionError(f"Unexpected question: {question}")
        return self.respond(question, disabled)


def culprit_oracle(host, culprit):
    """Consistent operator: the problem is gone iff culprit is disabled.

    Always agrees to begin and to continue.
    """
    def respond(question, disabled):
        if question.startswith("Is the issue fixed"):
            return Answer.YES if culprit in disabled else Answer.NO
        return Answer.YES
    return ScriptedOracle(respond=respond, host=host)


def candidates(*ids) -> list[Candidate]:
    return [Candidate(id=i) for i in ids]


@pytest.fixture
def make_host():
    return FakeHost


@pytest.fixture
def make_oracle():
    return ScriptedOracle


@pytest.fixture
def consistent_oracle():
    return culprit_oracle


@pytest.fixture
def pool_of():
    return candidates


@pytest.fixture
def output():
    """Renderer console writing into a buffer."""
    buffer = io.StringIO()
    console = Console(file=buffer, width=120, color_system=None)
    return console, buffer


@pytest.fixture
def state():
    """State built from the package defaults without CLI parsing.

    Temporarily replaces sys.argv to avoid conflicts with pytest's
    command line arguments.
    """
    from culprit.core.config import State

    old_argv = sys.argv
    sys.argv = ['culprit']

    try:
        yield State()
    finally:
        sys.argv = old_argv

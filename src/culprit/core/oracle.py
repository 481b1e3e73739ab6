"""Oracle interface - ask the operator yes/no questions."""

from __future__ import annotations

from enum import Enum
from typing import IO, Protocol

from rich.console import Console
from rich.markup import escape

from culprit.core.log import logger


class Answer(Enum):
    """An operator's answer.

    YES/NO answer "is it fixed?" questions directly. For control
    questions YES means continue and NO means stop. ABORT means the
    operator interrupted the wait; nothing is reverted after it.
    """

    YES = "y"
    NO = "n"
    ABORT = "abort"

    @property
    def affirmative(self) -> bool:
        return self is Answer.YES


class Oracle(Protocol):
    """Anything that can answer a yes/no question."""

    def ask(self, question: str) -> Answer:
        """Block until the question is answered."""
        ...


class ConsoleOracle:
    """Oracle reading answers line by line from standard input.

    Only ``y`` and ``n`` are accepted, case-insensitively and with
    surrounding whitespace ignored. Anything else re-poses the question,
    with no limit on retries. Ctrl+C or end of input returns
    Answer.ABORT.
    """

    CHOICES = {"y": Answer.YES, "n": Answer.NO}

    def __init__(self, console: Console, stream: IO[str] | None = None):
        """
        Args:
            console: Console the prompt is written to
            stream: Line source; None reads with input()
        """
        self.console = console
        self.stream = stream

    def ask(self, question: str) -> Answer:
        prompt = f"{escape(question)} [bold]\\[y/n][/bold] "
        while True:
            try:
                line = self.console.input(prompt, stream=self.stream)
            except (KeyboardInterrupt, EOFError):
                self.console.print()
                logger.warn("Interrupted while waiting for an answer",
                            question=question)
                return Answer.ABORT

            # readline() returns "" only at end of input
            if self.stream is not None and line == "":
                self.console.print()
                logger.warn("Input closed while waiting for an answer",
                            question=question)
                return Answer.ABORT

            answer = self.CHOICES.get(line.strip().lower())
            if answer is not None:
                logger.debug(f"Answered {answer.value}", question=question)
                return answer
            logger.spew("Rejected answer", question=question, raw=line)

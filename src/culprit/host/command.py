"""Host driven by shell command templates (WP-CLI by default)."""

from __future__ import annotations

import json
import shlex
from typing import TYPE_CHECKING

from culprit.core.candidate import Candidate
from culprit.core.errors import HostError
from culprit.core.log import logger
from culprit.core.runner import Runner

if TYPE_CHECKING:
    from culprit.core.config import HostConfig


class CommandHost:
    """Host that runs one configured command per operation.

    Templates come from ``config.host.commands`` and may use ``{unit}``
    (the identifier) and ``{slug}``; both are shell-quoted before
    substitution. ``list`` must print a JSON array of identifiers or one
    identifier per line.
    """

    def __init__(self, config: HostConfig, runner: Runner | None = None):
        self.config = config
        self.runner = runner or Runner()

    def _run(self, operation: str, candidate: Candidate | None = None) -> str:
        template = self.config.commands.get(operation)
        if not template:
            raise HostError(
                f"No '{operation}' command configured under "
                f"config.host.commands"
            )

        command = template
        if candidate is not None:
            try:
                command = template.format(
                    unit=shlex.quote(candidate.id),
                    slug=shlex.quote(candidate.slug),
                )
            except (KeyError, IndexError, ValueError) as e:
                # Literal braces must be doubled: {{ and }}
                raise HostError(
                    f"Bad '{operation}' command template {template!r}: "
                    f"only {{unit}} and {{slug}} can be substituted ({e!r})"
                ) from e

        result = self.runner.execute(
            command,
            cwd=self.config.workdir,
            timeout=self.config.timeout,
            check=False,
        )

        if result.exited == -1:
            raise HostError(
                f"'{command}' timed out after {self.config.timeout}s"
            )
        if result.exited != 0:
            detail = (result.stderr or result.stdout).strip()
            raise HostError(
                f"'{command}' exited with {result.exited}"
                + (f": {detail}" if detail else "")
            )
        return result.stdout

    def list_enabled(self) -> list[str]:
        output = self._run("list").strip()
        if not output:
            return []

        try:
            data = json.loads(output)
        except json.JSONDecodeError:
            units = [line.strip() for line in output.splitlines()]
            return [unit for unit in units if unit]

        # Serialized PHP arrays can come back as {"0": "a.php", ...}
        if isinstance(data, dict):
            data = list(data.values())
        if not isinstance(data, list) or not all(
            isinstance(item, str) for item in data
        ):
            raise HostError(
                f"Expected a JSON list of strings from 'list', got: "
                f"{output[:200]}"
            )
        logger.debug(f"Host reports {len(data)} enabled unit(s)")
        return data

    def set_enabled(self, candidate: Candidate, enabled: bool) -> None:
        self._run("enable" if enabled else "disable", candidate)

    def display_name(self, candidate: Candidate) -> str | None:
        if not self.config.commands.get("name"):
            return None
        name = self._run("name", candidate).strip()
        return name or None

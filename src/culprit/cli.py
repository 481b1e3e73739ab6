#!/usr/bin/env python3
"""culprit CLI - find the unit that causes a problem."""

import asyncio
import contextlib
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from culprit.command import ScanCommand, SearchCommand
from culprit.core.config import State
from culprit.core.log import logger


class CliState(State):
    """Find which enabled unit (by default, which active WordPress
    plugin) causes a problem by disabling units and asking whether the
    problem is still there.

    Run it inside the WordPress installation with WP-CLI on PATH.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.host.workdir /var/www/html)
    2. culprit.yaml in the current directory, then the user config
    3. .env file
    4. Environment variables (CULPRIT_CONFIG__HOST__TIMEOUT=300)

    Pressing Ctrl+C while units are disabled exits without re-enabling
    them; the final report lists what is still disabled.
    """

    scan: CliSubCommand[ScanCommand]
    search: CliSubCommand[SearchCommand]

    def cli_cmd(self):
        """Dispatch to the active subcommand, or show help."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            # argparse exits 0 once the help is printed
            with contextlib.suppress(SystemExit):
                CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()

"""Command execution on top of invoke."""

import contextlib
import os
import platform
from pathlib import Path

from invoke import Context, Result
from invoke.exceptions import CommandTimedOut

from culprit.core.log import logger


class Runner(Context):
    """invoke.Context with a single execute() entry point."""

    def kill(self) -> None:
        """Kill the running subprocess.

        invoke sends signal.SIGKILL, which does not exist on Windows.
        os.kill() there hands the number to TerminateProcess() as an
        exit code, so 9 works on both.
        """
        if platform.system() == "Windows":
            pid = self.pid if self.using_pty else self.process.pid
            with contextlib.suppress(ProcessLookupError):
                os.kill(pid, 9)
            return
        super().kill()

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        timeout: int | None = None,
        check: bool = True,
    ) -> Result:
        """Run a command and capture its output.

        Args:
            command: Shell command line
            cwd: Working directory
            timeout: Seconds before the command is killed
            check: Raise invoke.UnexpectedExit on non-zero exit

        Returns:
            invoke.Result; a timed out command has exited == -1
        """
        kwargs = {
            "hide": True,
            "warn": not check,
            "in_stream": False,
        }
        if timeout:
            kwargs["timeout"] = timeout

        logger.spew("Running command", command=command, cwd=str(cwd or ""))
        try:
            if cwd:
                with self.cd(str(cwd)):
                    result = self.run(command, **kwargs)
            else:
                result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            result = e.result
            result.exited = -1

        logger.spew(
            "Command finished",
            command=command,
            exited=result.exited,
        )
        return result

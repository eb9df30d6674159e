"""Run external commands and capture their output."""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path

from boostsec.test_reporter.models.test_run import ProcessResult

logger = logging.getLogger(__name__)


class ProcessRunner(ABC):
    """Abstract capability to run an external command to completion."""

    @abstractmethod
    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        """Run a command and wait for it to exit.

        Args:
            args: Command line to execute
            cwd: Working directory of the command
            env: Variables added to the inherited environment

        Returns:
            Captured output and exit status

        Raises:
            OSError: If the command cannot be started

        """


class SubprocessRunner(ProcessRunner):
    """Process runner backed by :func:`subprocess.run`."""

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        """Run a command with captured output, never raising on exit status."""
        logger.info(f"Running: {' '.join(args)}")
        if cwd:
            logger.debug(f"Directory: {cwd}")

        full_env = None
        if env:
            full_env = {**os.environ, **env}

        completed = subprocess.run(  # noqa: S603
            list(args),
            cwd=cwd,
            env=full_env,
            capture_output=True,
            check=False,
        )

        if completed.returncode != 0:
            logger.warning(f"Command finished with exit code {completed.returncode}")

        return ProcessResult(
            args=list(args),
            stdout=completed.stdout,
            stderr=completed.stderr,
            exit_status=completed.returncode,
        )

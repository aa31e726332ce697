"""Command runner used to execute cardano-cli."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    stdout: str
    stderr: str
    returncode: int


class CommandError(RuntimeError):
    """Raised when a command exits with a non-zero status."""

    def __init__(self, command: str, result: CommandResult) -> None:
        detail = result.stderr.strip() or result.stdout.strip() or "no output"
        super().__init__(f"Command failed with exit status {result.returncode}: {detail}")
        self.command = command
        self.result = result


class CommandRunner(Protocol):
    def run(self, command: str) -> CommandResult:
        ...


class SubprocessRunner:
    """Run commands through the shell; the flag grammar relies on shell quoting.

    ``cwd`` should match the root of the file store so relative paths written
    by the encoder resolve the same way for cardano-cli.
    """

    def __init__(self, timeout: float | None = 120, cwd: str | Path | None = None) -> None:
        self.timeout = timeout
        self.cwd = cwd

    def run(self, command: str) -> CommandResult:
        logger.info("Running: %s", command)
        completed = subprocess.run(
            command,
            shell=True,
            capture_output=True,
            text=True,
            timeout=self.timeout,
            cwd=self.cwd,
        )
        result = CommandResult(
            stdout=completed.stdout,
            stderr=completed.stderr,
            returncode=completed.returncode,
        )
        if result.returncode != 0:
            logger.error("Command exited with %s: %s", result.returncode, result.stderr.strip())
            raise CommandError(command, result)
        return result

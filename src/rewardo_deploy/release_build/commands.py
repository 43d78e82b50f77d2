"""Blocking subprocess execution for release stages."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger("rewardo_deploy.release_build.commands")

# Shell convention for "command not found".
NOT_LAUNCHED_RETURNCODE = 127


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: int
    launched: bool = True
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.launched and self.returncode == 0


def format_command(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in argv)


class CommandRunner:
    def run(self, argv: Sequence[str]) -> CommandResult:
        raise NotImplementedError


class SubprocessCommandRunner(CommandRunner):
    """Runs each command to completion; output streams straight to the console."""

    def __init__(self, cwd: str | None = None) -> None:
        self.cwd = cwd

    def run(self, argv: Sequence[str]) -> CommandResult:
        command = tuple(str(part) for part in argv)
        logger.info("Executing: %s", format_command(command))
        try:
            completed = subprocess.run(  # noqa: S603
                list(command),
                cwd=self.cwd,
                shell=False,
                check=False,
            )
        except OSError as exc:
            return CommandResult(
                argv=command,
                returncode=NOT_LAUNCHED_RETURNCODE,
                launched=False,
                error=str(exc),
            )
        return CommandResult(argv=command, returncode=completed.returncode)


class DryRunCommandRunner(CommandRunner):
    def __init__(self) -> None:
        self.commands: list[tuple[str, ...]] = []

    def run(self, argv: Sequence[str]) -> CommandResult:
        command = tuple(str(part) for part in argv)
        self.commands.append(command)
        logger.info("DRY RUN: would execute: %s", format_command(command))
        return CommandResult(argv=command, returncode=0)

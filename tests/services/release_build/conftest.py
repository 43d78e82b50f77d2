from __future__ import annotations

from typing import Sequence

import pytest

from rewardo_deploy.release_build.commands import NOT_LAUNCHED_RETURNCODE, CommandResult, CommandRunner


class FakeRunner(CommandRunner):
    """Records every argv; commands whose prefix is registered fail."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.failures: dict[tuple[str, ...], int] = {}
        self.missing: set[str] = set()

    def fail(self, *prefix: str, returncode: int = 1) -> "FakeRunner":
        self.failures[tuple(prefix)] = returncode
        return self

    def missing_tool(self, tool: str) -> "FakeRunner":
        self.missing.add(tool)
        return self

    def run(self, argv: Sequence[str]) -> CommandResult:
        command = tuple(argv)
        self.calls.append(command)
        if command[0] in self.missing:
            return CommandResult(
                argv=command,
                returncode=NOT_LAUNCHED_RETURNCODE,
                launched=False,
                error=f"[Errno 2] No such file or directory: '{command[0]}'",
            )
        for prefix, returncode in self.failures.items():
            if command[: len(prefix)] == prefix:
                return CommandResult(argv=command, returncode=returncode)
        return CommandResult(argv=command, returncode=0)

    def called(self, *prefix: str) -> bool:
        return any(call[: len(prefix)] == prefix for call in self.calls)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()

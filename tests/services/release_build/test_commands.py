from __future__ import annotations

import sys
from pathlib import Path

from rewardo_deploy.release_build.commands import (
    NOT_LAUNCHED_RETURNCODE,
    DryRunCommandRunner,
    SubprocessCommandRunner,
    format_command,
)


def test_subprocess_runner_reports_exit_status(tmp_path: Path) -> None:
    runner = SubprocessCommandRunner(cwd=str(tmp_path))
    ok = runner.run([sys.executable, "-c", "import sys; sys.exit(0)"])
    failed = runner.run([sys.executable, "-c", "import sys; sys.exit(4)"])
    assert ok.ok and ok.returncode == 0
    assert not failed.ok and failed.returncode == 4 and failed.launched


def test_subprocess_runner_uses_cwd(tmp_path: Path) -> None:
    runner = SubprocessCommandRunner(cwd=str(tmp_path))
    result = runner.run([sys.executable, "-c", "from pathlib import Path; Path('marker').write_text('x')"])
    assert result.ok
    assert (tmp_path / "marker").exists()


def test_subprocess_runner_missing_binary_not_launched(tmp_path: Path) -> None:
    runner = SubprocessCommandRunner()
    result = runner.run([str(tmp_path / "definitely-not-a-tool"), "--version"])
    assert result.launched is False
    assert result.returncode == NOT_LAUNCHED_RETURNCODE
    assert result.error
    assert not result.ok


def test_dry_run_records_without_executing(tmp_path: Path) -> None:
    runner = DryRunCommandRunner()
    result = runner.run([sys.executable, "-c", f"open({str(tmp_path / 'x')!r}, 'w')"])
    assert result.ok
    assert not (tmp_path / "x").exists()
    assert len(runner.commands) == 1


def test_format_command_quotes_arguments() -> None:
    assert format_command(["docker", "run", "-e", "S3_PREFIX=a b"]) == "docker run -e 'S3_PREFIX=a b'"

"""Release stages: preflight checks, image build, upload container run.

Every stage returns a ``StageResult`` instead of raising; the pipeline driver
stops at the first result that is not ``ok``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PureWindowsPath

from .commands import CommandResult, CommandRunner
from .config import ReleaseConfig

logger = logging.getLogger("rewardo_deploy.release_build.stages")

SUCCEEDED = "SUCCEEDED"
FAILED = "FAILED"
SKIPPED = "SKIPPED"

BUILD_TOOL = "docker"
UPLOAD_TOOL = "aws"
BUILD_DEFINITION_FILE = "Dockerfile"
UPLOAD_PLATFORM = "linux/amd64"
CONTAINER_CREDENTIALS_PATH = "/root/.aws"
CREDENTIALS_DIR_NAME = ".aws"


@dataclass(frozen=True)
class StageResult:
    stage: str
    outcome: str
    reason_code: str | None = None
    message: str | None = None
    returncode: int | None = None

    @property
    def ok(self) -> bool:
        return self.outcome != FAILED


def _succeeded(stage: str, message: str, command: CommandResult | None = None) -> StageResult:
    return StageResult(
        stage=stage,
        outcome=SUCCEEDED,
        message=message,
        returncode=command.returncode if command else None,
    )


def _failed(stage: str, reason_code: str, message: str, command: CommandResult) -> StageResult:
    return StageResult(
        stage=stage,
        outcome=FAILED,
        reason_code=reason_code,
        message=message,
        returncode=command.returncode,
    )


def _skipped(stage: str, message: str) -> StageResult:
    return StageResult(stage=stage, outcome=SKIPPED, message=message)


def check_build_tool(runner: CommandRunner) -> StageResult:
    stage = "build_tool_check"
    result = runner.run([BUILD_TOOL, "--version"])
    if not result.ok:
        return _failed(
            stage,
            "BUILD_TOOL_MISSING",
            "Docker is not installed or not in PATH. Install Docker and make sure the "
            "'docker' command works before retrying.",
            result,
        )
    return _succeeded(stage, "Docker is available.", result)


def check_upload_tool(runner: CommandRunner, config: ReleaseConfig) -> StageResult:
    stage = "upload_tool_check"
    if config.build_only:
        return _skipped(stage, "Build-only run; AWS CLI not required.")
    result = runner.run([UPLOAD_TOOL, "--version"])
    if not result.ok:
        return _failed(
            stage,
            "UPLOAD_TOOL_MISSING",
            "AWS CLI is not installed or not in PATH. Install the AWS CLI, or rerun "
            "with --build-only to skip the upload.",
            result,
        )
    return _succeeded(stage, "AWS CLI is available.", result)


def check_identity(runner: CommandRunner, config: ReleaseConfig) -> StageResult:
    stage = "identity_check"
    if config.build_only:
        return _skipped(stage, "Build-only run; AWS credentials not required.")
    result = runner.run([UPLOAD_TOOL, "sts", "get-caller-identity", "--profile", config.profile])
    if not result.ok:
        return _failed(
            stage,
            "CREDENTIALS_INVALID",
            f"AWS credentials for profile '{config.profile}' are missing, expired or "
            f"misconfigured. Run 'aws configure --profile {config.profile}' or set "
            "AWS_PROFILE to a different profile.",
            result,
        )
    return _succeeded(stage, f"AWS credentials verified for profile '{config.profile}'.", result)


def build_image(runner: CommandRunner, config: ReleaseConfig) -> StageResult:
    stage = "build"
    logger.info("Building Docker image %s", config.image_name)
    result = runner.run([BUILD_TOOL, "build", "-f", BUILD_DEFINITION_FILE, "-t", config.image_name, "."])
    if not result.ok:
        return _failed(
            stage,
            "BUILD_FAILED",
            f"Docker build of {config.image_name} failed (exit code {result.returncode}). "
            f"Check the build output above and {BUILD_DEFINITION_FILE}.",
            result,
        )
    return _succeeded(stage, f"Docker image built: {config.image_name}", result)


def resolve_credential_mount_path(home: str | Path | None = None, host_os: str | None = None) -> str:
    """Host location of the AWS credentials directory, formatted for ``docker -v``."""
    host_os = host_os or os.name
    base = str(home) if home is not None else str(Path.home())
    if host_os == "nt":
        return (PureWindowsPath(base) / CREDENTIALS_DIR_NAME).as_posix()
    return str(Path(base) / CREDENTIALS_DIR_NAME)


def upload_command(config: ReleaseConfig, mount_path: str) -> list[str]:
    argv = [
        BUILD_TOOL,
        "run",
        "--rm",
        "--platform",
        UPLOAD_PLATFORM,
        "-v",
        f"{mount_path}:{CONTAINER_CREDENTIALS_PATH}",
    ]
    for key, value in config.upload_env().items():
        argv.extend(["-e", f"{key}={value}"])
    argv.append(config.image_name)
    return argv


def upload_image(runner: CommandRunner, config: ReleaseConfig, mount_path: str | None = None) -> StageResult:
    stage = "upload"
    if config.build_only:
        return _skipped(stage, "Build-only run; upload not attempted.")
    mount_path = mount_path or resolve_credential_mount_path()
    if not Path(mount_path).exists():
        # Not fatal: the container may still resolve credentials another way.
        logger.warning(
            "CREDENTIALS_DIR_MISSING: AWS credentials directory not found at %s; continuing",
            mount_path,
        )
    logger.info(
        "Uploading %s to s3://%s/%s (version %s)",
        config.image_name,
        config.bucket,
        config.prefix,
        config.version,
    )
    result = runner.run(upload_command(config, mount_path))
    if not result.ok:
        return _failed(
            stage,
            "UPLOAD_FAILED",
            f"Upload container for {config.image_name} failed (exit code {result.returncode}). "
            f"Check the container output above and access to bucket '{config.bucket}'.",
            result,
        )
    return _succeeded(
        stage,
        f"Upload completed to s3://{config.bucket}/{config.prefix} (version {config.version}).",
        result,
    )

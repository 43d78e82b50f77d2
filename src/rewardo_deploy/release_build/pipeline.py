"""Linear release pipeline: preflight, build, optional upload."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from .commands import CommandRunner
from .config import ReleaseConfig, echo_config
from .stages import (
    FAILED,
    StageResult,
    build_image,
    check_build_tool,
    check_identity,
    check_upload_tool,
    resolve_credential_mount_path,
    upload_image,
)

logger = logging.getLogger("rewardo_deploy.release_build.pipeline")

EXIT_OK = 0
EXIT_FAILED = 1


@dataclass(frozen=True)
class PipelineReport:
    config: ReleaseConfig
    results: tuple[StageResult, ...] = field(default_factory=tuple)

    @property
    def failure(self) -> StageResult | None:
        for result in self.results:
            if result.outcome == FAILED:
                return result
        return None

    @property
    def exit_code(self) -> int:
        return EXIT_FAILED if self.failure else EXIT_OK

    def stage_names(self) -> list[str]:
        return [result.stage for result in self.results]


class ReleasePipeline:
    def __init__(
        self,
        runner: CommandRunner,
        credential_path_resolver: Callable[[], str] = resolve_credential_mount_path,
    ) -> None:
        self.runner = runner
        self.credential_path_resolver = credential_path_resolver

    def run(self, config: ReleaseConfig) -> PipelineReport:
        echo_config(config)
        results: list[StageResult] = []

        def _step(result: StageResult) -> bool:
            results.append(result)
            if result.outcome == FAILED:
                logger.error("%s failed [%s]: %s", result.stage, result.reason_code, result.message)
                return False
            logger.info("%s: %s", result.stage, result.message)
            return True

        proceed = (
            _step(check_build_tool(self.runner))
            and _step(check_upload_tool(self.runner, config))
            and _step(check_identity(self.runner, config))
            and _step(build_image(self.runner, config))
        )
        if proceed and config.build_only:
            logger.info("Build-only run complete. Image available locally as %s", config.image_name)
        elif proceed:
            mount_path = self.credential_path_resolver()
            _step(upload_image(self.runner, config, mount_path=mount_path))

        report = PipelineReport(config=config, results=tuple(results))
        _report_status(report)
        return report


def _report_status(report: PipelineReport) -> None:
    failure = report.failure
    if failure is not None:
        logger.error("Release FAILED at %s (%s)", failure.stage, failure.reason_code)
        return
    if report.config.build_only:
        logger.info("Release build succeeded: %s", report.config.image_name)
        return
    logger.info("Release succeeded: %s uploaded", report.config.image_name)

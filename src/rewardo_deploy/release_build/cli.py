"""CLI entrypoint for the release build (docker build, optional S3 upload)."""

from __future__ import annotations

import argparse
import logging

from rewardo_deploy.logging_utils import configure_logging, release_log_paths

from .commands import CommandRunner, DryRunCommandRunner, SubprocessCommandRunner
from .config import ReleaseConfigError, build_overrides, resolve_config
from .pipeline import ReleasePipeline

logger = logging.getLogger("rewardo_deploy.release_build.cli")

EXIT_USAGE = 2


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the rewardo-search-api image and upload its artefact")
    parser.add_argument("--build-only", action="store_true", help="Build the image and stop before any upload")
    parser.add_argument("--config", help="Optional YAML file of overrides (AWS_PROFILE, S3_BUCKET, ...)")
    parser.add_argument(
        "--env-file",
        action="append",
        default=[],
        help="Optional .env file(s); shell env vars override file values",
    )
    parser.add_argument("--dry-run", action="store_true", help="Log commands without executing them")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set logging level",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None, runner: CommandRunner | None = None) -> None:
    args = _parse_args(argv)
    configure_logging(level=getattr(logging, args.log_level), log_paths=release_log_paths())
    try:
        overrides = build_overrides(settings_path=args.config, env_files=args.env_file)
    except ReleaseConfigError as exc:
        logger.error("Invalid configuration source: %s", exc)
        raise SystemExit(EXIT_USAGE) from exc
    config = resolve_config(overrides, build_only=args.build_only)
    if runner is None:
        runner = DryRunCommandRunner() if args.dry_run else SubprocessCommandRunner()
    report = ReleasePipeline(runner).run(config)
    raise SystemExit(report.exit_code)


if __name__ == "__main__":
    main()

"""Release configuration resolution (override sources merged against defaults)."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("rewardo_deploy.release_build.config")

PROFILE_KEY = "AWS_PROFILE"
BUCKET_KEY = "S3_BUCKET"
PREFIX_KEY = "S3_PREFIX"
VERSION_KEY = "VERSION"
IMAGE_NAME_KEY = "IMAGE_NAME"

DEFAULTS: dict[str, str] = {
    PROFILE_KEY: "deploy-user",
    BUCKET_KEY: "rewardo-deploy-artefacts",
    PREFIX_KEY: "rewardo-search-api",
    VERSION_KEY: "latest",
    IMAGE_NAME_KEY: "rewardo-search-api:latest",
}


class ReleaseConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class ReleaseConfig:
    profile: str
    bucket: str
    prefix: str
    version: str
    image_name: str
    build_only: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "profile": self.profile,
            "bucket": self.bucket,
            "prefix": self.prefix,
            "version": self.version,
            "image_name": self.image_name,
            "build_only": self.build_only,
        }

    def upload_env(self) -> dict[str, str]:
        """Variables handed to the upload container's entrypoint."""
        return {
            PROFILE_KEY: self.profile,
            BUCKET_KEY: self.bucket,
            PREFIX_KEY: self.prefix,
            VERSION_KEY: self.version,
        }


def _pick(overrides: Mapping[str, str | None], key: str) -> str:
    value = overrides.get(key)
    if value is None or value == "":
        return DEFAULTS[key]
    return value


def resolve_config(overrides: Mapping[str, str | None], *, build_only: bool = False) -> ReleaseConfig:
    """Merge caller overrides with the built-in defaults.

    A key counts as overridden only when present and non-empty; the value is
    then used verbatim. ``build_only`` comes from the caller alone and is never
    read from ``overrides``.
    """
    return ReleaseConfig(
        profile=_pick(overrides, PROFILE_KEY),
        bucket=_pick(overrides, BUCKET_KEY),
        prefix=_pick(overrides, PREFIX_KEY),
        version=_pick(overrides, VERSION_KEY),
        image_name=_pick(overrides, IMAGE_NAME_KEY),
        build_only=bool(build_only),
    )


def echo_config(config: ReleaseConfig) -> None:
    """Print the resolved configuration regardless of the logging level."""
    print("Release configuration:", flush=True)
    for key, value in config.as_dict().items():
        print(f"  {key}: {value}", flush=True)
    logger.debug("Resolved release configuration: %s", config.as_dict())


def _load_env_file(path: Path) -> dict[str, str]:
    if not path.exists():
        raise ReleaseConfigError(f"ENV_FILE_MISSING:{path}")
    values: dict[str, str] = {}
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip().strip("'").strip('"')
    return values


def load_settings_file(path: Path) -> dict[str, str]:
    """Read a flat YAML mapping of override keys."""
    if not path.exists():
        raise ReleaseConfigError(f"RELEASE_CONFIG_MISSING:{path}")
    # BaseLoader keeps every scalar as written (no 1.10 -> 1.1, no on -> True).
    payload = yaml.load(path.read_text(encoding="utf-8"), Loader=yaml.BaseLoader)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ReleaseConfigError(f"RELEASE_CONFIG_INVALID:{path}")
    values: dict[str, str] = {}
    for key, value in payload.items():
        if not isinstance(value, str):
            raise ReleaseConfigError(f"RELEASE_CONFIG_INVALID:{path}:{key}")
        values[str(key)] = value
    return values


def _non_empty(values: Mapping[str, str | None]) -> dict[str, str]:
    return {key: value for key, value in values.items() if value}


def build_overrides(
    *,
    settings_path: str | None = None,
    env_files: list[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    merged: dict[str, str] = {}
    if settings_path:
        merged.update(_non_empty(load_settings_file(Path(settings_path))))
    for env_file in env_files or []:
        merged.update(_non_empty(_load_env_file(Path(env_file))))
    # Runtime shell environment wins over file defaults.
    source = os.environ if environ is None else environ
    merged.update(_non_empty(source))
    return merged

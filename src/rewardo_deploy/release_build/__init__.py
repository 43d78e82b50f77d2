"""Release build orchestration for rewardo-search-api."""

from .config import ReleaseConfig, resolve_config
from .pipeline import PipelineReport, ReleasePipeline

__all__ = ["PipelineReport", "ReleaseConfig", "ReleasePipeline", "resolve_config"]

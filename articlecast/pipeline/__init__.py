"""Articlecast pipeline package.

This package contains orchestration, host resolution, and stage telemetry
helpers for podcast generation.
"""

from .hosts import podcast_title, resolve_hosts
from .orchestrator import PipelineSettings, PodcastPipeline

__all__ = ["PipelineSettings", "PodcastPipeline", "podcast_title", "resolve_hosts"]

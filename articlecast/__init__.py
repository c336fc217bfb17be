"""Top-level package for Articlecast.

This package turns article text of arbitrary length into a one- or two-host
podcast script with optional synthesized narration. The main orchestration
entry point is `PodcastPipeline`.
"""

from .pipeline import PodcastPipeline

__all__ = ["PodcastPipeline", "__version__"]

__version__ = "0.3.2"

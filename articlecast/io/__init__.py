"""Input and artifact storage components."""

from .source_reader import SourceReadError, SourceReader
from .storage import ArtifactStore, unique_artifact_name

__all__ = ["ArtifactStore", "SourceReadError", "SourceReader", "unique_artifact_name"]

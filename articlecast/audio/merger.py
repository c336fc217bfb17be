"""Audio assembly stage.

Responsibilities:
- Concatenate per-segment MP3 clips in segment order into one artifact.
- Persist the artifact under a collision-resistant name.
- Remove intermediate clip files, logging cleanup failures.

Notes:
- Clips are joined as raw bytes. Independently encoded MP3 streams decode
  back-to-back in common players but the result is not a frame-accurate
  single stream; no re-encoding or gap insertion is attempted.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

from ..errors import PipelineStageError
from ..io.storage import ArtifactStore, unique_artifact_name
from ..models.datatypes import AssemblyResult, AudioClip
from ..telemetry.logger import RunLogger


class AudioAssembler:
    """Merge ordered segment clips into one stored audio artifact."""

    def __init__(
        self,
        store: ArtifactStore,
        run_logger: RunLogger | None = None,
        name_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize storage, logging, and artifact naming."""

        self.store = store
        self._run_logger = run_logger
        self._name_factory = name_factory or unique_artifact_name

    def assemble(self, clips: Sequence[AudioClip]) -> AssemblyResult:
        """Assemble clips and return the stored artifact reference.

        A single clip is moved into the store as-is. When reading clips for
        concatenation fails, the first clip alone is stored and the result is
        flagged as degraded. Store write failures propagate.
        """

        if not clips:
            raise PipelineStageError(
                stage="assemble",
                detail="No synthesized audio clips are available to assemble.",
            )

        ordered = sorted(clips, key=lambda clip: clip.segment_index)
        name = self._name_factory()
        try:
            if len(ordered) == 1:
                public_ref = self.store.adopt(ordered[0].path, name)
                return AssemblyResult(
                    public_ref=public_ref,
                    name=name,
                    segment_count=1,
                    byte_count=ordered[0].byte_count,
                )

            degraded = False
            try:
                payload = self.combine(ordered)
                segment_count = len(ordered)
            except OSError as exc:
                if self._run_logger is not None:
                    self._run_logger.log_degraded("assemble", f"combine_failed_{type(exc).__name__}")
                payload = ordered[0].path.read_bytes()
                segment_count = 1
                degraded = True

            public_ref = self.store.write(payload, name)
            return AssemblyResult(
                public_ref=public_ref,
                name=name,
                segment_count=segment_count,
                byte_count=len(payload),
                degraded=degraded,
            )
        finally:
            self._cleanup(ordered)

    def combine(self, clips: Sequence[AudioClip]) -> bytes:
        """Return the byte concatenation of clip files in the given order."""

        return b"".join(clip.path.read_bytes() for clip in clips)

    def _cleanup(self, clips: Sequence[AudioClip]) -> None:
        """Delete intermediate clip files and their emptied scratch directories."""

        directories: set[Path] = set()
        for clip in clips:
            directories.add(clip.path.parent)
            try:
                clip.path.unlink(missing_ok=True)
            except OSError as exc:
                self._log_cleanup_failure(clip.path.name, exc)

        for directory in sorted(directories):
            if not directory.exists() or any(directory.iterdir()):
                continue
            try:
                directory.rmdir()
            except OSError as exc:
                self._log_cleanup_failure(directory.name, exc)

    def _log_cleanup_failure(self, artifact: str, exc: OSError) -> None:
        if self._run_logger is not None:
            self._run_logger.log_cleanup_failure(artifact, type(exc).__name__)

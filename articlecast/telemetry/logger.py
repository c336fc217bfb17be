"""Structured run logging utilities.

Responsibilities:
- Emit concise, deterministic phase-level runtime logs through `loguru`.
- Surface degraded-but-successful pipeline outcomes as warning events.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class RunLogger:
    """Emit deterministic phase logs for CLI-observable pipeline activity."""

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Initialize logger sink and configure deterministic formatting."""

        self._sink = sink or sys.stderr
        logger.remove()
        logger.add(self._sink, format="{message}", level=level, colorize=False)

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        line = f"[phase] level={level} stage={stage} event={event}{_format_context(context)}"
        logger.log(level, line)

    def log_stage_start(self, stage: str) -> None:
        """Emit a stage-start runtime event."""

        self._emit("INFO", "start", stage)

    def log_stage_complete(self, stage: str, **context: object) -> None:
        """Emit a stage-complete runtime event."""

        self._emit("INFO", "complete", stage, **context)

    def log_stage_skipped(self, stage: str, reason: str) -> None:
        """Emit a stage-skipped event for stages not needed by a request."""

        self._emit("INFO", "skipped", stage, reason=reason)

    def log_stage_failure(self, stage: str, error_type: str) -> None:
        """Emit a stage-failure runtime event without sensitive payload details."""

        self._emit("ERROR", "failure", stage, error_type=error_type)

    def log_chunk_fallback(self, chunk_index: int, error_type: str) -> None:
        """Record that a chunk summary fell back to verbatim leading sentences."""

        self._emit("WARNING", "chunk_fallback", "summarize", chunk=chunk_index, error_type=error_type)

    def log_segment_skipped(self, segment_index: int, error_type: str) -> None:
        """Record that a segment was dropped after a synthesis failure."""

        self._emit(
            "WARNING",
            "segment_skipped",
            "synthesize",
            segment=segment_index,
            error_type=error_type,
        )

    def log_degraded(self, stage: str, reason: str) -> None:
        """Record that a stage produced degraded output instead of failing."""

        self._emit("WARNING", "degraded", stage, reason=reason)

    def log_cleanup_failure(self, artifact: str, error_type: str) -> None:
        """Record a non-fatal failure to delete an intermediate artifact."""

        self._emit("WARNING", "cleanup_failure", "assemble", artifact=artifact, error_type=error_type)

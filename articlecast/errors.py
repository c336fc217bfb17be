"""Domain exceptions for pipeline and CLI diagnostics."""

from __future__ import annotations


class PipelineStageError(RuntimeError):
    """Raised when a specific pipeline stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class PodcastValidationError(PipelineStageError):
    """Raised when a podcast request violates a constraint before any backend call."""

    def __init__(self, *, field: str, detail: str, hint: str | None = None) -> None:
        """Initialize a validation error naming the offending request field."""

        super().__init__(stage="validate", detail=detail, hint=hint)
        self.field = field

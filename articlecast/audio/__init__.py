"""Audio assembly components."""

from .merger import AudioAssembler

__all__ = ["AudioAssembler"]

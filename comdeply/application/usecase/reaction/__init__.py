"""Reaction use cases."""

from .react import ReactRequest, ReactResponse, ReactUseCase

__all__ = ["ReactRequest", "ReactResponse", "ReactUseCase"]

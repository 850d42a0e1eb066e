"""Structured errors raised while turning rows into chart images."""

from __future__ import annotations

from typing import Any


class PiecharterError(Exception):
    """Base class for all piecharter errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class SourceError(PiecharterError):
    """Raised when the input table cannot be opened or parsed."""


class RenderError(PiecharterError):
    """Raised when the raster backend fails while drawing a chart."""


class SinkError(PiecharterError):
    """Raised when a rendered image cannot be written to disk."""


class SettingsError(PiecharterError):
    """Raised for an unreadable or invalid settings file."""

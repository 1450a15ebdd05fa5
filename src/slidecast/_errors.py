"""Slidecast error hierarchy.

All slidecast-specific errors inherit from SlidecastError for easy catching.
"""


class SlidecastError(Exception):
    """Base error for all slidecast operations."""


class ConfigError(SlidecastError):
    """Invalid or missing configuration."""


class LoadError(SlidecastError):
    """A presentation or stylesheet could not be loaded."""


class ExportError(SlidecastError):
    """Error while writing a standalone deck."""


class ShutdownError(SlidecastError):
    """The server did not stop within its shutdown timeout."""

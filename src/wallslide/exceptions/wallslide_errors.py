"""
Domain-specific errors for the wallpaper display.

None of these are fatal to the host: the display is a best-effort visual
layer, so callers log them and carry on with whatever is already on screen.
"""

class WallslideError(Exception):
    """Base class for all wallpaper display errors.

    This exception should not be raised directly. Instead, subclass it to create
    more specific error types.
    """

class ImageLoadError(WallslideError):
    """Raised when an image cannot be downloaded or decoded."""


class SourceNotSupported(WallslideError):
    """Raised when a provider is asked for a source it does not serve."""


class SourceUnavailable(WallslideError):
    """Raised when a supported source exists in name only (e.g. a missing directory)."""

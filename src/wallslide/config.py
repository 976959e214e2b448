"""
Configuration for the wallpaper display.

This module centralizes default values and fixed constants, and defines the
immutable `WallpaperConfig` record that the rest of the application reads.
Configuration updates never mutate a record in place; `WallpaperConfig.merge`
returns a new one.
"""

from __future__ import annotations

import dataclasses
import logging
import sys
from dataclasses import dataclass
from typing import Any, Mapping

logger = logging.getLogger(__name__)

# A tuple of supported image file extensions (case-insensitive).
# Used by the local directory provider when scanning for images.
SUPPORTED_IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.bmp', '.tiff', '.webp')

# Default image source.
DEFAULT_SOURCE = "bing"

# Default period in seconds between two fetches of a fresh batch (one hour).
DEFAULT_UPDATE_INTERVAL = 60 * 60.0

# Default period in seconds an image stays on screen (five minutes).
DEFAULT_SLIDE_INTERVAL = 5 * 60.0

# Default upper bound on the number of entries kept from a batch.
DEFAULT_MAXIMUM_ENTRIES = 10

# Default visual effect applied to every image.
DEFAULT_FILTER = "grayscale(0.5) brightness(0.5)"

# Default fit mode, borrowed from CSS object-fit.
DEFAULT_SIZE = "cover"

# Orientation names. "auto" follows the viewport.
ORIENTATION_AUTO = "auto"
ORIENTATION_VERTICAL = "vertical"
ORIENTATION_HORIZONTAL = "horizontal"

# User presence policies.
PRESENCE_NONE = "none"
PRESENCE_SHOW = "show"
PRESENCE_HIDE = "hide"

# Duration in seconds of a crossfade between two images.
CROSSFADE_DURATION = 1.0

# Number of blended frames drawn during a crossfade.
CROSSFADE_STEPS = 10

# How often, in seconds, the event loop checks for a finished image download.
LOAD_POLL_INTERVAL = 0.05

# Timeout in seconds for a single image download.
IMAGE_REQUEST_TIMEOUT = 30

# Height of the top and bottom edge gradients, as a fraction of the frame height.
EDGE_FADE_FRACTION = 0.15

# Delay in seconds after the last resize event before the image is re-rendered.
RESIZE_DEBOUNCE = 0.25

# Default logging level for the application.
# Can be 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'.
DEFAULT_LOG_LEVEL = 'INFO'

# Option names used by hosts that speak the camelCase notification payloads.
OPTION_ALIASES = {
    "updateInterval": "update_interval",
    "slideInterval": "slide_interval",
    "maximumEntries": "maximum_entries",
    "maxWidth": "max_width",
    "maxHeight": "max_height",
    "userPresenceAction": "user_presence_action",
    "fadeEdges": "fade_edges",
}


@dataclass(frozen=True)
class WallpaperConfig:
    """
    Immutable snapshot of the display configuration.

    Attributes:
        source: One source name, or a tuple of them.
        update_interval: Seconds between two batch fetches.
        slide_interval: Seconds an image stays on screen. Zero or less
            disables automatic advance.
        maximum_entries: Upper bound on the entries kept from a batch.
        orientation: "auto", "vertical" or "horizontal".
        max_width: Widest image variant that may be selected.
        max_height: Tallest image variant that may be selected.
        crossfade: Whether images fade into each other.
        caption: Whether captions are shown.
        size: Fit mode ("cover", "contain" or "fill").
        filter: Visual effect descriptor, e.g. "grayscale(0.5) brightness(0.5)".
        user_presence_action: "none", "show" or "hide".
        shuffle: Whether providers return their images in random order, so
            truncation picks a random subset.
        fade_edges: Whether the top and bottom edges fade to black.
    """

    source: str | tuple[str, ...] = DEFAULT_SOURCE
    update_interval: float = DEFAULT_UPDATE_INTERVAL
    slide_interval: float = DEFAULT_SLIDE_INTERVAL
    maximum_entries: int = DEFAULT_MAXIMUM_ENTRIES
    orientation: str = ORIENTATION_AUTO
    max_width: int = sys.maxsize
    max_height: int = sys.maxsize
    crossfade: bool = True
    caption: bool = True
    size: str = DEFAULT_SIZE
    filter: str = DEFAULT_FILTER
    user_presence_action: str = PRESENCE_NONE
    shuffle: bool = True
    fade_edges: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.source, list):
            object.__setattr__(self, "source", tuple(self.source))

    @property
    def sources(self) -> tuple[str, ...]:
        """All configured sources, whether one or several were given."""
        if isinstance(self.source, tuple):
            return self.source
        return (self.source,)

    def matches_source(self, source: str) -> bool:
        """
        Check whether a batch from `source` belongs to this configuration.

        A list of sources matches by membership, a single source by equality.
        """
        if isinstance(self.source, tuple):
            return source in self.source
        return source == self.source

    def merge(self, update: str | list[str] | tuple[str, ...] | Mapping[str, Any]) -> WallpaperConfig:
        """
        Return a new configuration with `update` applied on top of this one.

        A bare string or list replaces the source alone. A mapping overrides
        fields one by one; camelCase option names are accepted as aliases.
        Unknown keys are logged and ignored. Values are taken as given.

        Args:
            update: Replacement source(s) or a partial/full option mapping.

        Returns:
            WallpaperConfig: The merged configuration.
        """
        if isinstance(update, (str, list, tuple)):
            return dataclasses.replace(self, source=_normalize_source(update))

        known = {field.name for field in dataclasses.fields(self)}
        changes: dict[str, Any] = {}
        for key, value in update.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                logger.warning(f"Ignoring unknown configuration option '{key}'.")
                continue
            if name == "source":
                value = _normalize_source(value)
            changes[name] = value
        return dataclasses.replace(self, **changes)


def _normalize_source(source: str | list[str] | tuple[str, ...]) -> str | tuple[str, ...]:
    if isinstance(source, (list, tuple)):
        return tuple(source)
    return source

"""
Viewport geometry and orientation queries.

These are pure reads of the current display size: nothing is cached, so a
resized window is reflected on the next call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .config import ORIENTATION_AUTO, ORIENTATION_HORIZONTAL, ORIENTATION_VERTICAL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int

    @property
    def orientation(self) -> str:
        """Vertical when taller than wide, horizontal otherwise."""
        return ORIENTATION_VERTICAL if self.width < self.height else ORIENTATION_HORIZONTAL


def query_viewport(widget: Any) -> Viewport:
    """
    Read the viewport size from a Tk widget.

    Before the widget is mapped Tk reports a 1x1 size; in that case the
    screen size is used instead.

    Args:
        widget: Any Tk widget (window or canvas).

    Returns:
        Viewport: The current width and height in pixels.
    """
    width = widget.winfo_width()
    height = widget.winfo_height()
    if width <= 1 or height <= 1:
        logger.debug(f"Widget not mapped yet ({width}x{height}), using screen size.")
        width = widget.winfo_screenwidth()
        height = widget.winfo_screenheight()
    return Viewport(width, height)


def resolve_orientation(configured: str, viewport: Viewport) -> str:
    """Return the configured orientation, or the viewport's when set to "auto"."""
    if configured == ORIENTATION_AUTO:
        return viewport.orientation
    return configured

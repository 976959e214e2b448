"""
User Input and Event Handling Module.

This module binds keyboard shortcuts to their corresponding actions. Actions
that change what is displayed go through the event router, exactly like
host notifications do.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .router import ConfigUpdate, ForceAdvance

if TYPE_CHECKING:
    from .app import WallpaperApp

logger = logging.getLogger(__name__)

def bind_controls(app: 'WallpaperApp'):
    """
    Binds all keyboard shortcuts to their handler functions.

    Args:
        app (WallpaperApp): The main application instance.
    """
    # Navigation
    app.window.bind('<Right>', lambda e: force_advance(app))
    app.window.bind('<space>', lambda e: force_advance(app))

    # Application Control
    app.window.bind('q', lambda e: app.quit())
    app.window.bind('Q', lambda e: app.quit())
    app.window.bind('<Escape>', lambda e: app.quit())

    # Display
    app.window.bind('f', lambda e: app.toggle_fullscreen())
    app.window.bind('F', lambda e: app.toggle_fullscreen())
    app.window.bind('c', lambda e: toggle_caption(app))

    # Window Resize Event
    app.window.bind('<Configure>', app.on_resize)

def force_advance(app: 'WallpaperApp'):
    app.router.dispatch(ForceAdvance())

def toggle_caption(app: 'WallpaperApp'):
    enabled = not app.get_config().caption
    logger.info(f"Captions {'enabled' if enabled else 'disabled'}.")
    app.router.dispatch(ConfigUpdate({"caption": enabled}))
    current = app.scheduler.current
    if not enabled:
        app.surface.set_caption(None)
    elif current is not None and current.entry.caption:
        app.surface.set_caption(current.entry.caption)

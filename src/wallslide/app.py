"""
Main application class for the wallpaper display.

This module defines `WallpaperApp`, which builds every component at
construction time, wires them to the Tk event loop, and tears them down
again on quit.
"""

from __future__ import annotations

import logging
import random
import tkinter as tk
from typing import Iterable, Optional

from . import controls
from .catalog import ImageCatalog
from .config import RESIZE_DEBOUNCE, WallpaperConfig
from .controller import ConfigController
from .display import TkSurface
from .image_loader import ImageLoader
from .models import Batch, FetchRequest
from .providers import BatchProvider, SourceRouter
from .router import BatchAvailable, EventRouter, SurfaceCreated
from .scheduler import SlideScheduler
from .timers import Timer, TkTimerService
from .viewport import Viewport, query_viewport

logger = logging.getLogger(__name__)


class WallpaperApp:
    """
    The wallpaper display application.

    Args:
        window: The Tk root window.
        config: The initial configuration.
        providers: Batch providers to use; defaults to local directories and direct URLs.
        rng: Source of randomness for image selection.
    """

    def __init__(
        self,
        window: tk.Tk,
        config: WallpaperConfig,
        providers: Optional[Iterable[BatchProvider]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.window = window
        self.timers = TkTimerService(window)
        self.is_fullscreen = False

        self.canvas = tk.Canvas(self.window, bg='black', highlightthickness=0)
        self.canvas.pack(fill=tk.BOTH, expand=True)

        self.surface = TkSurface(self.canvas, self.get_config, self.timers)
        self.loader = ImageLoader(self.timers)
        self.controller = ConfigController(config, self.timers, self.get_viewport, self.request_batches)
        self.catalog = ImageCatalog(self.get_config, self.get_viewport)
        self.scheduler = SlideScheduler(
            self.catalog, self.surface, self.loader, self.timers,
            self.get_config, self.get_viewport, rng=rng,
        )
        self.router = EventRouter(self.catalog, self.scheduler, self.controller, self.surface)
        self.provider = SourceRouter(self.deliver, providers, rng=rng)
        self._resize_job = Timer(self.timers, "resize")

        self.window.title("Wallpaper")
        controls.bind_controls(self)
        self.router.dispatch(SurfaceCreated())

    def get_config(self) -> WallpaperConfig:
        return self.controller.config

    def get_viewport(self) -> Viewport:
        return query_viewport(self.canvas)

    def request_batches(self, request: FetchRequest) -> None:
        self.provider.request(request)

    def deliver(self, batch: Batch) -> None:
        """Hand a batch to the router on the next turn of the event loop."""
        self.timers.call_later(0, lambda: self.router.dispatch(BatchAvailable(batch)))

    def on_resize(self, event: tk.Event) -> None:
        """
        Handle the window resize event.

        To avoid excessive updates during resizing, the image is re-rendered
        (and the orientation re-checked) only once resizing has settled.
        """
        if event.widget == self.window and event.width > 50 and event.height > 50:
            self._resize_job.arm(RESIZE_DEBOUNCE, self._after_resize)

    def _after_resize(self) -> None:
        self.surface.redraw()
        self.controller.check_orientation()

    def toggle_fullscreen(self) -> None:
        self.is_fullscreen = not self.is_fullscreen
        self.window.attributes('-fullscreen', self.is_fullscreen)
        logger.info(f"Fullscreen mode {'enabled' if self.is_fullscreen else 'disabled'}.")

    def quit(self) -> None:
        """Release both timers, detach any live load and close the window."""
        logger.info("Quit command received. Closing.")
        self._resize_job.cancel()
        self.controller.close()
        self.scheduler.close()
        self.loader.shutdown()
        self.window.destroy()

    def run(self) -> None:
        """Request the first batch and start the Tkinter main loop."""
        self.controller.start()
        self.window.mainloop()

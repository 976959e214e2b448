"""
Slide Scheduling Module.

This module decides which image is shown, loads the next one off-screen,
reveals it (with or without a crossfade) and re-arms the slide timer once the
new image has settled.

States:
    EMPTY: no catalog, or an empty one. Whatever was last shown stays up.
    SHOWING: one image fully visible, the slide timer armed.
    TRANSITIONING: a pending image is loading or fading in.

Only one pending image exists at a time. Starting a new one detaches the
previous download before anything else, so a stale response can never
become the current image.
"""

from __future__ import annotations

import enum
import logging
import random
from typing import Callable, Optional, Protocol

from PIL import Image

from .catalog import ImageCatalog
from .config import CROSSFADE_DURATION, WallpaperConfig
from .models import DisplayState, ImageNode
from .timers import Timer, TimerService
from .variants import resolve_variant_url
from .viewport import Viewport

logger = logging.getLogger(__name__)


class RenderSurface(Protocol):
    def mount(self, node: ImageNode) -> None: ...
    def set_caption(self, text: Optional[str]) -> None: ...
    def set_image(self, node: ImageNode, opacity: float, fade: float = 0.0) -> None: ...
    def remove_node(self, node: ImageNode) -> None: ...


class ImageSource(Protocol):
    def load(self, url: str, on_loaded: Callable[[Image.Image], None]): ...


class SlideState(enum.Enum):
    EMPTY = "empty"
    SHOWING = "showing"
    TRANSITIONING = "transitioning"


class SlideScheduler:
    """
    The display state machine.

    Args:
        catalog: The catalog to pick images from. The scheduler subscribes to
            its replacements.
        surface: Where images and captions are drawn.
        loader: Starts image downloads and returns detachable handles.
        timers: The event loop's timer service.
        get_config: Returns the current configuration.
        get_viewport: Returns the current viewport size.
        rng: Source of randomness for index selection.
    """

    def __init__(
        self,
        catalog: ImageCatalog,
        surface: RenderSurface,
        loader: ImageSource,
        timers: TimerService,
        get_config: Callable[[], WallpaperConfig],
        get_viewport: Callable[[], Viewport],
        rng: random.Random | None = None,
    ):
        self.catalog = catalog
        self.surface = surface
        self.loader = loader
        self.get_config = get_config
        self.get_viewport = get_viewport
        self.rng = rng or random.Random()

        self.current: Optional[ImageNode] = None
        self.pending: Optional[ImageNode] = None
        self.current_index: int = 0

        self.slide_timer = Timer(timers, "slide")
        self.transition_timer = Timer(timers, "transition")

        catalog.add_listener(self.on_catalog_replaced)

    @property
    def state(self) -> SlideState:
        if self.pending is not None:
            return SlideState.TRANSITIONING
        if len(self.catalog) == 0:
            return SlideState.EMPTY
        return SlideState.SHOWING

    @property
    def display_state(self) -> DisplayState:
        return DisplayState(
            current_entry=self.current.entry if self.current else None,
            pending_entry=self.pending.entry if self.pending else None,
            current_index=self.current_index,
            catalog=self.catalog.batch,
        )

    def on_catalog_replaced(self, catalog: ImageCatalog) -> None:
        """
        React to a new batch.

        An empty batch parks the scheduler: timers are cancelled, any pending
        load is dropped, and the last image stays on screen. A non-empty batch
        starts the first display if nothing is shown yet, or resumes the slide
        timer if the scheduler was parked.
        """
        if len(catalog) == 0:
            logger.info("Catalog is empty, keeping the last image on screen.")
            self.current_index = 0
            self.slide_timer.cancel()
            self._discard_pending()
            return

        self.current_index = self.rng.randrange(len(catalog))

        if self.current is None and self.pending is None:
            self.advance()
        elif not self.slide_timer.armed and self.pending is None:
            self._arm_slide_timer()

    def advance(self) -> None:
        """
        Start loading a new randomly chosen image.

        Used both by the slide timer and by forced advances. Any pending image
        is discarded first. Selection is with replacement, so the same entry
        may come up twice in a row.
        """
        if len(self.catalog) == 0:
            logger.debug("Nothing to advance to, the catalog is empty.")
            return

        self._discard_pending()
        # Re-arm now as well, so a load that never completes gets retried with another image.
        self._arm_slide_timer()

        config = self.get_config()
        self.current_index = self.rng.randrange(len(self.catalog))
        entry = self.catalog.entries[self.current_index]
        url = resolve_variant_url(entry, config.max_width, config.max_height, self.get_viewport())

        node = ImageNode(entry=entry, url=url)
        self.surface.mount(node)
        self.pending = node
        node.load = self.loader.load(url, lambda image: self._on_loaded(node, image))
        logger.debug(f"Loading image {self.current_index + 1}/{len(self.catalog)}: '{url}'")

    def _on_loaded(self, node: ImageNode, image: Image.Image) -> None:
        config = self.get_config()
        node.image = image
        node.load = None
        # Only a forced advance may interrupt the transition; _settle re-arms the slide timer.
        self.slide_timer.cancel()
        logger.info(f"Loaded image {node.entry.caption or node.url}")

        duration = CROSSFADE_DURATION if config.crossfade and self.current is not None else 0.0
        if self.current is not None and duration:
            self.surface.set_image(self.current, 0.0, fade=duration)
        self.surface.set_image(node, 1.0, fade=duration)
        self.surface.set_caption(None)
        self.transition_timer.arm(duration, lambda: self._settle(node))

    def _settle(self, node: ImageNode) -> None:
        config = self.get_config()
        if config.caption and node.entry.caption:
            self.surface.set_caption(node.entry.caption)

        if self.current is not None:
            self.surface.remove_node(self.current)
        self.current = node
        self.pending = None
        self._arm_slide_timer()

    def _discard_pending(self) -> None:
        node = self.pending
        if node is None:
            return

        if node.load is not None:
            node.load.detach()
            node.load = None
        if self.transition_timer.armed:
            # Interrupted mid-fade: bring the outgoing image back.
            self.transition_timer.cancel()
            if self.current is not None:
                self.surface.set_image(self.current, 1.0)
        self.surface.remove_node(node)
        self.pending = None

    def _arm_slide_timer(self) -> None:
        interval = self.get_config().slide_interval
        if interval > 0:
            self.slide_timer.arm(interval, self.advance)

    def close(self) -> None:
        """Cancel both timers and detach any in-flight load."""
        self.slide_timer.cancel()
        self.transition_timer.cancel()
        if self.pending is not None and self.pending.load is not None:
            self.pending.load.detach()
            self.pending.load = None

"""
Configuration ownership and batch refresh cadence.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from .config import WallpaperConfig
from .models import FetchRequest
from .timers import Timer, TimerService
from .viewport import Viewport, resolve_orientation

logger = logging.getLogger(__name__)


class ConfigController:
    """
    Owns the current configuration and the refresh timer.

    A fetch request is sent at start, every `update_interval` seconds, and
    immediately after any configuration update. Updates never touch the
    slide timer: a new `slide_interval` takes effect the next time it is
    armed.
    """

    def __init__(
        self,
        config: WallpaperConfig,
        timers: TimerService,
        get_viewport: Callable[[], Viewport],
        send_fetch: Callable[[FetchRequest], None],
    ):
        self.config = config
        self.get_viewport = get_viewport
        self.send_fetch = send_fetch
        self.refresh_timer = Timer(timers, "refresh")
        self.last_orientation: Optional[str] = None

    def start(self) -> None:
        self._refresh()

    def update(self, update: str | list[str] | Mapping[str, Any]) -> None:
        """Merge `update` into the configuration, then fetch and restart the refresh cadence."""
        self.config = self.config.merge(update)
        logger.info(f"Configuration updated: {update!r}")
        self._refresh()

    def fetch(self) -> FetchRequest:
        """Send a fetch request for the current configuration and viewport orientation."""
        orientation = resolve_orientation(self.config.orientation, self.get_viewport())
        request = FetchRequest(config=self.config, orientation=orientation)
        self.last_orientation = orientation
        logger.info(f"Requesting images for {', '.join(self.config.sources)} ({orientation}).")
        self.send_fetch(request)
        return request

    def check_orientation(self) -> None:
        """Fetch again if the viewport has flipped orientation since the last request."""
        orientation = resolve_orientation(self.config.orientation, self.get_viewport())
        if self.last_orientation is not None and orientation != self.last_orientation:
            logger.info(f"Orientation changed to {orientation}.")
            self.fetch()

    def _refresh(self) -> None:
        self.refresh_timer.cancel()
        self.fetch()
        self.refresh_timer.arm(self.config.update_interval, self._refresh)

    def close(self) -> None:
        self.refresh_timer.cancel()

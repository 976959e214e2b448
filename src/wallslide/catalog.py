"""
The bounded batch of images currently available for display.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .config import WallpaperConfig
from .models import Batch, ImageEntry
from .viewport import Viewport, resolve_orientation

logger = logging.getLogger(__name__)

CatalogListener = Callable[["ImageCatalog"], None]


class ImageCatalog:
    """
    Holds the active batch for the configured source(s) and orientation.

    Batches are replaced wholesale, never merged. Batches that do not match
    the configuration at the time they arrive are stale responses and are
    dropped.
    """

    def __init__(self, get_config: Callable[[], WallpaperConfig], get_viewport: Callable[[], Viewport]):
        self.get_config = get_config
        self.get_viewport = get_viewport
        self.batch: Optional[Batch] = None
        self._listeners: list[CatalogListener] = []

    @property
    def entries(self) -> tuple[ImageEntry, ...]:
        return self.batch.entries if self.batch is not None else ()

    def __len__(self) -> int:
        return len(self.entries)

    def add_listener(self, listener: CatalogListener) -> None:
        """Register a callback run after every accepted replacement."""
        self._listeners.append(listener)

    def matches(self, batch: Batch) -> bool:
        config = self.get_config()
        orientation = resolve_orientation(config.orientation, self.get_viewport())
        return batch.orientation == orientation and config.matches_source(batch.source)

    def replace(self, batch: Batch) -> bool:
        """
        Make `batch` the active one if it matches the current configuration.

        The batch is truncated to `maximum_entries` before it is stored.

        Args:
            batch: The batch delivered by a provider.

        Returns:
            bool: True if the batch was accepted, False if it was dropped as stale.
        """
        if not self.matches(batch):
            logger.debug(f"Dropping stale batch for source '{batch.source}' ({batch.orientation}).")
            return False

        self.batch = batch.truncated(self.get_config().maximum_entries)
        logger.info(f"Accepted {len(self.batch.entries)} images from '{batch.source}' ({batch.orientation}).")
        for listener in self._listeners:
            listener(self)
        return True

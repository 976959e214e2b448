"""
Image Downloading and Asynchronous Loading Module.

This module fetches images from URLs or local paths and exposes each download
as a cancellable `PendingLoad`. Downloads run on a worker pool; completion is
polled from the event loop so that callbacks always run on the loop thread.
"""

from __future__ import annotations

import concurrent.futures
import io
import logging
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests
from PIL import Image

from .config import IMAGE_REQUEST_TIMEOUT, LOAD_POLL_INTERVAL
from .exceptions.wallslide_errors import ImageLoadError
from .timers import Timer, TimerService

logger = logging.getLogger(__name__)

LoadCallback = Callable[[Image.Image], None]


def to_rgb(image: Image.Image) -> Image.Image:
    """
    Convert an image to RGB, flattening transparency onto a white background.

    Args:
        image: The decoded image in any mode.

    Returns:
        Image.Image: An RGB image.
    """
    if image.mode == 'RGB':
        return image

    logger.debug(f"Converting image from mode '{image.mode}' to 'RGB'.")
    if image.mode in ('RGBA', 'LA', 'P') and (image.mode != 'P' or 'transparency' in image.info):
        if image.mode == 'P':
            image = image.convert('RGBA')
        background = Image.new('RGB', image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[-1])
        return background
    return image.convert('RGB')


def fetch_image(url: str, timeout: float = IMAGE_REQUEST_TIMEOUT) -> Image.Image:
    """
    Download (or open) and decode an image.

    `http://` and `https://` URLs are downloaded with requests; `file://` URIs
    and plain paths are opened from disk.

    Args:
        url: Where the image lives.
        timeout: Download timeout in seconds.

    Returns:
        Image.Image: The decoded image, converted to RGB.

    Raises:
        ImageLoadError: If the image cannot be downloaded or decoded.
    """
    parsed = urlparse(url)
    try:
        if parsed.scheme in ('http', 'https'):
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
            image = Image.open(io.BytesIO(response.content))
        elif parsed.scheme == 'file':
            image = Image.open(Path(url2pathname(parsed.path)))
        else:
            image = Image.open(Path(url))
        image.load()
        return to_rgb(image)
    # RequestException derives from OSError, so it must be caught first.
    except requests.exceptions.RequestException as e:
        raise ImageLoadError(f"Could not download '{url}': {e}") from e
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageLoadError(f"Could not decode '{url}': {e}") from e


class PendingLoad:
    """
    One in-flight image download.

    The completion callback fires at most once, on the event loop. `detach()`
    removes the callback before discarding the download, so a late response
    can never reach it.
    """

    def __init__(self, url: str, future: concurrent.futures.Future, on_loaded: LoadCallback, timers: TimerService):
        self.url = url
        self.future = future
        self._on_loaded: Optional[LoadCallback] = on_loaded
        self._poll = Timer(timers, f"load poll ({url})")

    @property
    def detached(self) -> bool:
        return self._on_loaded is None

    def detach(self) -> None:
        if self._on_loaded is not None:
            logger.debug(f"Detaching load of '{self.url}'.")
        self._on_loaded = None
        self._poll.cancel()
        self.future.cancel()

    def start_polling(self) -> None:
        self._poll.arm(LOAD_POLL_INTERVAL, self._check)

    def _check(self) -> None:
        if self._on_loaded is None:
            return
        if not self.future.done():
            self.start_polling()
            return

        callback, self._on_loaded = self._on_loaded, None
        try:
            image = self.future.result()
        except ImageLoadError as e:
            # No retry: the display stays on the previous image.
            logger.warning(f"Image load failed: {e}")
            return
        callback(image)


class ImageLoader:
    """Starts image downloads on a worker pool and reports them back on the event loop."""

    def __init__(
        self,
        timers: TimerService,
        max_workers: int = 2,
        fetch: Callable[[str], Image.Image] = fetch_image,
    ):
        self.timers = timers
        self.fetch = fetch
        self.executor = concurrent.futures.ThreadPoolExecutor(max_workers=max_workers)

    def load(self, url: str, on_loaded: LoadCallback) -> PendingLoad:
        """
        Start downloading `url`.

        Args:
            url: The image URL or path.
            on_loaded: Called with the decoded image once it is ready, unless
                the load is detached first or fails.

        Returns:
            PendingLoad: The handle used to detach the load.
        """
        logger.debug(f"Loading image '{url}'.")
        future = self.executor.submit(self.fetch, url)
        pending = PendingLoad(url, future, on_loaded, self.timers)
        pending.start_polling()
        return pending

    def shutdown(self) -> None:
        self.executor.shutdown(wait=False, cancel_futures=True)

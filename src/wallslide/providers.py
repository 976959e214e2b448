"""
Minimal batch providers.

Providers answer a `FetchRequest` by delivering one `Batch` per configured
source. The ones here cover local directories (`local:<path>`) and direct
image URLs; richer backends plug in through the same `BatchProvider`
protocol.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Callable, Iterable, Protocol

from .config import SUPPORTED_IMAGE_EXTENSIONS
from .exceptions.wallslide_errors import SourceNotSupported, SourceUnavailable
from .models import Batch, FetchRequest, ImageEntry

logger = logging.getLogger(__name__)

LOCAL_PREFIX = "local:"

Deliver = Callable[[Batch], None]


class BatchProvider(Protocol):
    def accepts(self, source: str) -> bool: ...
    def entries_for(self, source: str, request: FetchRequest) -> list[ImageEntry]: ...


def load_images_from_folder(image_folder: Path) -> list[Path]:
    """
    Scan a directory recursively for supported image files.

    Args:
        image_folder: The directory path to scan for images.

    Returns:
        A sorted list of Path objects for all valid images found.

    Raises:
        SourceUnavailable: If the folder does not exist or is not a directory.
    """
    if not image_folder.is_dir():
        raise SourceUnavailable(f"The image folder '{image_folder}' does not exist or is not a directory.")

    logger.debug(f"Scanning for images in: {image_folder}")
    images = sorted(
        item for item in image_folder.rglob('*')
        if item.is_file()
        and item.name.lower().endswith(SUPPORTED_IMAGE_EXTENSIONS)
        and not item.name.startswith('.')
    )
    if not images:
        logger.warning(f"No images found in '{image_folder}' with supported extensions.")
    return images


class LocalDirectoryProvider:
    """Serves `local:<directory>` sources, one entry per image file."""

    def accepts(self, source: str) -> bool:
        return source.startswith(LOCAL_PREFIX)

    def entries_for(self, source: str, request: FetchRequest) -> list[ImageEntry]:
        if not self.accepts(source):
            raise SourceNotSupported(source)
        folder = Path(source[len(LOCAL_PREFIX):]).expanduser().resolve()
        return [
            ImageEntry(url=path.as_uri(), caption=path.stem)
            for path in load_images_from_folder(folder)
        ]


class DirectUrlProvider:
    """Serves a plain image URL as a one-entry batch."""

    def accepts(self, source: str) -> bool:
        return source.startswith(("http://", "https://"))

    def entries_for(self, source: str, request: FetchRequest) -> list[ImageEntry]:
        if not self.accepts(source):
            raise SourceNotSupported(source)
        return [ImageEntry(url=source)]


class SourceRouter:
    """
    Fans a fetch request out to the first provider accepting each source.

    When `shuffle` is set, entries are shuffled before they are truncated to
    `maximum_entries`, so large sources contribute a different random subset
    on every refresh. Batches are handed to `deliver`, which is expected to
    hop back onto the event loop before touching any state.
    """

    def __init__(
        self,
        deliver: Deliver,
        providers: Iterable[BatchProvider] | None = None,
        rng: random.Random | None = None,
    ):
        self.deliver = deliver
        self.rng = rng or random.Random()
        self.providers = list(providers) if providers is not None else [LocalDirectoryProvider(), DirectUrlProvider()]

    def request(self, request: FetchRequest) -> None:
        for source in request.config.sources:
            provider = next((p for p in self.providers if p.accepts(source)), None)
            if provider is None:
                logger.warning(f"No provider for source '{source}', skipping.")
                continue
            try:
                entries = list(provider.entries_for(source, request))
            except (SourceNotSupported, SourceUnavailable) as e:
                logger.warning(f"Could not fetch '{source}': {e}")
                continue

            if request.config.shuffle:
                self.rng.shuffle(entries)

            batch = Batch(source, request.orientation, tuple(entries))
            self.deliver(batch.truncated(request.config.maximum_entries))

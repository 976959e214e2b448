"""
Data records shared across the wallpaper display.

Image entries and batches are immutable once received from a provider. The
only mutable record is `ImageNode`, the handle a render surface draws.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol

from PIL import Image

from .config import WallpaperConfig


@dataclass(frozen=True)
class ImageVariant:
    """An alternate-resolution rendition of an image."""

    width: int
    height: int
    url: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ImageVariant:
        return cls(width=int(data["width"]), height=int(data["height"]), url=data["url"])


@dataclass(frozen=True)
class ImageEntry:
    """
    One candidate image.

    `variants` are expected in ascending resolution order, as providers
    deliver them.
    """

    url: str
    caption: Optional[str] = None
    variants: tuple[ImageVariant, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ImageEntry:
        """Build an entry from a provider payload (`url`, `caption`, `variants`)."""
        variants = tuple(ImageVariant.from_dict(v) for v in data.get("variants") or ())
        return cls(url=data["url"], caption=data.get("caption"), variants=variants)


@dataclass(frozen=True)
class Batch:
    """The full, ordered set of candidate images for one source/orientation pair."""

    source: str
    orientation: str
    entries: tuple[ImageEntry, ...] = ()

    def truncated(self, maximum_entries: int) -> Batch:
        if len(self.entries) <= maximum_entries:
            return self
        return Batch(self.source, self.orientation, self.entries[:max(0, maximum_entries)])


@dataclass(frozen=True)
class FetchRequest:
    """A configuration snapshot sent to the batch provider, with the orientation resolved."""

    config: WallpaperConfig
    orientation: str


class PendingLoadHandle(Protocol):
    def detach(self) -> None: ...


@dataclass(eq=False)
class ImageNode:
    """
    A displayable element: one entry rendered from one resolved URL.

    `image` stays None until the download completes. `load` is the in-flight
    download, if any.
    """

    entry: ImageEntry
    url: str
    image: Optional[Image.Image] = None
    load: Optional[PendingLoadHandle] = field(default=None, repr=False)


@dataclass(frozen=True)
class DisplayState:
    """Read-only view of what the scheduler is showing and loading."""

    current_entry: Optional[ImageEntry]
    pending_entry: Optional[ImageEntry]
    current_index: int
    catalog: Optional[Batch]

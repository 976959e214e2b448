# -*- coding: utf-8 -*-
"""
Configuration and fixtures for pytest.

This module defines shared fixtures used across the test suite: a manual
clock standing in for the Tk event loop, a recording render surface, a fake
image loader whose downloads complete on demand, and a fully wired engine
(catalog, scheduler, controller and router) built from those fakes.
"""

import logging
import random
from pathlib import Path
from typing import Iterator

import pytest
from PIL import Image

from wallslide.catalog import ImageCatalog
from wallslide.config import WallpaperConfig
from wallslide.controller import ConfigController
from wallslide.models import Batch, ImageEntry, ImageVariant
from wallslide.router import EventRouter
from wallslide.scheduler import SlideScheduler
from wallslide.viewport import Viewport


class FakeTimerHandle:
    def __init__(self, due: float, seq: int, callback):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimers:
    """A manual clock. Callbacks only run when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self.handles: list[FakeTimerHandle] = []

    def call_later(self, delay, callback):
        handle = FakeTimerHandle(self.now + delay, len(self.handles), callback)
        self.handles.append(handle)
        return handle

    @property
    def outstanding(self) -> list[FakeTimerHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def advance(self, seconds: float = 0.0) -> None:
        target = self.now + seconds
        while True:
            due = sorted((h for h in self.outstanding if h.due <= target), key=lambda h: (h.due, h.seq))
            if not due:
                break
            handle = due[0]
            self.now = handle.due
            handle.fired = True
            handle.callback()
        self.now = target


class RecordingSurface:
    """Render surface that records every call."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.visible = True

    def mount(self, node):
        self.calls.append(("mount", node))

    def set_caption(self, text):
        self.calls.append(("caption", text))

    def set_image(self, node, opacity, fade=0.0):
        self.calls.append(("image", node, opacity, fade))

    def remove_node(self, node):
        self.calls.append(("remove", node))

    def show(self):
        self.visible = True
        self.calls.append(("show",))

    def hide(self):
        self.visible = False
        self.calls.append(("hide",))

    def named(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


class FakeLoad:
    def __init__(self, url, on_loaded):
        self.url = url
        self.on_loaded = on_loaded
        self.detached = False

    def detach(self) -> None:
        self.detached = True

    def complete(self, image=None) -> None:
        """Simulate the network response; a detached load never reaches its callback."""
        if not self.detached:
            self.on_loaded(image if image is not None else Image.new('RGB', (8, 8)))


class FakeLoader:
    def __init__(self):
        self.loads: list[FakeLoad] = []

    def load(self, url, on_loaded):
        load = FakeLoad(url, on_loaded)
        self.loads.append(load)
        return load

    @property
    def last(self) -> FakeLoad:
        return self.loads[-1]


class Engine:
    """The display core wired to fakes, the way `WallpaperApp` wires it to Tk."""

    def __init__(self, config: WallpaperConfig, viewport: Viewport, seed: int = 7):
        self.viewport = viewport
        self.timers = FakeTimers()
        self.surface = RecordingSurface()
        self.loader = FakeLoader()
        self.fetches = []
        self.controller = ConfigController(config, self.timers, self.get_viewport, self.fetches.append)
        self.catalog = ImageCatalog(self.get_config, self.get_viewport)
        self.scheduler = SlideScheduler(
            self.catalog, self.surface, self.loader, self.timers,
            self.get_config, self.get_viewport, rng=random.Random(seed),
        )
        self.router = EventRouter(self.catalog, self.scheduler, self.controller, self.surface)

    def get_config(self) -> WallpaperConfig:
        return self.controller.config

    def get_viewport(self) -> Viewport:
        return self.viewport


def make_batch(count: int, source: str = "bing", orientation: str = "horizontal") -> Batch:
    entries = tuple(
        ImageEntry(url=f"https://example.com/{i}.jpg", caption=f"Image {i}")
        for i in range(count)
    )
    return Batch(source, orientation, entries)


@pytest.fixture
def viewport() -> Viewport:
    return Viewport(1024, 768)


@pytest.fixture
def config() -> WallpaperConfig:
    return WallpaperConfig(source="bing", slide_interval=10.0, update_interval=100.0, filter="")


@pytest.fixture
def engine(config, viewport) -> Engine:
    return Engine(config, viewport)


@pytest.fixture
def timers() -> FakeTimers:
    return FakeTimers()


@pytest.fixture
def sample_entry() -> ImageEntry:
    return ImageEntry(
        url="base",
        variants=(
            ImageVariant(800, 600, "a"),
            ImageVariant(1920, 1080, "b"),
            ImageVariant(3840, 2160, "c"),
        ),
    )


@pytest.fixture
def tmp_image_dir(tmp_path: Path) -> Iterator[Path]:
    """
    Create a temporary directory with two small images, one in a subfolder.

    Yields:
        Path: The directory containing the images.
    """
    data_dir = tmp_path / "data"
    (data_dir / "sub").mkdir(parents=True)
    Image.new('RGB', (100, 60), color='red').save(data_dir / "sunset.png", 'PNG')
    Image.new('RGB', (60, 100), color='blue').save(data_dir / "sub" / "harbour.jpg", 'JPEG')
    (data_dir / "notes.txt").write_text("not an image")
    yield data_dir


@pytest.fixture
def patch_tk(mocker):
    """
    Patch the Tkinter classes so no window is created during tests.

    Returns:
        dict: The mocked 'Tk' and 'Canvas' classes.
    """
    mock_tk = mocker.patch('tkinter.Tk', autospec=True)
    mock_canvas = mocker.patch('tkinter.Canvas', autospec=True)
    return {
        "Tk": mock_tk,
        "Canvas": mock_canvas,
    }


@pytest.fixture
def dummy_canvas(patch_tk):
    """A mocked canvas reporting an 80x60 size."""
    canvas = patch_tk["Canvas"].return_value
    canvas.winfo_width.return_value = 80
    canvas.winfo_height.return_value = 60
    canvas.create_text.return_value = 1
    return canvas


@pytest.fixture
def caplog_info(caplog):
    caplog.set_level(logging.INFO)
    return caplog

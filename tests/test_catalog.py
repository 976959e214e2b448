# -*- coding: utf-8 -*-
"""
Unit tests for the image catalog.
"""

from unittest.mock import MagicMock

import pytest

from conftest import make_batch
from wallslide.catalog import ImageCatalog
from wallslide.config import WallpaperConfig
from wallslide.viewport import Viewport

# --- Fixtures ---

@pytest.fixture
def catalog_for():
    def build(config, viewport=Viewport(1920, 1080)):
        return ImageCatalog(lambda: config, lambda: viewport)
    return build

# --- Tests ---

def test_keeps_small_batch_whole(catalog_for):
    catalog = catalog_for(WallpaperConfig(maximum_entries=10))
    assert catalog.replace(make_batch(3))
    assert len(catalog) == 3

def test_truncates_to_maximum_entries(catalog_for):
    catalog = catalog_for(WallpaperConfig(maximum_entries=4))
    catalog.replace(make_batch(9))
    assert len(catalog) == 4
    assert catalog.entries == make_batch(9).entries[:4]

def test_drops_batch_for_other_source(catalog_for, caplog):
    caplog.set_level("DEBUG")
    catalog = catalog_for(WallpaperConfig(source="bing"))
    assert not catalog.replace(make_batch(3, source="local:/photos"))
    assert catalog.batch is None
    assert "Dropping stale batch" in caplog.text

def test_drops_batch_for_other_orientation(catalog_for):
    catalog = catalog_for(WallpaperConfig(source="bing"), Viewport(1080, 1920))
    assert not catalog.replace(make_batch(3, orientation="horizontal"))
    assert catalog.replace(make_batch(3, orientation="vertical"))

def test_explicit_orientation_overrides_viewport(catalog_for):
    catalog = catalog_for(WallpaperConfig(source="bing", orientation="vertical"), Viewport(1920, 1080))
    assert catalog.replace(make_batch(1, orientation="vertical"))

def test_source_list_matches_by_membership(catalog_for):
    catalog = catalog_for(WallpaperConfig(source=["bing", "local:/photos"]))
    assert catalog.replace(make_batch(2, source="local:/photos"))
    assert not catalog.replace(make_batch(2, source="local:/other"))

def test_replacement_is_wholesale(catalog_for):
    catalog = catalog_for(WallpaperConfig())
    catalog.replace(make_batch(5))
    catalog.replace(make_batch(2))
    assert len(catalog) == 2

def test_listeners_run_only_for_accepted_batches(catalog_for):
    catalog = catalog_for(WallpaperConfig(source="bing"))
    listener = MagicMock()
    catalog.add_listener(listener)

    catalog.replace(make_batch(1, source="nasa"))
    listener.assert_not_called()

    catalog.replace(make_batch(1))
    listener.assert_called_once_with(catalog)

def test_empty_catalog_has_no_entries(catalog_for):
    catalog = catalog_for(WallpaperConfig())
    assert catalog.entries == ()
    assert len(catalog) == 0

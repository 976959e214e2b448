# -*- coding: utf-8 -*-
"""
Unit tests for resolution-aware variant selection.
"""

import pytest

from wallslide.models import ImageEntry, ImageVariant
from wallslide.variants import resolve_variant_url
from wallslide.viewport import Viewport

def test_smallest_variant_covering_viewport(sample_entry):
    """The first variant at least as large as the viewport wins."""
    url = resolve_variant_url(sample_entry, 2000, 2000, Viewport(1024, 768))
    assert url == "b"

def test_no_variant_within_caps_returns_base_url(sample_entry):
    assert resolve_variant_url(sample_entry, 500, 2000, Viewport(1024, 768)) == "base"

def test_largest_capped_variant_when_none_covers(sample_entry):
    """Caps stop the walk before a covering variant is reached."""
    assert resolve_variant_url(sample_entry, 1000, 1000, Viewport(1920, 1080)) == "a"

def test_largest_variant_when_viewport_exceeds_all(sample_entry):
    assert resolve_variant_url(sample_entry, 10_000, 10_000, Viewport(7680, 4320)) == "c"

def test_height_cap_applies(sample_entry):
    assert resolve_variant_url(sample_entry, 10_000, 1000, Viewport(1024, 768)) == "a"

def test_exact_viewport_match_counts_as_covering(sample_entry):
    assert resolve_variant_url(sample_entry, 10_000, 10_000, Viewport(800, 600)) == "a"

@pytest.mark.parametrize("viewport", [Viewport(1, 1), Viewport(4000, 4000)])
def test_entry_without_variants_returns_url(viewport):
    entry = ImageEntry(url="only")
    assert resolve_variant_url(entry, 100, 100, viewport) == "only"

def test_walk_stops_at_first_oversized_variant():
    """A later, smaller variant is not considered once the cap is hit."""
    entry = ImageEntry(
        url="base",
        variants=(ImageVariant(640, 480, "a"), ImageVariant(4000, 3000, "huge"), ImageVariant(1280, 960, "b")),
    )
    assert resolve_variant_url(entry, 2000, 2000, Viewport(1280, 960)) == "a"

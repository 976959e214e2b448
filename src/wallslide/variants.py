"""
Resolution-aware image selection.
"""

from __future__ import annotations

from .models import ImageEntry
from .viewport import Viewport


def resolve_variant_url(entry: ImageEntry, max_width: int, max_height: int, viewport: Viewport) -> str:
    """
    Pick the URL of the best-fit rendition of an entry.

    Variants are walked from smallest to largest. The walk stops at the first
    variant exceeding `max_width` or `max_height` (that variant is not used),
    or right after adopting the first variant that covers the viewport on both
    axes. The entry's own URL is returned when no variant qualifies.

    Args:
        entry: The image entry.
        max_width: Widest variant allowed.
        max_height: Tallest variant allowed.
        viewport: The display size to cover.

    Returns:
        str: The selected URL.
    """
    url = entry.url
    for variant in entry.variants:
        if variant.width > max_width or variant.height > max_height:
            break

        url = variant.url

        if variant.width >= viewport.width and variant.height >= viewport.height:
            break
    return url

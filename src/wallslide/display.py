"""
Image Rendering Module.

This module draws wallpapers on a Tkinter canvas: fitting images to the
viewport, applying the configured visual filter, crossfading between frames
and drawing the caption overlay. `TkSurface` is the render surface the
scheduler talks to.
"""

from __future__ import annotations

import base64
import io
import logging
import re
import tkinter as tk
from typing import Callable, Optional

from PIL import Image, ImageEnhance, ImageFilter, ImageOps, ImageTk

from .config import CROSSFADE_STEPS, EDGE_FADE_FRACTION, WallpaperConfig
from .models import ImageNode
from .timers import Timer, TimerService
from .viewport import query_viewport

logger = logging.getLogger(__name__)

_FILTER_PATTERN = re.compile(r"([a-z-]+)\(\s*([^)]*?)\s*\)")


def fit_image(image: Image.Image, target_width: int, target_height: int, mode: str = "cover") -> Image.Image:
    """
    Fit an image into the target dimensions.

    Modes follow CSS object-fit:
    - "cover": scale to fill, cropping the overflow.
    - "contain": scale to fit, letterboxed on black.
    - "fill": stretch, ignoring the aspect ratio.
    Any other mode is treated as "contain".

    Args:
        image (Image.Image): The source image.
        target_width (int): Width of the frame.
        target_height (int): Height of the frame.
        mode (str): The fit mode.

    Returns:
        Image.Image: A frame of exactly the target size, or a copy of the
                     source if the dimensions are invalid.
    """
    if target_width <= 0 or target_height <= 0:
        logger.warning(f"fit_image: Invalid target dimensions ({target_width}x{target_height}).")
        return image.copy()
    if image.width == 0 or image.height == 0:
        logger.warning(f"fit_image: Invalid image dimensions ({image.width}x{image.height}).")
        return image.copy()

    size = (target_width, target_height)
    if mode == "cover":
        return ImageOps.fit(image, size, Image.Resampling.LANCZOS, centering=(0.5, 0.5))
    if mode == "fill":
        return image.resize(size, Image.Resampling.LANCZOS)
    if mode != "contain":
        logger.debug(f"Unsupported fit mode '{mode}', using 'contain'.")

    fitted = ImageOps.contain(image, size, Image.Resampling.LANCZOS)
    frame = Image.new("RGB", size, "black")
    frame.paste(fitted, ((target_width - fitted.width) // 2, (target_height - fitted.height) // 2))
    return frame


def fade_edges(image: Image.Image, fraction: float = EDGE_FADE_FRACTION) -> Image.Image:
    """Darken the top and bottom bands of `image` to black with a linear gradient."""
    band = int(image.height * fraction)
    if band <= 0:
        return image

    ramp = Image.linear_gradient("L").resize((image.width, band))
    mask = Image.new("L", image.size, 0)
    mask.paste(ImageOps.invert(ramp), (0, 0))
    mask.paste(ramp, (0, image.height - band))
    return Image.composite(Image.new(image.mode, image.size, "black"), image, mask)


def _parse_amount(raw: str) -> float:
    raw = raw.strip()
    if raw.endswith("%"):
        return float(raw[:-1]) / 100
    if raw.endswith("px"):
        return float(raw[:-2])
    return float(raw)


def apply_filter(image: Image.Image, descriptor: str) -> Image.Image:
    """
    Apply a CSS-like filter descriptor such as "grayscale(0.5) brightness(0.5)".

    Supported functions are grayscale, saturate, brightness, contrast and
    blur. Unknown functions or unreadable amounts are skipped with a warning.

    Args:
        image (Image.Image): The image to adjust.
        descriptor (str): Space separated filter functions; empty means none.

    Returns:
        Image.Image: The adjusted image.
    """
    for name, raw in _FILTER_PATTERN.findall(descriptor or ""):
        try:
            amount = _parse_amount(raw)
        except ValueError:
            logger.warning(f"Ignoring filter '{name}({raw})': unreadable amount.")
            continue

        if name == "grayscale":
            image = ImageEnhance.Color(image).enhance(1.0 - min(max(amount, 0.0), 1.0))
        elif name == "saturate":
            image = ImageEnhance.Color(image).enhance(amount)
        elif name == "brightness":
            image = ImageEnhance.Brightness(image).enhance(amount)
        elif name == "contrast":
            image = ImageEnhance.Contrast(image).enhance(amount)
        elif name == "blur":
            image = image.filter(ImageFilter.GaussianBlur(amount))
        else:
            logger.warning(f"Ignoring unsupported filter '{name}'.")
    return image


def to_photoimage(image: Image.Image) -> tk.PhotoImage | None:
    """
    Create a Tk photo image, falling back to an in-memory PNG if ImageTk fails.

    Returns:
        tk.PhotoImage | None: The photo image, or None if both methods fail.
    """
    try:
        return ImageTk.PhotoImage(image)
    except Exception as e1:
        logger.warning(f"ImageTk.PhotoImage failed: {e1}. Trying PNG fallback.")
        try:
            with io.BytesIO() as bio:
                image.save(bio, format='PNG')
                return tk.PhotoImage(data=base64.b64encode(bio.getvalue()))
        except Exception as e2:
            logger.error(f"All PhotoImage creation methods failed. Last error: {e2}")
            return None


class TkSurface:
    """
    Render surface backed by a Tkinter canvas.

    Tk has no per-item opacity, so the surface composes frames itself: the
    most recently revealed node is what is drawn, and a crossfade blends the
    previous frame into the new one step by step.
    """

    CAPTION_MARGIN = 20

    def __init__(self, canvas: tk.Canvas, get_config: Callable[[], WallpaperConfig], timers: TimerService):
        self.canvas = canvas
        self.get_config = get_config
        self.visible = True
        self.mounted: set[ImageNode] = set()
        self.shown: Optional[ImageNode] = None
        self._frame: Optional[Image.Image] = None
        self._photo: Optional[tk.PhotoImage] = None
        self._caption_id: Optional[int] = None
        self._fade_timer = Timer(timers, "fade step")

    # --- Render surface capability ---

    def mount(self, node: ImageNode) -> None:
        # Nothing is drawn until the node is revealed.
        self.mounted.add(node)

    def set_caption(self, text: Optional[str]) -> None:
        if text is None:
            if self._caption_id is not None:
                self.canvas.itemconfigure(self._caption_id, state="hidden")
            return

        if self._caption_id is None:
            self._caption_id = self.canvas.create_text(
                0, 0, text=text, fill="white", font=("Helvetica", 14),
                anchor=tk.SW, tags="caption",
            )
        self.canvas.itemconfigure(self._caption_id, text=text, state="normal")
        self._place_caption()

    def set_image(self, node: ImageNode, opacity: float, fade: float = 0.0) -> None:
        """
        Reveal or hide a node.

        A positive opacity makes `node` the drawn image, blending in from the
        current frame over `fade` seconds. A zero opacity is only acted on
        immediately (fade == 0) and blanks the node if it is the one shown;
        a fading-out node is otherwise replaced by the incoming one.
        """
        if opacity <= 0:
            if node is self.shown and not fade:
                self._fade_timer.cancel()
                self.canvas.delete("image")
                self.shown = None
                self._frame = None
            return

        if node.image is None:
            logger.warning(f"Cannot show '{node.url}' before it has loaded.")
            return

        target = self._render(node)
        self._fade_timer.cancel()
        self.shown = node
        if fade > 0 and self._frame is not None and self._frame.size == target.size:
            self._fade_step(self._frame, target, 1, fade / CROSSFADE_STEPS)
        else:
            self._draw(target)

    def remove_node(self, node: ImageNode) -> None:
        self.mounted.discard(node)
        if node is not self.shown:
            node.image = None

    # --- Host-facing controls ---

    def show(self) -> None:
        if not self.visible:
            self.canvas.pack(fill=tk.BOTH, expand=True)
            self.visible = True

    def hide(self) -> None:
        if self.visible:
            self.canvas.pack_forget()
            self.visible = False

    def redraw(self) -> None:
        """Re-render the shown image for the current canvas size."""
        self._place_caption()
        if self.shown is None or self.shown.image is None:
            return
        self._fade_timer.cancel()
        self._draw(self._render(self.shown))

    # --- Internals ---

    def _render(self, node: ImageNode) -> Image.Image:
        config = self.get_config()
        viewport = query_viewport(self.canvas)
        filtered = apply_filter(node.image, config.filter)
        frame = fit_image(filtered, viewport.width, viewport.height, config.size)
        if config.fade_edges:
            frame = fade_edges(frame)
        return frame

    def _fade_step(self, start: Image.Image, target: Image.Image, step: int, step_delay: float) -> None:
        if step >= CROSSFADE_STEPS:
            self._draw(target)
            return
        self._draw(Image.blend(start, target, step / CROSSFADE_STEPS))
        self._fade_timer.arm(step_delay, lambda: self._fade_step(start, target, step + 1, step_delay))

    def _draw(self, frame: Image.Image) -> None:
        photo = to_photoimage(frame)
        if photo is None:
            logger.error("Failed to create PhotoImage, keeping the previous frame.")
            return
        self.canvas.delete("image")
        self.canvas.create_image(
            self.canvas.winfo_width() // 2, self.canvas.winfo_height() // 2,
            image=photo, anchor=tk.CENTER, tags="image",
        )
        self.canvas.tag_raise("caption")
        # Tk does not keep its own reference to the photo.
        self._photo = photo
        self._frame = frame

    def _place_caption(self) -> None:
        if self._caption_id is not None:
            self.canvas.coords(
                self._caption_id,
                self.CAPTION_MARGIN,
                self.canvas.winfo_height() - self.CAPTION_MARGIN,
            )

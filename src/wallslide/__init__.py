"""
Wallslide: a rotating wallpaper display.

Periodically refreshed batches of images are shown one at a time with
timed crossfades, resolution-aware variant selection and caption overlay.
"""

"""
Command-Line Interface for the wallpaper display.

This module handles parsing of command-line arguments, sets up logging,
and initializes and runs the main application.
"""

import argparse
import tkinter as tk
import logging
import coloredlogs
import sys
import importlib.metadata

from .app import WallpaperApp
from . import config

# Setup a dedicated logger for this application
logger = logging.getLogger(__name__)

def build_config(args: argparse.Namespace) -> config.WallpaperConfig:
    """Translate parsed arguments into a configuration record."""
    source = args.source[0] if len(args.source) == 1 else tuple(args.source)
    return config.WallpaperConfig(
        source=source,
        update_interval=args.update_interval,
        slide_interval=args.slide_interval,
        maximum_entries=args.maximum_entries,
        orientation=args.orientation,
        max_width=args.max_width,
        max_height=args.max_height,
        crossfade=not args.no_crossfade,
        caption=not args.no_caption,
        size=args.size,
        filter=args.filter,
        user_presence_action=args.user_presence_action,
        shuffle=not args.no_shuffle,
        fade_edges=args.fade_edges,
    )

def main():
    """
    The main entry point for the application.

    Parses command-line arguments, sets up the window and logging,
    and starts the wallpaper display.
    """
    parser = argparse.ArgumentParser(
        description="A rotating wallpaper display.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s {importlib.metadata.version('wallslide')}",
        help="Show the version number and exit."
    )
    parser.add_argument(
        "source",
        nargs="+",
        help="Image source(s): 'local:<directory>' or an image URL."
    )
    parser.add_argument(
        "-u", "--update-interval",
        type=float,
        default=config.DEFAULT_UPDATE_INTERVAL,
        help=f"Seconds between batch refreshes. Default: {config.DEFAULT_UPDATE_INTERVAL:g}"
    )
    parser.add_argument(
        "-d", "--slide-interval",
        type=float,
        default=config.DEFAULT_SLIDE_INTERVAL,
        help=f"Seconds each image stays on screen (0 disables rotation). Default: {config.DEFAULT_SLIDE_INTERVAL:g}"
    )
    parser.add_argument(
        "-n", "--maximum-entries",
        type=int,
        default=config.DEFAULT_MAXIMUM_ENTRIES,
        help=f"Maximum number of images kept per batch. Default: {config.DEFAULT_MAXIMUM_ENTRIES}"
    )
    parser.add_argument(
        "--orientation",
        choices=[config.ORIENTATION_AUTO, config.ORIENTATION_VERTICAL, config.ORIENTATION_HORIZONTAL],
        default=config.ORIENTATION_AUTO,
        help="Orientation of the images to request. Default: auto"
    )
    parser.add_argument(
        "--max-width",
        type=int,
        default=sys.maxsize,
        help="Widest image variant to download."
    )
    parser.add_argument(
        "--max-height",
        type=int,
        default=sys.maxsize,
        help="Tallest image variant to download."
    )
    parser.add_argument(
        "--no-crossfade",
        action="store_true",
        help="Swap images instantly instead of crossfading."
    )
    parser.add_argument(
        "--no-caption",
        action="store_true",
        help="Do not show image captions."
    )
    parser.add_argument(
        "--no-shuffle",
        action="store_true",
        help="Keep provider order instead of picking a random subset of each source."
    )
    parser.add_argument(
        "--fade-edges",
        action="store_true",
        help="Fade the top and bottom edges of the image to black."
    )
    parser.add_argument(
        "--size",
        choices=["cover", "contain", "fill"],
        default=config.DEFAULT_SIZE,
        help=f"How images are fitted to the window. Default: {config.DEFAULT_SIZE}"
    )
    parser.add_argument(
        "--filter",
        default=config.DEFAULT_FILTER,
        help=f"Visual filter, e.g. 'grayscale(0.5) brightness(0.5)'. Use '' for none.\n"
             f"Default: {config.DEFAULT_FILTER}"
    )
    parser.add_argument(
        "--user-presence-action",
        choices=[config.PRESENCE_NONE, config.PRESENCE_SHOW, config.PRESENCE_HIDE],
        default=config.PRESENCE_NONE,
        help="How user presence toggles the display. Default: none"
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Start in fullscreen mode."
    )
    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default=config.DEFAULT_LOG_LEVEL,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help=f"Set the logging level. Default: {config.DEFAULT_LOG_LEVEL}"
    )
    args = parser.parse_args()

    # --- Setup Logging ---
    log_level_upper = args.log_level.upper()
    logging.basicConfig(level=getattr(logging, log_level_upper, logging.INFO))
    coloredlogs.install(
        level=log_level_upper,
        logger=logging.getLogger('wallslide'),
        fmt='%(asctime)s %(levelname)-8s %(name)s: %(message)s'
    )

    # --- Application Initialization ---
    try:
        root = tk.Tk()
        # Hide the main window until the app is wired up
        root.withdraw()

        app = WallpaperApp(window=root, config=build_config(args))
        if args.fullscreen:
            app.toggle_fullscreen()

        root.deiconify()
        app.run()
    except tk.TclError as e:
        logger.critical(f"Could not open a display: {e}")
        sys.exit(1)
    except Exception as e:
        logger.critical(f"An unexpected error occurred: {e}", exc_info=True)
        sys.exit(1)

if __name__ == '__main__':
    main()

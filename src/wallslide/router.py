"""
Inbound event routing.

Every external stimulus (a new batch, a forced advance, a presence change, a
configuration update) goes through `EventRouter.dispatch`. Handlers run to
completion on the event loop, one at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Union

from .catalog import ImageCatalog
from .config import PRESENCE_HIDE, PRESENCE_SHOW
from .controller import ConfigController
from .models import Batch, ImageEntry
from .scheduler import SlideScheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchAvailable:
    batch: Batch


@dataclass(frozen=True)
class ForceAdvance:
    pass


@dataclass(frozen=True)
class PresenceChanged:
    visible: bool


@dataclass(frozen=True)
class ConfigUpdate:
    payload: Union[str, list, tuple, Mapping[str, Any]]


@dataclass(frozen=True)
class SurfaceCreated:
    pass


Event = Union[BatchAvailable, ForceAdvance, PresenceChanged, ConfigUpdate, SurfaceCreated]


class VisibilityTarget(Protocol):
    def show(self) -> None: ...
    def hide(self) -> None: ...


def event_from_notification(name: str, payload: Any = None) -> Optional[Event]:
    """
    Translate a host notification into an event.

    Recognized names are WALLPAPERS (payload with `source`, `orientation` and
    `images`), LOAD_NEXT_WALLPAPER, USER_PRESENCE (boolean payload),
    UPDATE_WALLPAPER_CONFIG and MODULE_DOM_CREATED. Anything else yields None.
    """
    if name == "WALLPAPERS":
        entries = tuple(ImageEntry.from_dict(item) for item in payload.get("images") or ())
        return BatchAvailable(Batch(payload["source"], payload["orientation"], entries))
    if name == "LOAD_NEXT_WALLPAPER":
        return ForceAdvance()
    if name == "USER_PRESENCE":
        return PresenceChanged(bool(payload))
    if name == "UPDATE_WALLPAPER_CONFIG":
        return ConfigUpdate(payload)
    if name == "MODULE_DOM_CREATED":
        return SurfaceCreated()
    return None


class EventRouter:
    """Maps inbound events onto the catalog, scheduler, controller and surface."""

    def __init__(
        self,
        catalog: ImageCatalog,
        scheduler: SlideScheduler,
        controller: ConfigController,
        surface: VisibilityTarget,
    ):
        self.catalog = catalog
        self.scheduler = scheduler
        self.controller = controller
        self.surface = surface

    def dispatch(self, event: Event) -> None:
        if isinstance(event, BatchAvailable):
            self.catalog.replace(event.batch)
        elif isinstance(event, ForceAdvance):
            logger.info("Forced advance requested.")
            self.scheduler.advance()
        elif isinstance(event, PresenceChanged):
            self.on_presence(event.visible)
        elif isinstance(event, ConfigUpdate):
            self.controller.update(event.payload)
        elif isinstance(event, SurfaceCreated):
            if self.controller.config.user_presence_action == PRESENCE_SHOW:
                self.surface.hide()
        else:
            logger.warning(f"Ignoring unknown event {event!r}.")

    def notify(self, name: str, payload: Any = None) -> None:
        """Dispatch a host notification by name; unknown names are ignored."""
        event = event_from_notification(name, payload)
        if event is None:
            logger.debug(f"Ignoring notification '{name}'.")
            return
        self.dispatch(event)

    def on_presence(self, visible: bool) -> None:
        action = self.controller.config.user_presence_action
        if action not in (PRESENCE_SHOW, PRESENCE_HIDE):
            return
        if visible == (action == PRESENCE_SHOW):
            self.surface.show()
        else:
            self.surface.hide()

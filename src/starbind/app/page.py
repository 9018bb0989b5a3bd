"""
Pages

A page owns the codec and router for one client surface. It decodes inbound
payloads, routes them, and forwards outbound updates to a sink (the
transport). `Page` adds a swappable primary element, for tabbed or
wizard-style screens.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..core import (
    ACTION_KEY,
    BindingManager,
    BindingType,
    DecodeError,
    EventBinding,
    EventBuilder,
    EventCodec,
    EventRegistration,
    EventRouter,
    PatchBatch,
)
from ..core.codec import RawPayload
from .config import StarBindSettings
from .support import EventSupport

if TYPE_CHECKING:
    from .element import Element

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageUpdate:
    """One outbound message: patch commands, client event bindings, and whether to clear first."""
    page: str
    commands: Optional[PatchBatch] = None
    events: Optional[EventBuilder] = None
    clear: bool = False


Sink = Callable[[PageUpdate], Any]


class BasePage:
    """Event routing and update delivery for one client surface."""

    def __init__(self, sink: Sink, settings: Optional[StarBindSettings] = None, codec: Optional[EventCodec] = None):
        self.settings = settings or StarBindSettings()
        self.sink = sink
        self.codec = codec if codec is not None else EventCodec(extra=self.settings.extra_keys)
        self.router = EventRouter(self.codec)
        self._support = EventSupport(self.router, self.send_update)
        self._support.bindings.scan_and_bind(self)

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def bindings(self) -> BindingManager:
        return self._support.bindings

    def build(self, commands: PatchBatch, events: EventBuilder) -> None:
        """Describe the page's initial content. Override in subclasses."""

    def open(self) -> PageUpdate:
        """Build the page and send it, replacing whatever the client shows."""
        commands, events = PatchBatch(), EventBuilder()
        self.build(commands, events)
        return self.send_update(commands, events, clear=True)

    def send_update(self, commands: Optional[PatchBatch] = None, events: Optional[EventBuilder] = None, clear: bool = False) -> PageUpdate:
        update = PageUpdate(self.name, commands, events, clear)
        self.sink(update)
        return update

    def handle_data_event(self, raw: RawPayload, session: Any = None, target: Any = None) -> bool:
        """
        Decode and route one inbound payload.

        Decode failures are logged and re-raised. A payload without an action,
        or (with ``resync_on_unhandled``) one nobody claimed, triggers a
        re-sync of every binding instead.
        """
        try:
            parameters = self.codec.decode(raw)
        except DecodeError as e:
            logger.error("Failed to decode event for %s: %s %s", self.name, e, e.errors())
            raise

        if ACTION_KEY not in parameters:
            logger.debug("Payload without %r for %s, re-syncing", ACTION_KEY, self.name)
            self.resync()
            return False

        handled = self.router.route_event(parameters, session=session, target=target)
        if not handled and self.settings.resync_on_unhandled:
            self.resync()
        return handled

    def resync(self) -> PatchBatch:
        """Re-send the current value of every page binding."""
        return self.bindings.update_all()

    def register_event_handler(self, action: str, handler: Any) -> EventRegistration:
        return self._support.register_event_handler(action, self, handler)

    def bind_event(self, binding_type: BindingType, selector: str, events: EventBuilder, binding: EventBinding) -> EventRegistration:
        return self._support.bind_event(binding_type, selector, events, binding, self)

    def unload_events(self) -> int:
        return self._support.unload_events()


class Page(BasePage):
    """Page that shows one primary element at a time under `root_content_selector`."""

    def __init__(self, sink: Sink, settings: Optional[StarBindSettings] = None, codec: Optional[EventCodec] = None):
        super().__init__(sink, settings=settings, codec=codec)
        self.primary_element: Optional["Element"] = None

    @property
    def root_content_selector(self) -> str:
        return self.settings.content_selector

    def show_primary_element(self, element: "Element") -> None:
        """Swap in `element`: unload the previous one, clear the content area, create the new one."""
        if self.primary_element is element:
            return
        if self.primary_element is not None:
            self.primary_element.on_unload()
        self.primary_element = element

        self.send_update(PatchBatch().clear(self.root_content_selector))
        element.create(self.root_content_selector)

"""
Elements

Building blocks of a page. Each element registers its own handlers (dropped
again by `on_unload`) and owns a binding manager scoped to wherever the
element was created.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from fastcore.xml import Div

from ..core import (
    BindingManager,
    BindingType,
    EventBinding,
    EventBuilder,
    EventRegistration,
    PatchBatch,
    array_selector,
    selectors,
)
from .support import EventSupport

if TYPE_CHECKING:
    from .page import BasePage, PageUpdate


class Element(ABC):
    """
    Base class for page elements.

    Subclasses implement `on_create` and may declare bindings with
    `ui_bindings()`; the declared cells are assigned onto the element when it
    is constructed.
    """

    def __init__(self, page: "BasePage"):
        self.page = page
        self._support = EventSupport(page.router, self.send_update)
        self._support.bindings.scan_and_bind(self)

    @property
    def bindings(self) -> BindingManager:
        return self._support.bindings

    @property
    def element_selector_id(self) -> str:
        """Id used for the container of repeated instances (class name by default)."""
        return type(self).__name__

    def create(self, root: str) -> "PageUpdate":
        """Create the element under `root` and send it in one update."""
        self.bindings.set_root_selector(root)
        commands, events = PatchBatch(), EventBuilder()
        self.on_create(root, commands, events)
        return self.send_update(commands, events, clear=False)

    def create_at(self, root: str, index: int, commands: PatchBatch, events: EventBuilder) -> str:
        """
        Create the element as item `index` of a list under `root`, adding to the
        caller's builders instead of sending. Returns the item's root selector.
        """
        item_id = array_selector(self.element_selector_id, index)
        commands.append_inline(root, Div(id=item_id))
        item_root = selectors(root, f"#{item_id}")

        self.bindings.set_root_selector(item_root)
        self.on_create(item_root, commands, events)
        return item_root

    @abstractmethod
    def on_create(self, root: str, commands: PatchBatch, events: EventBuilder) -> None:
        """Add the element's structure, event bindings and initial values."""

    def on_unload(self) -> int:
        """Unregister every handler this element registered."""
        return self._support.unload_events()

    def register_event_handler(self, action: str, handler: Any) -> EventRegistration:
        return self._support.register_event_handler(action, self, handler)

    def bind_event(self, binding_type: BindingType, selector: str, events: EventBuilder, binding: EventBinding) -> EventRegistration:
        return self._support.bind_event(binding_type, selector, events, binding, self)

    def send_update(self, commands: Optional[PatchBatch] = None, events: Optional[EventBuilder] = None, clear: bool = False) -> "PageUpdate":
        return self.page.send_update(commands, events, clear=clear)

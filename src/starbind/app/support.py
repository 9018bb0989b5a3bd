"""
Event support shared by pages and elements.

Tracks the handler registrations one owner made so they can be dropped
together, and owns that owner's binding manager.
"""

from typing import Any, Callable, List

from ..core import (
    BindingManager,
    BindingType,
    EventBinding,
    EventBuilder,
    EventRegistration,
    EventRouter,
)

SendUpdate = Callable[..., None]


class EventSupport:
    """Registration bookkeeping and bindings for one page or element."""

    def __init__(self, router: EventRouter, update_callback: SendUpdate):
        self.router = router
        self._registrations: List[EventRegistration] = []
        self.bindings = BindingManager(lambda batch: update_callback(batch, clear=False))

    def register_event_handler(self, action: str, owner: Any, handler: Any) -> EventRegistration:
        registration = self.router.register_handler(action, owner, handler)
        self._registrations.append(registration)
        return registration

    def bind_event(
        self,
        binding_type: BindingType,
        selector: str,
        events: EventBuilder,
        binding: EventBinding,
        owner: Any,
    ) -> EventRegistration:
        """Register the binding's handler and add its client-side trigger to `events`."""
        registration = self.register_event_handler(binding.name, owner, binding.create_handler())
        events.add_event_binding(binding_type, selector, binding.client_data())
        return registration

    def unload_events(self) -> int:
        """Unregister every handler registered through this instance."""
        registrations, self._registrations = self._registrations, []
        for registration in registrations:
            self.router.unregister_handler(registration)
        return len(registrations)

    @property
    def registrations(self) -> List[EventRegistration]:
        return list(self._registrations)


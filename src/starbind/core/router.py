"""
Event Router

Maps action names to an ordered list of handler registrations and owners to
the registrations they made, so an element or page can be torn down in one
call. Dispatch tries handlers in registration order until one claims the
event.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .codec import ACTION_KEY, EventCodec, ParameterBag, ParameterSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventContext:
    """
    What a handler sees for one inbound event.

    ``session`` and ``target`` are opaque references owned by the host (the
    connection or user session and the entity the event concerns); the
    router only passes them through.
    """
    parameters: ParameterBag
    session: Any = None
    target: Any = None

    @property
    def action(self) -> Optional[str]:
        return self.parameters.action

    def get(self, key: str, default: Any = None) -> Any:
        """Get a decoded parameter with default."""
        return self.parameters.get(key, default)

    def has(self, key: str) -> bool:
        """Check if the payload carried `key`."""
        return key in self.parameters


class EventHandler(ABC):
    """A handler capability: claims events and declares its parameter keys."""

    @abstractmethod
    def handle(self, context: EventContext) -> bool:
        """Handle the event; return True to claim it and stop dispatch."""

    def parameter_schemas(self) -> Sequence[ParameterSchema]:
        """Parameter keys this handler needs decoded."""
        return ()


@dataclass(eq=False)
class EventRegistration:
    """Handle returned by `EventRouter.register_handler`."""
    action: str
    owner: Any
    handler: Any
    active: bool = field(default=True, init=False)

    def __repr__(self) -> str:
        state = "registered" if self.active else "unregistered"
        return f"EventRegistration({self.action!r}, owner={type(self.owner).__name__}, {state})"


class EventRouter:
    """
    Routes decoded payloads to registered handlers.

    Both indexes are guarded by one lock that is held only while an index is
    mutated or snapshotted, never while a handler runs, so handlers may
    register and unregister freely during dispatch.
    """

    def __init__(self, codec: Optional[EventCodec] = None):
        self.codec = codec if codec is not None else EventCodec()
        self._action_handlers: Dict[str, List[EventRegistration]] = {}
        # Keyed by id() so unhashable owners work; each registration keeps
        # its owner alive, so the id cannot be reused while the bucket exists.
        self._owner_registrations: Dict[int, List[EventRegistration]] = {}
        self._lock = threading.RLock()

    def register_handler(self, action: str, owner: Any, handler: Any) -> EventRegistration:
        """Register `handler` for `action` on behalf of `owner`."""
        registration = EventRegistration(action, owner, handler)
        with self._lock:
            self._action_handlers.setdefault(action, []).append(registration)
            self._owner_registrations.setdefault(id(owner), []).append(registration)
        for schema in _schemas_of(handler):
            self.codec.register(schema)
        logger.debug("Registered handler for %r (owner %s)", action, type(owner).__name__)
        return registration

    def unregister_handler(self, registration: EventRegistration) -> None:
        """Remove a registration from both indexes and drop its parameter keys."""
        with self._lock:
            if not registration.active:
                return
            registration.active = False
            _remove(self._action_handlers, registration.action, registration)
            _remove(self._owner_registrations, id(registration.owner), registration)
        # Keys are removed even when another live handler declared the same key
        for schema in _schemas_of(registration.handler):
            self.codec.unregister(schema.key)
        logger.debug("Unregistered handler for %r", registration.action)

    def unregister_all_for_owner(self, owner: Any) -> int:
        """Unregister every handler `owner` registered. Returns how many were removed."""
        with self._lock:
            registrations = self._owner_registrations.pop(id(owner), [])
        for registration in registrations:
            self.unregister_handler(registration)
        return len(registrations)

    def route_event(self, parameters: ParameterBag, session: Any = None, target: Any = None) -> bool:
        """
        Dispatch one decoded payload.

        Returns False when the payload has no action, when nothing is
        registered for it, or when no handler claimed it.
        """
        action = parameters.get(ACTION_KEY)
        if not isinstance(action, str):
            return False

        handlers = self.handlers_for(action)
        if not handlers:
            logger.debug("No handlers registered for action %r", action)
            return False

        context = EventContext(parameters, session=session, target=target)
        for registration in handlers:
            if not registration.active:
                continue
            try:
                claimed = registration.handler.handle(context)
            except Exception:
                logger.exception("Handler for action %r raised", action)
                raise
            if claimed:
                return True

        logger.debug("Action %r was not claimed by any of %d handler(s)", action, len(handlers))
        return False

    def handlers_for(self, action: str) -> List[EventRegistration]:
        """Snapshot of the registrations for `action`, in dispatch order."""
        with self._lock:
            return list(self._action_handlers.get(action, ()))

    def registrations_for(self, owner: Any) -> List[EventRegistration]:
        """Snapshot of the registrations made by `owner`."""
        with self._lock:
            return list(self._owner_registrations.get(id(owner), ()))

    @property
    def actions(self) -> List[str]:
        with self._lock:
            return list(self._action_handlers)


def _schemas_of(handler: Any) -> Sequence[ParameterSchema]:
    schemas = getattr(handler, "parameter_schemas", None)
    return list(schemas()) if callable(schemas) else []


def _remove(index: Dict[Any, List[EventRegistration]], key: Any, registration: EventRegistration) -> None:
    bucket = index.get(key)
    if bucket is None:
        return
    if registration in bucket:
        bucket.remove(registration)
    if not bucket:
        del index[key]

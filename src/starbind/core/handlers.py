"""
Handler builders.

`EventHandlerBuilder` turns a plain callable into an `EventHandler` with
declared parameter keys. `EventBinding` additionally carries the data the
client sends with the action, so one declaration produces both the server
handler and the client-side binding payload.
"""

from typing import Any, Callable, Dict, List, Optional

from .codec import ACTION_KEY, ParameterSchema
from .router import EventContext, EventHandler

Callback = Callable[[EventContext], Any]
Predicate = Callable[[EventContext], Any]


class CallbackHandler(EventHandler):
    """Handler backed by a callable.

    A plain callback always claims the event. A conditional callback claims
    it only when it returns a truthy value, letting later handlers for the
    same action run otherwise.
    """

    def __init__(self, callback: Optional[Callable[[EventContext], Any]], schemas: List[ParameterSchema], conditional: bool = False):
        self.callback = callback
        self.conditional = conditional
        self._schemas = list(schemas)

    def handle(self, context: EventContext) -> bool:
        if self.callback is None:
            return False
        result = self.callback(context)
        if self.conditional:
            return bool(result)
        return True

    def parameter_schemas(self) -> List[ParameterSchema]:
        return list(self._schemas)

    def __repr__(self) -> str:
        kind = "conditional" if self.conditional else "always"
        return f"CallbackHandler({getattr(self.callback, '__name__', self.callback)!r}, {kind}, keys={[s.key for s in self._schemas]})"


class EventHandlerBuilder:
    """Builder for handlers registered directly with a router."""

    def __init__(self):
        self._schemas: List[ParameterSchema] = []

    @classmethod
    def create(cls) -> "EventHandlerBuilder":
        return cls()

    def with_parameter(self, key: str, decoder: Any = str) -> "EventHandlerBuilder":
        """Declare a parameter the handler reads from the payload."""
        self._schemas.append(ParameterSchema(key, decoder))
        return self

    def build(self, callback: Callback) -> CallbackHandler:
        """A handler that always claims the event."""
        return CallbackHandler(callback, self._schemas)

    def build_conditional(self, predicate: Predicate) -> CallbackHandler:
        """A handler that claims the event only when `predicate` returns truthy."""
        return CallbackHandler(predicate, self._schemas, conditional=True)


class EventBinding:
    """
    Declares an action, the data the client sends with it, and its callback.

        EventBinding.action("row-selected")
            .with_event_data("Row", int, "3")
            .on_event(lambda ctx: select(ctx.get("Row")))
    """

    def __init__(self, action: str):
        self._action = action
        self._schemas: List[ParameterSchema] = []
        self._event_data: Dict[str, Any] = {}
        self._callback: Optional[Callback] = None
        self._predicate: Optional[Predicate] = None

    @classmethod
    def action(cls, action: str) -> "EventBinding":
        return cls(action)

    @property
    def name(self) -> str:
        return self._action

    def with_event_data(self, key: str, decoder: Any, value: Any) -> "EventBinding":
        """Have the client send `value` under `key`, decoded server-side with `decoder`."""
        self._schemas.append(ParameterSchema(key, decoder))
        self._event_data[key] = value
        return self

    def on_event(self, callback: Callback) -> "EventBinding":
        self._callback = callback
        return self

    def on_event_conditional(self, predicate: Predicate) -> "EventBinding":
        self._predicate = predicate
        return self

    def create_handler(self) -> CallbackHandler:
        # A conditional callback takes precedence over a plain one
        if self._predicate is not None:
            return CallbackHandler(self._predicate, self._schemas, conditional=True)
        return CallbackHandler(self._callback, self._schemas)

    def client_data(self) -> Dict[str, Any]:
        """Payload the client sends when the interaction fires."""
        return {ACTION_KEY: self._action, **self._event_data}

    @property
    def event_data(self) -> Dict[str, Any]:
        return dict(self._event_data)

    def __repr__(self) -> str:
        return f"EventBinding({self._action!r}, data={self._event_data})"

"""
StarBind Core Module

Event codec, router and binding manager. No transport or rendering concerns.
"""

from .errors import StarBindError, DecodeError
from .selectors import selectors, array_selector
from .codec import ACTION_KEY, ParameterSchema, ParameterBag, CompositeDecoder, EventCodec
from .router import EventContext, EventHandler, EventRegistration, EventRouter
from .handlers import CallbackHandler, EventHandlerBuilder, EventBinding
from .commands import CommandKind, PatchCommand, PatchBatch, BindingType, ClientEventBinding, EventBuilder
from .bindings import Bindable, BindingEntry, BindingManager, to_display, is_rich

__all__ = [
    "StarBindError",
    "DecodeError",
    "selectors",
    "array_selector",
    "ACTION_KEY",
    "ParameterSchema",
    "ParameterBag",
    "CompositeDecoder",
    "EventCodec",
    "EventContext",
    "EventHandler",
    "EventRegistration",
    "EventRouter",
    "CallbackHandler",
    "EventHandlerBuilder",
    "EventBinding",
    "CommandKind",
    "PatchCommand",
    "PatchBatch",
    "BindingType",
    "ClientEventBinding",
    "EventBuilder",
    "Bindable",
    "BindingEntry",
    "BindingManager",
    "to_display",
    "is_rich",
]

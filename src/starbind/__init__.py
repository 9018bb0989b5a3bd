"""
StarBind - Reactive bindings and action routing for server-driven UIs

Routes named actions from a remote UI surface to registered handlers,
decoding typed parameters on the fly, and turns writes to bound server-side
values into targeted UI patches.
"""

from .core import (
    ACTION_KEY,
    Bindable,
    BindingEntry,
    BindingManager,
    BindingType,
    CallbackHandler,
    ClientEventBinding,
    CommandKind,
    CompositeDecoder,
    DecodeError,
    EventBinding,
    EventBuilder,
    EventCodec,
    EventContext,
    EventHandler,
    EventHandlerBuilder,
    EventRegistration,
    EventRouter,
    ParameterBag,
    ParameterSchema,
    PatchBatch,
    PatchCommand,
    StarBindError,
    array_selector,
    selectors,
    to_display,
    is_rich,
)
from .app import BasePage, Element, EventSupport, Page, PageUpdate, StarBindSettings, configure_logging
from .adapters import DatastarSink

__all__ = [
    # Core
    'ACTION_KEY',
    'Bindable',
    'BindingEntry',
    'BindingManager',
    'BindingType',
    'CallbackHandler',
    'ClientEventBinding',
    'CommandKind',
    'CompositeDecoder',
    'DecodeError',
    'EventBinding',
    'EventBuilder',
    'EventCodec',
    'EventContext',
    'EventHandler',
    'EventHandlerBuilder',
    'EventRegistration',
    'EventRouter',
    'ParameterBag',
    'ParameterSchema',
    'PatchBatch',
    'PatchCommand',
    'StarBindError',
    'array_selector',
    'selectors',
    'to_display',
    'is_rich',

    # Host layer
    'BasePage',
    'Element',
    'EventSupport',
    'Page',
    'PageUpdate',
    'StarBindSettings',
    'configure_logging',

    # Adapters
    'DatastarSink',
]

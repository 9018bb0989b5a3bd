"""
Datastar sink

Renders page updates into Datastar server-sent events. Each patch command
becomes one ``datastar-patch-elements`` event; client event bindings are
published as signals under the ``starbind`` namespace for the client-side
wiring to pick up.
"""

import html
import logging
from typing import Any, List

from datastar_py import SSE_HEADERS
from datastar_py import ServerSentEventGenerator as SSE
from datastar_py.consts import ElementPatchMode
from fastcore.xml import to_xml

from ..app.page import PageUpdate
from ..core import CommandKind, EventBuilder, PatchCommand, is_rich

logger = logging.getLogger(__name__)

SIGNALS_NAMESPACE = "starbind"

__all__ = ["DatastarSink", "SSE_HEADERS", "render_value", "render_markup"]


def render_value(value: Any) -> str:
    """Markup for a display value: components via `to_xml`, everything else escaped text."""
    if value is None:
        return ""
    if is_rich(value):
        return to_xml(value)
    return html.escape(str(value))


def render_markup(document: Any) -> str:
    """Markup for an appended document: components via `to_xml`, strings taken as markup."""
    if is_rich(document):
        return to_xml(document)
    return "" if document is None else str(document)


class DatastarSink:
    """
    Page sink that queues Datastar SSE events.

    The transport drains the queue with `drain()` and writes the events to
    the open event stream (with `SSE_HEADERS`).
    """

    def __init__(self, page_selector: str = "body"):
        self.page_selector = page_selector
        self._events: List[str] = []

    def __call__(self, update: PageUpdate) -> None:
        self._events.extend(self.render(update))

    def render(self, update: PageUpdate) -> List[str]:
        events = []
        if update.clear:
            events.append(SSE.patch_elements("", selector=self.page_selector, mode=ElementPatchMode.INNER))
        if update.commands is not None:
            events.extend(self._render_command(command) for command in update.commands)
        if update.events is not None and len(update.events):
            events.append(self._render_bindings(update.page, update.events))
        logger.debug("Rendered %d SSE event(s) for %s", len(events), update.page)
        return events

    def _render_command(self, command: PatchCommand) -> str:
        selector = command.selector or self.page_selector
        if command.kind == CommandKind.SET:
            return SSE.patch_elements(render_value(command.value), selector=selector, mode=ElementPatchMode.INNER)
        if command.kind in (CommandKind.APPEND, CommandKind.APPEND_INLINE):
            return SSE.patch_elements(render_markup(command.value), selector=selector, mode=ElementPatchMode.APPEND)
        if command.kind == CommandKind.CLEAR:
            return SSE.patch_elements("", selector=selector, mode=ElementPatchMode.INNER)
        if command.kind == CommandKind.REMOVE:
            return SSE.patch_elements(selector=selector, mode=ElementPatchMode.REMOVE)
        raise ValueError(f"Unknown command kind: {command.kind!r}")

    def _render_bindings(self, page: str, events: EventBuilder) -> str:
        bindings = [
            {"type": binding.binding_type.value, "selector": binding.selector, "data": binding.data}
            for binding in events.bindings
        ]
        return SSE.patch_signals({SIGNALS_NAMESPACE: {page: bindings}})

    def drain(self) -> List[str]:
        """Return and clear the queued events."""
        events, self._events = self._events, []
        return events

    def __len__(self) -> int:
        return len(self._events)

"""
Command and event builders.

A `PatchBatch` is an ordered list of patch commands delivered to the client
in one message. An `EventBuilder` collects the client-side interaction
bindings (which UI interaction fires which action) sent alongside it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class CommandKind(str, Enum):
    SET = "set"
    APPEND = "append"
    APPEND_INLINE = "append_inline"
    CLEAR = "clear"
    REMOVE = "remove"


@dataclass(frozen=True)
class PatchCommand:
    """One instruction for the remote surface."""
    kind: CommandKind
    selector: Optional[str]
    value: Any = None


class PatchBatch:
    """Ordered collection of patch commands."""

    def __init__(self, commands: Optional[List[PatchCommand]] = None):
        self._commands: List[PatchCommand] = list(commands or [])

    def set(self, selector: str, value: Any) -> "PatchBatch":
        """Replace the display value at `selector`."""
        self._commands.append(PatchCommand(CommandKind.SET, selector, value))
        return self

    def append(self, document: Any, selector: Optional[str] = None) -> "PatchBatch":
        """Append a document (markup or a component) under `selector`, or at the page root."""
        self._commands.append(PatchCommand(CommandKind.APPEND, selector, document))
        return self

    def append_inline(self, selector: str, markup: Any) -> "PatchBatch":
        """Append inline markup (or a component) under `selector`."""
        self._commands.append(PatchCommand(CommandKind.APPEND_INLINE, selector, markup))
        return self

    def clear(self, selector: str) -> "PatchBatch":
        """Remove every child of `selector`."""
        self._commands.append(PatchCommand(CommandKind.CLEAR, selector))
        return self

    def remove(self, selector: str) -> "PatchBatch":
        """Remove the element at `selector`."""
        self._commands.append(PatchCommand(CommandKind.REMOVE, selector))
        return self

    def extend(self, other: "PatchBatch") -> "PatchBatch":
        self._commands.extend(other.commands)
        return self

    @property
    def commands(self) -> List[PatchCommand]:
        return list(self._commands)

    def __iter__(self) -> Iterator[PatchCommand]:
        return iter(list(self._commands))

    def __len__(self) -> int:
        return len(self._commands)

    def __bool__(self) -> bool:
        # An empty batch is still a batch; callers test for None.
        return True

    def __repr__(self) -> str:
        return f"PatchBatch({self._commands})"


class BindingType(str, Enum):
    """Client-side interactions that can fire an action."""
    ACTIVATING = "activating"
    RIGHT_CLICKING = "right_clicking"
    DOUBLE_CLICKING = "double_clicking"
    MOUSE_ENTERED = "mouse_entered"
    MOUSE_EXITED = "mouse_exited"
    VALUE_CHANGED = "value_changed"
    FOCUS_GAINED = "focus_gained"
    FOCUS_LOST = "focus_lost"
    KEY_DOWN = "key_down"


@dataclass(frozen=True)
class ClientEventBinding:
    binding_type: BindingType
    selector: str
    data: Dict[str, Any] = field(default_factory=dict)


class EventBuilder:
    """Collects client-side event bindings for one update."""

    def __init__(self):
        self._bindings: List[ClientEventBinding] = []

    def add_event_binding(self, binding_type: BindingType, selector: str, data: Optional[Dict[str, Any]] = None) -> "EventBuilder":
        self._bindings.append(ClientEventBinding(BindingType(binding_type), selector, dict(data or {})))
        return self

    @property
    def bindings(self) -> List[ClientEventBinding]:
        return list(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __bool__(self) -> bool:
        return True

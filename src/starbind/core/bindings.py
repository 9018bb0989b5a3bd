"""
UI Bindings

A `Bindable` is a reactive cell: writing a new value to it produces a patch
for the UI location it is bound to. The `BindingManager` owned by each
element or page maps binding names to selectors and turns change
notifications into patch batches.

Bindings are declared explicitly:

    class Scoreboard(Element):
        def ui_bindings(self):
            return {"score": "#Score"}

        def on_create(self, root, commands, events):
            self.score.set("10", commands)

or, without an element, ``score = manager.bind("score", "#Score")``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, Optional, Tuple, TypeVar, Union

from fastcore.xml import FT

from .commands import PatchBatch
from .errors import StarBindError
from .selectors import selectors

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()

UpdateCallback = Callable[[PatchBatch], None]
BindingDeclarations = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def is_rich(value: Any) -> bool:
    """True for values the surface can render as markup (FastHTML components)."""
    return isinstance(value, FT) or hasattr(value, "__ft__")


def to_display(value: Any) -> Any:
    """Display representation of a bound value: None -> "", components unchanged, else str()."""
    if value is None:
        return ""
    if is_rich(value):
        return value
    return str(value)


class Bindable(Generic[T]):
    """Reactive cell holding the current value of one binding."""

    def __init__(self, manager: "BindingManager", name: str, initial: Optional[T] = None):
        self._manager = manager
        self._name = name
        self._value = initial

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> Optional[T]:
        return self._value

    def get(self) -> Optional[T]:
        return self._value

    def set(self, value: Optional[T], batch: Optional[PatchBatch] = None) -> bool:
        """
        Store `value` and patch the bound UI location if it changed.

        With `batch` the patch is appended to it instead of being sent, so it
        travels with the commands that create the element. Returns whether
        the value changed.
        """
        old = self._value
        if value is old or (old is not None and old == value):
            return False
        self._value = value
        self._manager.notify_value_changed(self._name, batch)
        return True

    def to_display(self) -> Any:
        return to_display(self._value)

    def __str__(self) -> str:
        return "" if self._value is None else str(self._value)

    def __repr__(self) -> str:
        return f"Bindable({self._name!r}, {self._value!r})"


@dataclass
class BindingEntry:
    name: str
    selector: str
    bindable: Bindable
    target: Any = None


class BindingManager:
    """
    Maps binding names to selectors and delivers patches for changed values.

    Not thread-safe: a manager belongs to one element or page and its
    mutations must be serialized by the host.
    """

    def __init__(self, update_callback: UpdateCallback):
        self._update_callback = update_callback
        self._bindings: Dict[str, BindingEntry] = {}
        self._root_selector = ""

    @property
    def root_selector(self) -> str:
        return self._root_selector

    def set_root_selector(self, root_selector: Optional[str]) -> None:
        """Scope future patches under `root_selector`. Nothing is re-sent."""
        self._root_selector = root_selector or ""

    def bind(self, name: str, selector: str, target: Any = None, initial: Any = None) -> Bindable:
        """Declare a binding and return its cell; binding an existing name reuses the cell."""
        entry = self._bindings.get(name)
        if entry is not None:
            if entry.selector != selector:
                logger.debug("Binding %r moved from %r to %r", name, entry.selector, selector)
                entry.selector = selector
            return entry.bindable

        bindable: Bindable = Bindable(self, name, initial)
        self._bindings[name] = BindingEntry(name, selector, bindable, target)
        return bindable

    def scan_and_bind(self, target: Any) -> List[str]:
        """
        Bind every declaration from ``target.ui_bindings()`` and assign each
        cell onto `target` under the binding name. Safe to call repeatedly.
        Raises `StarBindError` when `target` already has a non-binding
        attribute of that name.
        """
        declare = getattr(target, "ui_bindings", None)
        if not callable(declare):
            return []
        declarations = declare() or {}
        items = declarations.items() if isinstance(declarations, Mapping) else declarations

        names = []
        for name, selector in items:
            current = getattr(target, name, _MISSING)
            if current is not _MISSING and not isinstance(current, Bindable):
                raise StarBindError(
                    f"Binding {name!r} collides with existing attribute {type(target).__name__}.{name}"
                )
            bindable = self.bind(name, selector, target)
            if current is not bindable:
                setattr(target, name, bindable)
            names.append(name)
        return names

    def notify_value_changed(self, name: str, batch: Optional[PatchBatch] = None) -> None:
        """Patch the binding `name`: append to `batch`, or send a batch of one right away."""
        entry = self._bindings.get(name)
        if entry is None:
            logger.debug("Ignoring change notification for unknown binding %r", name)
            return
        if batch is None:
            batch = PatchBatch()
            self._apply_binding(batch, entry)
            self._update_callback(batch)
        else:
            self._apply_binding(batch, entry)

    def update_all(self) -> PatchBatch:
        """Send the current value of every binding in one batch."""
        batch = PatchBatch()
        for entry in list(self._bindings.values()):
            self._apply_binding(batch, entry)
        self._update_callback(batch)
        return batch

    def build_selector(self, selector: str) -> str:
        """Absolute selector for a binding selector under the current root."""
        if not self._root_selector:
            return selector
        return selectors(self._root_selector, selector)

    def _apply_binding(self, batch: PatchBatch, entry: BindingEntry) -> None:
        batch.set(self.build_selector(entry.selector), entry.bindable.to_display())

    def entry(self, name: str) -> Optional[BindingEntry]:
        return self._bindings.get(name)

    @property
    def names(self) -> List[str]:
        return list(self._bindings)

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

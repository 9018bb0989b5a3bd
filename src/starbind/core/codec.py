"""
Event Codec

Holds one decoder per parameter key and compiles them into a single
composite decoder for inbound action payloads.

Every handler declares the keys it wants decoded. All declarations share one
key space because every client event arrives in the same envelope: the
reserved ``Action`` string plus whatever keys the bound UI interaction sends.
The composite decoder is a pydantic model built with ``create_model`` and is
rebuilt lazily, on the first decode after the key set changed.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from pydantic import ConfigDict, Field, ValidationError, create_model

from .errors import DecodeError

logger = logging.getLogger(__name__)

ACTION_KEY = "Action"

RawPayload = Union[str, bytes, bytearray, Mapping[str, Any]]


@dataclass(frozen=True)
class ParameterSchema:
    """A parameter key and the type its wire value is decoded into."""
    key: str
    decoder: Any = str


class ParameterBag:
    """Decoded parameters of one inbound event."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data = dict(data or {})

    def __getattr__(self, name: str) -> Any:
        """Allow accessing parameters as attributes."""
        if name.startswith("_"):
            raise AttributeError(name)
        return self._data.get(name)

    def __getitem__(self, key: str) -> Any:
        return self._data.get(key)

    def get(self, key: str, default: Any = None) -> Any:
        """Get value with default."""
        return self._data.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ParameterBag):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ParameterBag({self._data})"

    @property
    def action(self) -> Optional[str]:
        """The action name, or None when the payload carried none."""
        return self._data.get(ACTION_KEY)

    @property
    def raw_data(self) -> Dict[str, Any]:
        """Access a copy of the underlying dictionary."""
        return dict(self._data)


class CompositeDecoder:
    """Decoder for one snapshot of the registered key set."""

    def __init__(self, schemas: Mapping[str, ParameterSchema], extra: str = "ignore"):
        self.keys = frozenset(schemas)
        self.extra = extra
        # Wire keys are not always identifiers ("@Value", "Row.Index"), so each
        # key gets a synthetic field name and the key itself becomes the alias.
        self._field_keys: Dict[str, str] = {}
        fields: Dict[str, Any] = {}
        for index, (key, schema) in enumerate(sorted(schemas.items())):
            name = f"p{index}"
            self._field_keys[name] = key
            fields[name] = (Optional[schema.decoder], Field(default=None, alias=key))
        self.model = create_model(
            "EventData",
            __config__=ConfigDict(extra=extra, arbitrary_types_allowed=True),
            **fields,
        )

    def decode(self, raw: RawPayload) -> ParameterBag:
        """Decode a JSON document or an already parsed mapping."""
        try:
            if isinstance(raw, (str, bytes, bytearray)):
                instance = self.model.model_validate_json(raw)
            elif isinstance(raw, Mapping):
                instance = self.model.model_validate(dict(raw))
            else:
                raise DecodeError(f"Unsupported payload type: {type(raw).__name__}")
        except ValidationError as e:
            raise DecodeError(f"Invalid event payload: {e.error_count()} error(s)", e.errors()) from e

        data = {self._field_keys[name]: getattr(instance, name) for name in instance.model_fields_set}
        # A null action counts as no action
        if data.get(ACTION_KEY, "") is None:
            del data[ACTION_KEY]
        return ParameterBag(data)

    def __repr__(self) -> str:
        return f"CompositeDecoder(keys={sorted(self.keys)}, extra={self.extra!r})"


class EventCodec:
    """
    Registry of parameter decoders keyed by parameter name.

    The registry stores at most one decoder per key; a later registration for
    the same key replaces the earlier one. Removal is by key, so callers must
    unregister exactly the keys they registered. The reserved ``Action`` key
    is registered at construction and cannot be removed.
    """

    def __init__(self, extra: str = "ignore"):
        if extra not in ("ignore", "forbid"):
            raise ValueError(f"extra must be 'ignore' or 'forbid', got {extra!r}")
        self.extra = extra
        self._schemas: Dict[str, ParameterSchema] = {ACTION_KEY: ParameterSchema(ACTION_KEY, str)}
        self._lock = threading.RLock()
        self._decoder: Optional[CompositeDecoder] = None
        self._dirty = True

    def register(self, schema: Union[ParameterSchema, str], decoder: Any = None) -> None:
        """Register (or replace) the decoder for a key."""
        if not isinstance(schema, ParameterSchema):
            schema = ParameterSchema(schema, str if decoder is None else decoder)
        if schema.key == ACTION_KEY:
            logger.debug("Ignoring registration for reserved key %r", ACTION_KEY)
            return
        with self._lock:
            current = self._schemas.get(schema.key)
            if current == schema:
                return
            if current is not None:
                logger.warning(
                    "Parameter key %r re-registered with a different decoder (%r -> %r)",
                    schema.key, current.decoder, schema.decoder,
                )
            self._schemas[schema.key] = schema
            self._dirty = True

    def unregister(self, key: str) -> None:
        """Remove the decoder for `key`. Absent keys are ignored."""
        if key == ACTION_KEY:
            return
        with self._lock:
            if self._schemas.pop(key, None) is not None:
                self._dirty = True

    def get_event_codec(self) -> CompositeDecoder:
        """Return the composite decoder, rebuilding it if the key set changed."""
        with self._lock:
            if self._dirty or self._decoder is None:
                self._decoder = CompositeDecoder(dict(self._schemas), extra=self.extra)
                self._dirty = False
                logger.debug("Rebuilt event decoder for keys %s", sorted(self._decoder.keys))
            return self._decoder

    def decode(self, raw: RawPayload) -> ParameterBag:
        """Decode a raw payload with the current composite decoder."""
        return self.get_event_codec().decode(raw)

    @property
    def keys(self) -> frozenset:
        with self._lock:
            return frozenset(self._schemas)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._schemas

    def schema(self, key: str) -> Optional[ParameterSchema]:
        with self._lock:
            return self._schemas.get(key)


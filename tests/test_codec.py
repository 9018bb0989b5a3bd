"""
Tests for the event codec: per-key decoders compiled into one composite decoder.
"""

import json

import pytest

from starbind import ACTION_KEY, DecodeError, EventCodec, ParameterBag, ParameterSchema


class TestParameterBag:
    """ParameterBag accessors"""

    def test_empty_bag(self):
        bag = ParameterBag()
        assert bag.get("missing") is None
        assert "missing" not in bag
        assert bag.action is None
        assert len(bag) == 0

    def test_access_styles(self):
        bag = ParameterBag({"Action": "save", "name": "John", "age": 30})
        assert bag.name == "John"
        assert bag["age"] == 30
        assert bag.get("missing", "fallback") == "fallback"
        assert bag.missing is None
        assert bag.action == "save"
        assert set(bag) == {"Action", "name", "age"}

    def test_raw_data_is_a_copy(self):
        bag = ParameterBag({"a": 1})
        bag.raw_data["a"] = 2
        assert bag["a"] == 1

    def test_equality(self):
        assert ParameterBag({"a": 1}) == ParameterBag({"a": 1})
        assert ParameterBag({"a": 1}) == {"a": 1}


class TestEventCodec:
    """Registration, lazy rebuild and decoding"""

    def test_action_always_decoded(self, codec):
        bag = codec.decode('{"Action": "tab-1-selected"}')
        assert bag == {"Action": "tab-1-selected"}
        assert ACTION_KEY in codec.keys

    def test_action_cannot_be_unregistered(self, codec):
        codec.unregister(ACTION_KEY)
        assert ACTION_KEY in codec
        assert codec.decode({"Action": "x"}).action == "x"

    def test_action_cannot_be_overridden(self, codec):
        codec.register(ACTION_KEY, int)
        assert codec.schema(ACTION_KEY).decoder is str

    def test_action_must_be_a_string(self, codec):
        with pytest.raises(DecodeError):
            codec.decode('{"Action": 5}')

    def test_null_action_counts_as_missing(self, codec):
        bag = codec.decode('{"Action": null}')
        assert ACTION_KEY not in bag
        assert bag.action is None

    def test_payload_without_action(self, codec):
        codec.register("Value", int)
        bag = codec.decode('{"Value": 3}')
        assert ACTION_KEY not in bag
        assert bag["Value"] == 3

    def test_registered_keys_are_typed(self, codec):
        codec.register("Count", int)
        codec.register(ParameterSchema("Tags", list[str]))
        bag = codec.decode(json.dumps({"Action": "a", "Count": "7", "Tags": ["x", "y"]}))
        assert bag["Count"] == 7
        assert bag["Tags"] == ["x", "y"]

    def test_keys_that_are_not_identifiers(self, codec):
        codec.register("@Value", float)
        codec.register("Row.Index", int)
        bag = codec.decode({"Action": "a", "@Value": "1.5", "Row.Index": 2})
        assert bag["@Value"] == 1.5
        assert bag["Row.Index"] == 2

    def test_only_present_keys_in_bag(self, codec):
        codec.register("Count", int)
        bag = codec.decode({"Action": "a"})
        assert "Count" not in bag

    def test_null_value_is_kept(self, codec):
        codec.register("Count", int)
        bag = codec.decode('{"Action": "a", "Count": null}')
        assert "Count" in bag
        assert bag["Count"] is None

    def test_malformed_json(self, codec):
        with pytest.raises(DecodeError):
            codec.decode("{not json")

    def test_non_object_payload(self, codec):
        with pytest.raises(DecodeError):
            codec.decode("[1, 2, 3]")

    def test_unsupported_payload_type(self, codec):
        with pytest.raises(DecodeError):
            codec.decode(42)

    def test_invalid_value_reports_diagnostics(self, codec):
        codec.register("Count", int)
        with pytest.raises(DecodeError) as exc_info:
            codec.decode('{"Action": "a", "Count": "many"}')
        errors = exc_info.value.errors()
        assert errors
        assert errors[0]["loc"] == ("Count",)

    def test_unknown_keys_ignored_by_default(self, codec):
        bag = codec.decode('{"Action": "a", "Stray": 1}')
        assert "Stray" not in bag

    def test_unknown_keys_rejected_when_forbidden(self):
        codec = EventCodec(extra="forbid")
        with pytest.raises(DecodeError):
            codec.decode('{"Action": "a", "Stray": 1}')

    def test_invalid_extra_policy(self):
        with pytest.raises(ValueError):
            EventCodec(extra="allow")

    def test_register_unregister_sequence(self):
        """Registering A then B and dropping A leaves a decoder for B and Action only"""
        codec = EventCodec(extra="forbid")
        codec.register("A", int)
        codec.register("B", int)
        codec.unregister("A")

        bag = codec.decode('{"Action": "x", "B": 2}')
        assert bag == {"Action": "x", "B": 2}
        with pytest.raises(DecodeError):
            codec.decode('{"Action": "x", "A": 1}')

        lenient = EventCodec()
        lenient.register("A", int)
        lenient.register("B", int)
        lenient.unregister("A")
        assert "A" not in lenient.decode('{"Action": "x", "A": 1, "B": 2}')

    def test_unregister_absent_key_is_noop(self, codec):
        decoder = codec.get_event_codec()
        codec.unregister("Nope")
        codec.unregister("Nope")
        assert codec.get_event_codec() is decoder

    def test_decoder_rebuilt_only_when_keys_change(self, codec):
        first = codec.get_event_codec()
        assert codec.get_event_codec() is first

        codec.register("Count", int)
        second = codec.get_event_codec()
        assert second is not first
        assert second.keys == {ACTION_KEY, "Count"}

        codec.register("Count", int)
        assert codec.get_event_codec() is second

    def test_last_registration_wins(self, codec, caplog):
        codec.register("Value", int)
        with caplog.at_level("WARNING", logger="starbind.core.codec"):
            codec.register("Value", str)
        assert codec.schema("Value").decoder is str
        assert codec.decode('{"Value": "abc"}')["Value"] == "abc"
        assert "re-registered" in caplog.text

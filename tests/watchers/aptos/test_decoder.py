"""Tests for Aptos event decoding."""

import pytest
from datetime import datetime, timezone

from guardian.common.chains import ChainID
from guardian.common.errors import DecodeError
from guardian.common.publication import tx_hash_from_sequence
from guardian.watchers.aptos.decoder import (
    decode_event_data,
    envelope_sequence,
    parse_hex,
    parse_uint,
)


def _data(**overrides) -> dict:
    data = {
        "sender": "0x01",
        "payload": "0xdeadbeef",
        "ts": "1664400000",
        "nonce": "42",
        "sequence": "7",
        "consistency_level": 0,
    }
    data.update(overrides)
    return data


class TestDecodeEventData:

    def test_valid_event(self):
        pub = decode_event_data(_data(), 7)
        assert pub.sequence == 7
        assert pub.nonce == 42
        assert pub.consistency_level == 0
        assert pub.payload == b"\xde\xad\xbe\xef"
        assert pub.emitter_chain == ChainID.APTOS
        assert pub.emitter_address == b"\x01" + b"\x00" * 31
        assert pub.timestamp == datetime.fromtimestamp(1664400000, tz=timezone.utc)
        assert pub.tx_hash == tx_hash_from_sequence(7)

    def test_numbers_accepted_as_json_integers(self):
        pub = decode_event_data(_data(ts=1664400000, nonce=42, sequence=7, consistency_level="1"), 7)
        assert pub.nonce == 42
        assert pub.consistency_level == 1

    def test_tx_hash_uses_envelope_sequence(self):
        pub = decode_event_data(_data(sequence="7"), 9)
        assert pub.sequence == 7
        assert pub.tx_hash == tx_hash_from_sequence(9)

    def test_empty_payload(self):
        assert decode_event_data(_data(payload="0x"), 7).payload == b""

    @pytest.mark.parametrize("field", [
        "sender", "payload", "ts", "nonce", "sequence", "consistency_level",
    ])
    def test_missing_field(self, field):
        data = _data()
        del data[field]
        with pytest.raises(DecodeError) as exc:
            decode_event_data(data, 7)
        assert exc.value.field == field

    def test_first_failing_field_reported(self):
        data = _data(payload="0xzz")
        del data["nonce"]
        with pytest.raises(DecodeError) as exc:
            decode_event_data(data, 7)
        assert exc.value.field == "payload"

    @pytest.mark.parametrize("field,value", [
        ("sender", "0xabc"),
        ("sender", "01"),
        ("payload", "0xnothex"),
        ("payload", 1234),
        ("ts", "-5"),
        ("ts", "soon"),
        ("nonce", str(2**32)),
        ("nonce", True),
        ("sequence", str(2**64)),
        ("consistency_level", 256),
    ])
    def test_unparsable_field(self, field, value):
        with pytest.raises(DecodeError) as exc:
            decode_event_data(_data(**{field: value}), 7)
        assert exc.value.field == field

    def test_non_object_data(self):
        with pytest.raises(DecodeError) as exc:
            decode_event_data(["not", "an", "object"], 7)
        assert exc.value.field == "data"

    def test_null_field_counts_as_missing(self):
        with pytest.raises(DecodeError, match="missing"):
            decode_event_data(_data(ts=None), 7)


class TestEnvelopeSequence:

    def test_string_sequence(self):
        assert envelope_sequence({"sequence_number": "5", "data": {}}) == 5

    def test_integer_sequence(self):
        assert envelope_sequence({"sequence_number": 5}) == 5

    def test_missing(self):
        assert envelope_sequence({"data": {}}) is None

    def test_unparsable(self):
        assert envelope_sequence({"sequence_number": "five"}) is None

    def test_non_object_record(self):
        assert envelope_sequence("5") is None


class TestPrimitives:

    def test_parse_uint_bounds(self):
        assert parse_uint("255", "x", 255) == 255
        with pytest.raises(DecodeError):
            parse_uint(256, "x", 255)

    def test_parse_uint_rejects_non_ascii_digits(self):
        with pytest.raises(DecodeError):
            parse_uint("٢", "x")

    def test_parse_hex(self):
        assert parse_hex("0x00ff", "x") == b"\x00\xff"

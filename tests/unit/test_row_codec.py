"""
Tests for the length-prefixed row encoding in planetscale.utils.row_codec.
"""

import base64

import pytest

from planetscale.exc import DecodeError
from planetscale.models.base import Row
from planetscale.utils.row_codec import decode_row, encode_row


def _row(lengths, blob: bytes):
    return Row(lengths=lengths, values=base64.b64encode(blob).decode("ascii"))


class TestDecodeRow:
    def test_decodes_values_in_order(self):
        row = _row(["1", "5", "3"], b"1alice123")
        assert decode_row(row) == ["1", "alice", "123"]

    def test_round_trips_non_null_strings(self):
        values = ["", "hello", "ünïcödé", "with\nnewline", "12345678901234567890"]
        assert decode_row(encode_row(values)) == values

    def test_negative_length_is_null_and_does_not_move_offset(self):
        row = _row(["2", "-1", "3"], b"abxyz")
        assert decode_row(row) == ["ab", None, "xyz"]

    def test_any_negative_length_is_null(self):
        row = _row(["-7", "1"], b"z")
        assert decode_row(row) == [None, "z"]

    def test_absent_values_with_only_nulls(self):
        row = Row(lengths=["-1", "-1"], values=None)
        assert decode_row(row) == [None, None]

    def test_empty_strings_consume_no_bytes(self):
        row = Row(lengths=["0", "0"], values=None)
        assert decode_row(row) == ["", ""]

    def test_lengths_count_bytes_not_characters(self):
        encoded = "é".encode("utf-8")
        row = _row([str(len(encoded)), "1"], encoded + b"x")
        assert decode_row(row) == ["é", "x"]

    def test_binary_values_are_recoverable(self):
        raw = b"\xff\x00\xfe"
        (value,) = decode_row(_row(["3"], raw))
        assert value.encode("utf-8", "surrogateescape") == raw

    def test_overrun_raises_decode_error(self):
        row = _row(["2", "5"], b"abcd")
        with pytest.raises(DecodeError) as exc_info:
            decode_row(row)
        assert exc_info.value.context["size"] == 4

    def test_unread_bytes_raise_decode_error(self):
        row = _row(["2"], b"abcd")
        with pytest.raises(DecodeError):
            decode_row(row)

    def test_non_numeric_length_raises_decode_error(self):
        row = _row(["two"], b"ab")
        with pytest.raises(DecodeError):
            decode_row(row)

    def test_invalid_base64_raises_decode_error(self):
        row = Row(lengths=["1"], values="not base64!")
        with pytest.raises(DecodeError):
            decode_row(row)

    def test_field_count_mismatch_raises_decode_error(self):
        row = _row(["1", "1"], b"ab")
        with pytest.raises(DecodeError):
            decode_row(row, field_count=3)

    def test_field_count_match(self):
        row = _row(["1", "1"], b"ab")
        assert decode_row(row, field_count=2) == ["a", "b"]


class TestEncodeRow:
    def test_null_encodes_as_negative_length(self):
        row = encode_row(["a", None, "bc"])
        assert row.lengths == ["1", "-1", "2"]
        assert base64.b64decode(row.values) == b"abc"

    def test_bytes_are_used_as_is(self):
        row = encode_row([b"\x01\x02"])
        assert row.lengths == ["2"]
        assert base64.b64decode(row.values) == b"\x01\x02"

    def test_all_null_row_has_no_values(self):
        assert encode_row([None]).values is None

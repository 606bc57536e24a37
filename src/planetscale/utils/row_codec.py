"""
Length-prefixed row encoding used by the gateway.

Each row carries a list of per-column byte lengths (as decimal strings) and one
base64 blob holding every non-NULL value back to back. A negative length marks
a NULL column and consumes no bytes.
"""

import base64
import binascii
import logging
from typing import List, Optional, Sequence, Union

from planetscale.exc import DecodeError
from planetscale.models.base import Row

logger = logging.getLogger(__name__)

NULL_LENGTH = -1

# Binary columns are not valid UTF-8; surrogateescape keeps their bytes recoverable
# through value.encode("utf-8", "surrogateescape").
_TEXT_ERRORS = "surrogateescape"


def _decode_blob(values: Optional[str]) -> bytes:
    if not values:
        return b""
    try:
        return base64.b64decode(values, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError("Row values are not valid base64") from e


def _parse_length(raw) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise DecodeError(
            f"Invalid row length {raw!r}", context={"length": raw}
        ) from e


def decode_row(row, field_count: Optional[int] = None) -> List[Optional[str]]:
    """
    Split a row's value blob into one raw string per column.

    Args:
        row: A Row with `lengths` and `values`
        field_count: If given, the number of fields the row must describe

    Returns:
        One entry per length; None where the column is NULL

    Raises:
        DecodeError: If the blob is not base64, a length is not an integer, the
            lengths run past the end of the blob or leave bytes unread, or the
            number of lengths does not match field_count
    """
    lengths = row.lengths or []
    if field_count is not None and len(lengths) != field_count:
        raise DecodeError(
            f"Row has {len(lengths)} values but the result has {field_count} fields",
            context={"lengths": len(lengths), "fields": field_count},
        )

    data = _decode_blob(row.values)
    offset = 0
    decoded: List[Optional[str]] = []
    for raw_length in lengths:
        width = _parse_length(raw_length)
        if width < 0:
            decoded.append(None)
            continue
        end = offset + width
        if end > len(data):
            raise DecodeError(
                f"Row length {width} at offset {offset} overruns {len(data)} bytes of values",
                context={"offset": offset, "length": width, "size": len(data)},
            )
        decoded.append(data[offset:end].decode("utf-8", _TEXT_ERRORS))
        offset = end

    if offset != len(data):
        raise DecodeError(
            f"Row lengths cover {offset} of {len(data)} bytes of values",
            context={"offset": offset, "size": len(data)},
        )
    return decoded


def encode_row(values: Sequence[Optional[Union[str, bytes]]]) -> Row:
    """Pack column values into a Row the way the gateway does."""
    lengths = []
    chunks = []
    for value in values:
        if value is None:
            lengths.append(str(NULL_LENGTH))
            continue
        if isinstance(value, str):
            value = value.encode("utf-8", _TEXT_ERRORS)
        lengths.append(str(len(value)))
        chunks.append(value)

    blob = b"".join(chunks)
    return Row(
        lengths=lengths,
        values=base64.b64encode(blob).decode("ascii") if blob else None,
    )

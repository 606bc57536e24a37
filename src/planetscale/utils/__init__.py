"""
Row decoding and type conversion utilities.
"""

from planetscale.utils.conversion import SqlType, SqlTypeConverter
from planetscale.utils.row_codec import decode_row, encode_row

__all__ = [
    "SqlType",
    "SqlTypeConverter",
    "decode_row",
    "encode_row",
]

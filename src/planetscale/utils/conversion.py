"""
Type conversion utilities for the PlanetScale client.

Row values arrive from the gateway as text. This module maps the Vitess type tag
of each column to the Python type a decoded value is cast to.
"""

import logging
import re
from typing import Callable, Dict, Optional

from planetscale.exc import DecodeError

logger = logging.getLogger(__name__)


class SqlType:
    """Vitess type tags as they appear in the `type` attribute of a result field."""

    # Integer types that always fit a native int
    INT8 = "INT8"
    INT16 = "INT16"
    INT24 = "INT24"
    INT32 = "INT32"
    UINT8 = "UINT8"
    UINT16 = "UINT16"
    UINT24 = "UINT24"
    UINT32 = "UINT32"
    YEAR = "YEAR"

    # Kept as text so no digits are lost in transit
    INT64 = "INT64"
    UINT64 = "UINT64"

    # Floating point types
    DECIMAL = "DECIMAL"
    FLOAT32 = "FLOAT32"
    FLOAT64 = "FLOAT64"

    # Date/Time types
    DATE = "DATE"
    TIME = "TIME"
    DATETIME = "DATETIME"
    TIMESTAMP = "TIMESTAMP"

    # Binary types
    BLOB = "BLOB"
    BIT = "BIT"
    VARBINARY = "VARBINARY"
    BINARY = "BINARY"

    JSON = "JSON"


INTEGER_TYPES = frozenset(
    [
        SqlType.INT8,
        SqlType.INT16,
        SqlType.INT24,
        SqlType.INT32,
        SqlType.UINT8,
        SqlType.UINT16,
        SqlType.UINT24,
        SqlType.UINT32,
        SqlType.YEAR,
    ]
)

FLOAT_TYPES = frozenset([SqlType.DECIMAL, SqlType.FLOAT32, SqlType.FLOAT64])

BINARY_TYPES = frozenset(
    [SqlType.BLOB, SqlType.BIT, SqlType.VARBINARY, SqlType.BINARY]
)

# Plain decimal literals only: no whitespace, underscores, nan or inf
_INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")
_FLOAT_LITERAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _to_int(value: str) -> int:
    if not _INTEGER_LITERAL.fullmatch(value):
        raise ValueError(f"not an integer literal: {value!r}")
    return int(value)


def _to_float(value: str) -> float:
    if not _FLOAT_LITERAL.fullmatch(value):
        raise ValueError(f"not a decimal literal: {value!r}")
    return float(value)


class SqlTypeConverter:
    """
    Utility class for converting gateway text values to Python types.

    Type tags are matched exactly. Every tag not listed in TYPE_MAPPING,
    including tags this client has never heard of, passes the original string
    through unchanged.
    """

    TYPE_MAPPING: Dict[str, Callable[[str], object]] = {
        **{sql_type: _to_int for sql_type in INTEGER_TYPES},
        **{sql_type: _to_float for sql_type in FLOAT_TYPES},
    }

    @staticmethod
    def convert_value(
        value: Optional[str],
        sql_type: str,
        column_name: Optional[str] = None,
    ) -> object:
        """
        Convert a string value to the appropriate Python type based on its type tag.

        Args:
            value: The raw string value, or None for SQL NULL
            sql_type: The Vitess type tag (e.g. 'INT32', 'FLOAT64')
            column_name: The name of the column being converted, used in errors

        Returns:
            The converted value, or None if value is None

        Raises:
            DecodeError: If a numeric column holds text that is not a plain
                decimal literal
        """

        # Handle None values directly
        if value is None:
            return None

        converter_func = SqlTypeConverter.TYPE_MAPPING.get(sql_type)
        if converter_func is None:
            return value

        try:
            return converter_func(value)
        except ValueError as e:
            error_message = f"Error converting value '{value}' to {sql_type}"
            if column_name:
                error_message += f" in column {column_name}"
            logger.error(error_message)
            raise DecodeError(
                error_message,
                context={"column": column_name, "type": sql_type},
            ) from e

    @staticmethod
    def is_integer_type(sql_type: str) -> bool:
        return sql_type in INTEGER_TYPES

    @staticmethod
    def is_float_type(sql_type: str) -> bool:
        return sql_type in FLOAT_TYPES

    @staticmethod
    def is_binary_type(sql_type: str) -> bool:
        return sql_type in BINARY_TYPES

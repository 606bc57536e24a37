import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TypeVar

import pandas

from planetscale.exc import DecodeError
from planetscale.models.base import Field, Row
from planetscale.utils.conversion import SqlTypeConverter
from planetscale.utils.row_codec import decode_row

try:
    import pyarrow
except ImportError:
    pyarrow = None

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class QueryResult:
    """
    The result of one Execute call.

    `rows_affected` and `insert_id` are decimal strings as sent by the gateway.
    `fields` and `rows` are None when the statement produced no result set; a
    statement such as UPDATE can report `rows_affected` without any rows.
    """

    rows_affected: Optional[str] = None
    insert_id: Optional[str] = None
    fields: Optional[List[Field]] = None
    rows: Optional[List[Row]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QueryResult":
        """Create a QueryResult from the `result` object of an Execute response."""
        fields = data.get("fields")
        rows = data.get("rows")
        return cls(
            rows_affected=data.get("rowsAffected"),
            insert_id=data.get("insertId"),
            fields=[Field.from_dict(f) for f in fields] if fields is not None else None,
            rows=[Row.from_dict(r) for r in rows] if rows is not None else None,
        )

    @property
    def column_names(self) -> List[str]:
        return [f.name for f in self.fields or []]

    def _typed_rows(self) -> List[List[Any]]:
        """Decode every row into a list of typed values ordered like `fields`."""
        fields = self.fields or []
        return [
            [
                SqlTypeConverter.convert_value(value, f.type, f.name)
                for f, value in zip(fields, decode_row(row, len(fields)))
            ]
            for row in self.rows or []
        ]

    def to_records(self) -> List[Dict[str, Any]]:
        """
        Decode every row into a dict mapping field name to typed value.

        Values are matched to fields by position. Without fields each row decodes
        to an empty dict; without rows the result is an empty list.

        Raises:
            DecodeError: If a row is malformed or a numeric value does not parse
        """
        if self.rows is None:
            return []
        if self.fields is None:
            return [{} for _ in self.rows]

        names = self.column_names
        return [dict(zip(names, values)) for values in self._typed_rows()]

    def decode_as(self, record_type: Callable[..., T]) -> List[T]:
        """
        Decode every row into an instance of `record_type`.

        Dataclasses are checked against the column names first: every field
        without a default must have a column, and every column must have a field.
        Any other callable is invoked with the record as keyword arguments.
        A result without rows decodes to an empty list whatever its shape.

        Raises:
            DecodeError: If the columns do not fit `record_type`
        """
        if self.rows is None:
            return []
        records = self.to_records()
        if dataclasses.is_dataclass(record_type) and self.fields is not None:
            self._check_dataclass_shape(record_type)

        decoded = []
        for record in records:
            try:
                decoded.append(record_type(**record))
            except TypeError as e:
                raise DecodeError(
                    f"Cannot decode row into {getattr(record_type, '__name__', record_type)}: {e}",
                    context={"columns": self.column_names},
                ) from e
        return decoded

    def _check_dataclass_shape(self, record_type) -> None:
        declared = {f.name: f for f in dataclasses.fields(record_type) if f.init}
        columns = set(self.column_names)

        unexpected = sorted(columns - set(declared))
        missing = sorted(
            name
            for name, f in declared.items()
            if name not in columns
            and f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING
        )
        if unexpected or missing:
            raise DecodeError(
                f"Columns do not match {record_type.__name__}",
                context={"missing": missing, "unexpected": unexpected},
            )

    def _arrow_type(self, sql_type: str):
        if SqlTypeConverter.is_integer_type(sql_type):
            return pyarrow.int64()
        if SqlTypeConverter.is_float_type(sql_type):
            return pyarrow.float64()
        if SqlTypeConverter.is_binary_type(sql_type):
            return pyarrow.binary()
        return pyarrow.string()

    def to_arrow(self) -> "pyarrow.Table":
        """
        Build a pyarrow Table from the result, typed from the field tags.

        Integer-family columns become int64, floating columns float64 and binary
        columns (BLOB, BIT, BINARY, VARBINARY) carry the raw bytes. Every other
        column, INT64/UINT64 included, stays a string column. Columns are built
        by position, so repeated column names each keep their own values.
        """
        if pyarrow is None:
            raise ImportError("pyarrow is required to convert results to Arrow")

        fields = self.fields or []
        schema = pyarrow.schema(
            [pyarrow.field(f.name, self._arrow_type(f.type)) for f in fields]
        )
        rows = self._typed_rows() if fields else []
        arrays = []
        for i, (f, arrow_type) in enumerate(zip(fields, schema.types)):
            column = [row[i] for row in rows]
            if SqlTypeConverter.is_binary_type(f.type):
                column = [
                    None if v is None else v.encode("utf-8", "surrogateescape")
                    for v in column
                ]
            arrays.append(pyarrow.array(column, type=arrow_type))
        return pyarrow.Table.from_arrays(arrays, schema=schema)

    def to_pandas(self):
        """Convert the result to a pandas DataFrame using nullable dtypes."""
        table = self.to_arrow()
        dtype_mapping = {
            pyarrow.int64(): pandas.Int64Dtype(),
            pyarrow.float64(): pandas.Float64Dtype(),
            pyarrow.string(): pandas.StringDtype(),
        }
        return table.to_pandas(types_mapper=dtype_mapping.get)

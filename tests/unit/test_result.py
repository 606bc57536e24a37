from dataclasses import dataclass, field
from typing import NamedTuple, Optional

import pyarrow as pa
import pytest

from planetscale.exc import DecodeError
from planetscale.models.base import Field, Row
from planetscale.result import QueryResult
from planetscale.utils.row_codec import encode_row


FIELDS = [
    Field(name="id", type="INT32", table="users"),
    Field(name="name", type="VARCHAR", table="users"),
    Field(name="balance", type="FLOAT64", table="users"),
    Field(name="big", type="INT64", table="users"),
]


@dataclass
class User:
    id: int
    name: Optional[str]
    balance: float
    big: str


@dataclass
class UserWithDefault:
    id: int
    name: Optional[str]
    balance: float
    big: str
    tags: list = field(default_factory=list)


class UserTuple(NamedTuple):
    id: int
    name: Optional[str]
    balance: float
    big: str


def _result(rows, fields=FIELDS):
    return QueryResult(
        rows_affected="0",
        fields=fields,
        rows=[encode_row(values) for values in rows] if rows is not None else None,
    )


class TestQueryResult:
    def test_from_dict(self):
        result = QueryResult.from_dict(
            {
                "rowsAffected": "2",
                "insertId": "10",
                "fields": [{"name": "id", "type": "INT32", "table": "t"}],
                "rows": [{"lengths": ["1"], "values": "MQ=="}],
            }
        )
        assert result.rows_affected == "2"
        assert result.insert_id == "10"
        assert result.fields == [Field(name="id", type="INT32", table="t")]
        assert result.rows == [Row(lengths=["1"], values="MQ==")]
        assert result.to_records() == [{"id": 1}]

    def test_from_dict_without_result_set(self):
        result = QueryResult.from_dict({"rowsAffected": "3"})
        assert result.rows_affected == "3"
        assert result.fields is None
        assert result.rows is None

    def test_to_records_casts_by_position(self):
        result = _result([["1", "alice", "2.5", "9223372036854775807"]])
        assert result.to_records() == [
            {"id": 1, "name": "alice", "balance": 2.5, "big": "9223372036854775807"}
        ]

    def test_to_records_keeps_nulls(self):
        result = _result([["1", None, None, "5"]])
        assert result.to_records() == [
            {"id": 1, "name": None, "balance": None, "big": "5"}
        ]

    def test_rows_absent_decodes_to_empty_list(self):
        assert _result(None).to_records() == []
        assert QueryResult(rows_affected="1").to_records() == []

    def test_fields_absent_decodes_to_empty_records(self):
        result = QueryResult(rows=[encode_row(["a"]), encode_row(["b"])])
        assert result.to_records() == [{}, {}]

    def test_row_with_wrong_number_of_values_raises(self):
        result = _result([["1", "alice"]])
        with pytest.raises(DecodeError):
            result.to_records()

    def test_bad_numeric_value_raises(self):
        result = _result([["one", "alice", "2.5", "1"]])
        with pytest.raises(DecodeError):
            result.to_records()

    def test_column_names(self):
        assert _result([]).column_names == ["id", "name", "balance", "big"]
        assert QueryResult().column_names == []

    def test_decode_as_dataclass(self):
        result = _result([["1", "alice", "2.5", "7"], ["2", None, "0", "8"]])
        assert result.decode_as(User) == [
            User(id=1, name="alice", balance=2.5, big="7"),
            User(id=2, name=None, balance=0.0, big="8"),
        ]

    def test_decode_as_dataclass_with_default(self):
        result = _result([["1", "alice", "2.5", "7"]])
        (user,) = result.decode_as(UserWithDefault)
        assert user.tags == []

    def test_decode_as_named_tuple(self):
        result = _result([["1", "alice", "2.5", "7"]])
        assert result.decode_as(UserTuple) == [UserTuple(1, "alice", 2.5, "7")]

    def test_decode_as_missing_column_raises(self):
        fields = FIELDS[:3]
        result = _result([["1", "alice", "2.5"]], fields=fields)
        with pytest.raises(DecodeError) as exc_info:
            result.decode_as(User)
        assert exc_info.value.context["missing"] == ["big"]

    def test_decode_as_unexpected_column_raises(self):
        fields = FIELDS + [Field(name="extra", type="VARCHAR")]
        result = _result([["1", "alice", "2.5", "7", "x"]], fields=fields)
        with pytest.raises(DecodeError) as exc_info:
            result.decode_as(User)
        assert exc_info.value.context["unexpected"] == ["extra"]

    def test_decode_as_mismatch_checked_without_rows(self):
        result = _result([], fields=FIELDS[:1])
        with pytest.raises(DecodeError):
            result.decode_as(User)

    def test_decode_as_without_rows_is_empty_for_any_type(self):
        assert QueryResult(rows_affected="3").decode_as(User) == []
        assert QueryResult(rows_affected="3").decode_as(UserTuple) == []
        assert _result(None, fields=FIELDS[:1]).decode_as(User) == []

    def test_decode_as_named_tuple_mismatch_raises(self):
        fields = FIELDS[:2]
        result = _result([["1", "alice"]], fields=fields)
        with pytest.raises(DecodeError):
            result.decode_as(UserTuple)

    def test_to_arrow_types_follow_field_tags(self):
        result = _result([["1", "alice", "2.5", "7"], ["2", None, None, "8"]])
        table = result.to_arrow()
        assert table.schema.field("id").type == pa.int64()
        assert table.schema.field("balance").type == pa.float64()
        assert table.schema.field("big").type == pa.string()
        assert table.column("name").to_pylist() == ["alice", None]
        assert table.num_rows == 2

    def test_to_arrow_binary_columns_keep_raw_bytes(self):
        fields = [
            Field(name="payload", type="VARBINARY"),
            Field(name="flags", type="BIT"),
            Field(name="label", type="VARCHAR"),
        ]
        result = _result([[b"\xff\x00\xfe", b"\x01", "x"], [None, b"\x80", None]], fields=fields)
        table = result.to_arrow()
        assert table.schema.field("payload").type == pa.binary()
        assert table.schema.field("flags").type == pa.binary()
        assert table.column("payload").to_pylist() == [b"\xff\x00\xfe", None]
        assert table.column("flags").to_pylist() == [b"\x01", b"\x80"]
        assert table.column("label").to_pylist() == ["x", None]

    def test_to_arrow_keeps_duplicate_column_names_by_position(self):
        fields = [
            Field(name="id", type="INT32", table="a"),
            Field(name="id", type="INT32", table="b"),
        ]
        result = _result([["1", "2"], ["3", None]], fields=fields)
        table = result.to_arrow()
        assert table.schema.names == ["id", "id"]
        assert table.column(0).to_pylist() == [1, 3]
        assert table.column(1).to_pylist() == [2, None]

    def test_to_arrow_without_rows_has_schema_only(self):
        table = _result(None).to_arrow()
        assert table.schema.names == ["id", "name", "balance", "big"]
        assert table.num_rows == 0

    def test_to_pandas_uses_nullable_dtypes(self):
        result = _result([["1", "alice", "2.5", "7"], ["2", None, None, "8"]])
        df = result.to_pandas()
        assert list(df.columns) == ["id", "name", "balance", "big"]
        assert str(df["id"].dtype) == "Int64"
        assert df["balance"].isna().tolist() == [False, True]

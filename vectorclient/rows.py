"""Schema and column data types, and conversion of search results into rows."""

from __future__ import annotations

import enum
import typing
from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import FieldTypeNotMatchError, MilvusError


class FieldType(enum.IntEnum):
    """Data type of a collection field."""

    NONE = 0
    BOOL = 1
    INT8 = 2
    INT16 = 3
    INT32 = 4
    INT64 = 5
    FLOAT = 10
    DOUBLE = 11
    STRING = 20
    VARCHAR = 21
    BINARY_VECTOR = 100
    FLOAT_VECTOR = 101


@dataclass
class Field:
    """One field of a collection schema."""

    name: str = ""
    data_type: FieldType = FieldType.NONE
    primary_key: bool = False
    auto_id: bool = False
    description: str = ""
    type_params: dict[str, str] = field(default_factory=dict)


@dataclass
class Schema:
    """Collection schema: its name and fields."""

    collection_name: str = ""
    description: str = ""
    auto_id: bool = False
    fields: list[Field] = field(default_factory=list)


@dataclass
class ScalarField:
    """Scalar column data; at most one of the lists is set."""

    bool_data: Optional[list[bool]] = None
    int_data: Optional[list[int]] = None
    long_data: Optional[list[int]] = None
    float_data: Optional[list[float]] = None
    double_data: Optional[list[float]] = None
    string_data: Optional[list[str]] = None


@dataclass
class VectorField:
    """Vector column data; ``dim`` is in elements, or bits for binary vectors."""

    dim: int = 0
    float_vector: Optional[list[float]] = None
    binary_vector: Optional[bytes] = None


@dataclass
class FieldData:
    """Column data of one field, either scalars or vectors."""

    field_name: str = ""
    type: FieldType = FieldType.NONE
    scalars: Optional[ScalarField] = None
    vectors: Optional[VectorField] = None


@dataclass
class SearchResultData:
    """Raw result of a search over one or more queries."""

    num_queries: int = 0
    top_k: int = 0
    fields_data: list[FieldData] = field(default_factory=list)
    scores: list[float] = field(default_factory=list)
    int_ids: Optional[list[int]] = None
    str_ids: Optional[list[str]] = None
    topks: list[int] = field(default_factory=list)


@dataclass
class SearchResultByRows:
    """Rows returned for one query; ``err`` holds the last conversion error."""

    result_count: int = 0
    scores: list[float] = field(default_factory=list)
    rows: list[Any] = field(default_factory=list)
    err: Optional[Exception] = None


_KIND_NAMES: dict[str, type] = {
    "bool": bool,
    "int": int,
    "float": float,
    "str": str,
    "bytes": bytes,
    "bytearray": bytearray,
    "list": list,
    "List": list,
    "tuple": tuple,
    "Tuple": tuple,
}


def _annotations(row_type: type) -> dict[str, Any]:
    """Declared attribute annotations of a class, including its bases."""
    merged: dict[str, Any] = {}
    for klass in reversed(row_type.__mro__):
        merged.update(vars(klass).get("__annotations__", {}))
    return merged


def _kind_of(hint: Any) -> Optional[type]:
    """The container or scalar type an annotation names, without its parameters."""
    if isinstance(hint, str):
        base = hint.split("[", 1)[0].strip().rsplit(".", 1)[-1]
        return _KIND_NAMES.get(base)
    return typing.get_origin(hint) or hint


def _declared_kind(row: Any, attr: str) -> Optional[type]:
    hints = _annotations(type(row))
    if attr not in hints:
        return None
    return _kind_of(hints[attr])


_SCALAR_KINDS: dict[FieldType, tuple[type, str]] = {
    FieldType.BOOL: (bool, "bool_data"),
    FieldType.INT8: (int, "int_data"),
    FieldType.INT16: (int, "int_data"),
    FieldType.INT32: (int, "int_data"),
    FieldType.INT64: (int, "long_data"),
    FieldType.FLOAT: (float, "float_data"),
    FieldType.DOUBLE: (float, "double_data"),
    FieldType.STRING: (str, "string_data"),
}


def set_field_value(
    field: Field, row: Any, attr: str, field_data: FieldData, idx: int
) -> None:
    """Set ``row.attr`` to the idx-th value of the column.

    Raises FieldTypeNotMatchError when the field type, the attribute's declared
    type and the column data do not fit together.
    """
    kind = _declared_kind(row, attr)
    scalars = field_data.scalars
    vectors = field_data.vectors

    if field.data_type in _SCALAR_KINDS:
        expected, data_attr = _SCALAR_KINDS[field.data_type]
        if kind is not expected or scalars is None:
            raise FieldTypeNotMatchError()
        data = getattr(scalars, data_attr)
        if data is None:
            raise FieldTypeNotMatchError()
        setattr(row, attr, expected(data[idx]))
        return

    if field.data_type == FieldType.FLOAT_VECTOR:
        if vectors is None or vectors.float_vector is None:
            raise FieldTypeNotMatchError()
        dim = vectors.dim
        vector = vectors.float_vector[idx * dim : (idx + 1) * dim]
        if kind is list:
            setattr(row, attr, list(vector))
        elif kind is tuple:
            setattr(row, attr, tuple(vector))
        else:
            raise FieldTypeNotMatchError()
        return

    if field.data_type == FieldType.BINARY_VECTOR:
        if vectors is None or vectors.binary_vector is None:
            raise FieldTypeNotMatchError()
        width = vectors.dim // 8
        vector = bytes(vectors.binary_vector[idx * width : (idx + 1) * width])
        if kind is bytes:
            setattr(row, attr, vector)
        elif kind is bytearray:
            setattr(row, attr, bytearray(vector))
        elif kind is list:
            setattr(row, attr, list(vector))
        elif kind is tuple:
            setattr(row, attr, tuple(vector))
        else:
            raise FieldTypeNotMatchError()
        return

    raise FieldTypeNotMatchError()


def search_result_to_rows(
    schema: Schema, results: SearchResultData, row_type: type, output: Any = None
) -> list[SearchResultByRows]:
    """Turn a raw search result into instances of ``row_type``, one list per query."""
    by_name = {fd.field_name: fd for fd in results.fields_data}
    hints = _annotations(row_type)
    converted: list[SearchResultByRows] = []
    offset = 0
    for query in range(results.num_queries):
        count = int(results.topks[query])
        entry = SearchResultByRows(
            result_count=count, scores=list(results.scores[offset : offset + count])
        )
        for j in range(count):
            row = row_type()
            for schema_field in schema.fields:
                if schema_field.name not in hints:
                    continue
                if schema_field.primary_key:
                    entry.err = _set_primary_key(
                        row, schema_field, hints[schema_field.name], results, offset + j
                    ) or entry.err
                    continue
                column = by_name.get(schema_field.name)
                if column is None:
                    continue
                try:
                    set_field_value(schema_field, row, schema_field.name, column, offset + j)
                except FieldTypeNotMatchError as exc:
                    entry.err = exc
                    break
            entry.rows.append(row)
        converted.append(entry)
        offset += count
    return converted


def _set_primary_key(
    row: Any, schema_field: Field, hint: Any, results: SearchResultData, idx: int
) -> Optional[Exception]:
    kind = _kind_of(hint)
    name = schema_field.name
    if kind is int:
        if results.int_ids is None:
            return MilvusError(f"field {name} is int64, but id column is not")
        setattr(row, name, results.int_ids[idx])
        return None
    if kind is str:
        if results.str_ids is None:
            return MilvusError(f"field {name} is string ,but id column is not")
        setattr(row, name, results.str_ids[idx])
        return None
    return MilvusError(f"field {name} is not valid primary key")
"""Writing a header row from the field names of dataclass values."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from delimread.records import SerializeError
from delimread.serializer import FieldWriter


class HeaderState(enum.Enum):
    """Progress of a header walk.

    ``WRITE`` is the start. A scalar met outside any struct moves to
    ``ERROR_IF_WRITE``: if a struct field turns up later, the value mixes
    scalars and structs and no header can be written. Struct fields move
    between ``IN_STRUCT_FIELD`` and ``ENCOUNTERED_STRUCT_FIELD``.
    """

    WRITE = "write"
    ERROR_IF_WRITE = "error_if_write"
    ENCOUNTERED_STRUCT_FIELD = "encountered_struct_field"
    IN_STRUCT_FIELD = "in_struct_field"


def _scalar_outside_struct(name: str) -> SerializeError:
    return SerializeError(
        f"cannot serialize {name} scalar outside struct "
        "when writing headers from structs"
    )


def _container_inside_struct(name: str) -> SerializeError:
    return SerializeError(
        f"cannot serialize {name} container inside struct "
        "when writing headers from structs"
    )


def _is_struct(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _scalar_name(value: Any) -> Optional[str]:
    """A description of ``value`` if it is a scalar, else None."""
    if value is None:
        return "None"
    if isinstance(value, enum.Enum):
        return f"{type(value).__name__}.{value.name}"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "bytes"
    if isinstance(value, (bool, int, float, str)):
        return repr(value)
    if _is_struct(value) and not dataclasses.fields(value):
        return type(value).__name__
    return None


class _HeaderWalker:
    def __init__(self, writer: FieldWriter) -> None:
        self.writer = writer
        self.state = HeaderState.WRITE
        self.pending: Optional[SerializeError] = None

    def wrote_header(self) -> bool:
        return self.state in (
            HeaderState.ENCOUNTERED_STRUCT_FIELD,
            HeaderState.IN_STRUCT_FIELD,
        )

    def walk(self, value: Any) -> None:
        name = _scalar_name(value)
        if name is not None:
            self._scalar(name)
        elif isinstance(value, Mapping):
            raise SerializeError("serializing maps is not supported")
        elif _is_struct(value):
            self._container(type(value).__name__)
            for member in dataclasses.fields(value):
                self._struct_field(member.name, getattr(value, member.name))
        elif isinstance(value, Iterable):
            self._container("tuple" if isinstance(value, tuple) else "sequence")
            for item in value:
                self.walk(item)
        else:
            raise SerializeError(
                f"cannot serialize value of type {type(value).__name__}"
            )

    def _scalar(self, name: str) -> None:
        if self.state is HeaderState.WRITE:
            self.state = HeaderState.ERROR_IF_WRITE
            self.pending = _scalar_outside_struct(name)
        elif self.state is HeaderState.ENCOUNTERED_STRUCT_FIELD:
            raise _scalar_outside_struct(name)

    def _container(self, name: str) -> None:
        if self.state is HeaderState.IN_STRUCT_FIELD:
            raise _container_inside_struct(name)

    def _struct_field(self, key: str, value: Any) -> None:
        if self.state is HeaderState.ERROR_IF_WRITE:
            assert self.pending is not None
            self.state = HeaderState.ENCOUNTERED_STRUCT_FIELD
            raise self.pending
        self.state = HeaderState.ENCOUNTERED_STRUCT_FIELD
        self.writer.write_field(key)
        self.state = HeaderState.IN_STRUCT_FIELD
        self.walk(value)
        self.state = HeaderState.ENCOUNTERED_STRUCT_FIELD


def serialize_header(writer: FieldWriter, value: Any) -> bool:
    """Write the field names of ``value`` to ``writer`` as a header.

    Dataclass instances contribute their field names, also when they sit
    in tuples or sequences. Returns True if names were written and False
    if the value has no field names (nothing is written then). Raises
    SerializeError when structs are mixed with scalars, when a struct
    field holds a container, or for mappings.
    """
    walker = _HeaderWalker(writer)
    walker.walk(value)
    return walker.wrote_header()
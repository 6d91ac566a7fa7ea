"""Turning Python values into the fields of one CSV record."""

from __future__ import annotations

import dataclasses
import enum
import math
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Iterator, Protocol, Union

from delimread.records import SerializeError

Field = Union[str, bytes]


class FieldWriter(Protocol):
    """Anything that accepts fields of a record one at a time."""

    def write_field(self, field: Field) -> Any:  # pragma: no cover - protocol
        ...


def _format_float(value: float) -> str:
    """Shortest round-trip text for a float, in the style of ``1.5``,
    ``5.0``, ``0.00001``, ``1e16``, ``NaN`` and ``inf``."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    if value == 0.0:
        return f"{sign}0.0"
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = list(digit_tuple)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    text = "".join(map(str, digits))
    length = len(text)
    # The value lies in [10^(kk-1), 10^kk).
    kk = length + exponent
    if exponent >= 0 and kk <= 16:
        body = f"{text}{'0' * exponent}.0"
    elif 0 < kk <= 16:
        body = f"{text[:kk]}.{text[kk:]}"
    elif -5 < kk <= 0:
        body = f"0.{'0' * -kk}{text}"
    elif length == 1:
        body = f"{text}e{kk - 1}"
    else:
        body = f"{text[0]}.{text[1:]}e{kk - 1}"
    return sign + body


def format_scalar(value: Any) -> Field:
    """The text of a single field for a scalar value.

    ``None`` is an empty field, booleans are ``true``/``false``, enum
    members are their names, strings and bytes are written as they are.
    Raises SerializeError for anything that is not a scalar.
    """
    if value is None:
        return ""
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise SerializeError(f"cannot serialize {type(value).__name__} as a single field")


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(
        value, (enum.Enum, bool, int, float, str, bytes, bytearray, memoryview)
    )


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _fields(value: Any) -> Iterator[Field]:
    if _is_scalar(value):
        yield format_scalar(value)
        return
    if isinstance(value, Mapping):
        raise SerializeError("serializing maps is not supported")
    if _is_dataclass_instance(value):
        members = dataclasses.fields(value)
        if not members:
            # A dataclass without fields stands for a unit struct.
            yield type(value).__name__
            return
        for member in members:
            yield from _fields(getattr(value, member.name))
        return
    if isinstance(value, Iterable):
        for item in value:
            yield from _fields(item)
        return
    raise SerializeError(f"cannot serialize value of type {type(value).__name__}")


def serialize(writer: FieldWriter, value: Any) -> None:
    """Write ``value`` to ``writer`` as the fields of one record.

    Sequences, tuples and dataclasses are flattened into their parts in
    order. Mappings are not supported and raise SerializeError; fields
    written before an error stay written.
    """
    for field in _fields(value):
        writer.write_field(field)
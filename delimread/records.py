"""Records, positions, configuration enums and the error hierarchy."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence, Union

# ASCII whitespace, as trimmed from byte records: [\t\n\v\f\r ].
_ASCII_WS = b"\t\n\x0b\x0c\r "

# Characters with the Unicode White_Space property, as trimmed from text records.
_UNICODE_WS = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


@dataclass
class Position:
    """A location in CSV data: byte offset, line number and record index."""

    byte: int = 0
    line: int = 1
    record: int = 0

    def __copy__(self) -> "Position":
        return Position(self.byte, self.line, self.record)


def _describe(pos: Optional[Position]) -> str:
    if pos is None:
        return ""
    return f"record {pos.record} (line: {pos.line}, byte: {pos.byte}): "


class CsvError(Exception):
    """Base class for every error raised while reading or writing CSV."""

    def __init__(self, message: str, position: Optional[Position] = None) -> None:
        super().__init__(message)
        self.position = position


class CsvIoError(CsvError):
    """Reading from or writing to the underlying stream failed."""

    def __init__(self, error: OSError) -> None:
        super().__init__(str(error))
        self.error = error


class Utf8Error(CsvError):
    """A field was not valid UTF-8 where text was required."""

    def __init__(
        self, field: int, valid_up_to: int, position: Optional[Position] = None
    ) -> None:
        super().__init__(
            f"CSV parse error: {_describe(position)}invalid utf-8: "
            f"invalid UTF-8 in field {field} near byte index {valid_up_to}",
            position,
        )
        self.field = field
        self.valid_up_to = valid_up_to


class UnequalLengthsError(CsvError):
    """A record had a different number of fields than an earlier one."""

    def __init__(
        self, expected_len: int, length: int, position: Optional[Position] = None
    ) -> None:
        super().__init__(
            f"CSV error: {_describe(position)}found record with {length} fields, "
            f"but the previous record has {expected_len} fields",
            position,
        )
        self.expected_len = expected_len
        self.length = length


class SerializeError(CsvError):
    """A value could not be turned into a CSV record."""

    def __init__(self, message: str) -> None:
        super().__init__(f"CSV write error: {message}")
        self.detail = message


class Trim(enum.Enum):
    """Which values have leading and trailing whitespace removed."""

    NONE = "none"
    HEADERS = "headers"
    FIELDS = "fields"
    ALL = "all"

    def should_trim_fields(self) -> bool:
        return self in (Trim.FIELDS, Trim.ALL)

    def should_trim_headers(self) -> bool:
        return self in (Trim.HEADERS, Trim.ALL)


@dataclass(frozen=True)
class Terminator:
    """A record terminator: CRLF (byte is None) or any single byte."""

    byte: Optional[int] = None

    def __post_init__(self) -> None:
        if self.byte is not None and not 0 <= self.byte <= 255:
            raise ValueError(f"terminator must be a single byte, got {self.byte}")

    @classmethod
    def any(cls, byte: Union[int, bytes, str]) -> "Terminator":
        """A terminator that is exactly the given byte."""
        if isinstance(byte, str):
            byte = byte.encode("utf-8")
        if isinstance(byte, (bytes, bytearray)):
            if len(byte) != 1:
                raise ValueError("terminator must be exactly one byte")
            byte = byte[0]
        return cls(byte)


Terminator.CRLF = Terminator()  # type: ignore[attr-defined]


class _Record:
    """Shared behaviour of byte and text records."""

    __slots__ = ("fields", "position")
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, fields: Iterable = (), position: Optional[Position] = None):
        self.fields = [self._coerce(f) for f in fields]
        self.position = position

    @staticmethod
    def _coerce(value):
        raise NotImplementedError

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator:
        return iter(self.fields)

    def __getitem__(self, index):
        return self.fields[index]

    def __bool__(self) -> bool:
        return bool(self.fields)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, _Record):
            if type(other) is not type(self):
                return NotImplemented
            return self.fields == other.fields
        if isinstance(other, (list, tuple)):
            try:
                return self.fields == [self._coerce(f) for f in other]
            except (TypeError, UnicodeError):
                return False
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.fields!r})"


class ByteRecord(_Record):
    """A record whose fields are raw bytes."""

    __slots__ = ()

    @staticmethod
    def _coerce(value) -> bytes:
        if isinstance(value, str):
            return value.encode("utf-8")
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        raise TypeError(f"byte record fields must be bytes, got {type(value).__name__}")

    def trim(self) -> None:
        """Strip ASCII whitespace from both ends of every field, in place."""
        self.fields = [f.strip(_ASCII_WS) for f in self.fields]

    def decode(self) -> "TextRecord":
        """Return the record as text, or raise Utf8Error naming the bad field."""
        texts = []
        for index, field in enumerate(self.fields):
            try:
                texts.append(field.decode("utf-8"))
            except UnicodeDecodeError as exc:
                raise Utf8Error(index, exc.start, self.position) from None
        return TextRecord(texts, self.position)

    @classmethod
    def encode_from(cls, record: "TextRecord") -> "ByteRecord":
        """Build a byte record from a text record, keeping its position."""
        return cls((f.encode("utf-8") for f in record.fields), record.position)


class TextRecord(_Record):
    """A record whose fields are text."""

    __slots__ = ()

    @staticmethod
    def _coerce(value) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value).decode("utf-8")
        raise TypeError(f"text record fields must be str, got {type(value).__name__}")

    def trim(self) -> None:
        """Strip Unicode whitespace from both ends of every field, in place."""
        self.fields = [f.strip(_UNICODE_WS) for f in self.fields]

    def to_bytes(self) -> ByteRecord:
        """Return the record encoded as UTF-8 bytes."""
        return ByteRecord.encode_from(self)


RecordFields = Sequence[Union[bytes, str]]
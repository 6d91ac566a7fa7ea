"""A configured CSV reader over a binary stream."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, replace
from typing import BinaryIO, Callable, Generic, Optional, TypeVar, Union

from delimread.builder import ReaderBuilder
from delimread.core import ParseResult
from delimread.records import (
    ByteRecord,
    CsvIoError,
    Position,
    RecordFields,
    TextRecord,
    UnequalLengthsError,
    Utf8Error,
)

_R = TypeVar("_R", ByteRecord, TextRecord)


class _EofState(enum.Enum):
    NOT_EOF = "not_eof"
    EOF = "eof"
    IO_ERROR = "io_error"


@dataclass
class _Headers:
    """The first row, as bytes and as text (or the error decoding it)."""

    byte_record: ByteRecord
    text_record: Union[TextRecord, Utf8Error]


class _RecordIterator(Generic[_R]):
    """Iterates over records; an error does not end the iteration."""

    def __init__(self, reader: "Reader", read: Callable[[], Optional[_R]]) -> None:
        self.reader = reader
        self._read = read

    def __iter__(self) -> "_RecordIterator[_R]":
        return self

    def __next__(self) -> _R:
        record = self._read()
        if record is None:
            raise StopIteration
        return record


class Reader:
    """Reads CSV records from a binary stream.

    Parsing itself never fails; errors are raised for unequal record
    lengths (unless flexible), invalid UTF-8 where text is needed, and
    failures of the underlying stream. After a stream failure the reader
    behaves as if it had reached the end of its input.
    """

    def __init__(self, stream: BinaryIO, builder: Optional[ReaderBuilder] = None) -> None:
        builder = builder if builder is not None else ReaderBuilder()
        self._stream = stream
        self._parser = builder.make_parser()
        self._capacity = builder.buffer_capacity
        self._buffer = b""
        self._offset = 0
        self._has_headers = builder.has_headers
        self._flexible = builder.flexible
        self._trim = builder.trim
        self._headers: Optional[_Headers] = None
        self._first_field_count: Optional[int] = None
        self._cur_pos = Position()
        self._first = False
        self._seeked = False
        self._eof = _EofState.NOT_EOF

    @classmethod
    def from_reader(cls, stream: BinaryIO) -> "Reader":
        """A reader with the default settings over ``stream``."""
        return cls(stream, ReaderBuilder())

    @classmethod
    def from_path(cls, path: Union[str, os.PathLike]) -> "Reader":
        """Open ``path`` and read it with the default settings."""
        return ReaderBuilder().from_path(path)

    @property
    def stream(self) -> BinaryIO:
        """The underlying binary stream."""
        return self._stream

    # Headers

    def headers(self) -> TextRecord:
        """The first row as text, reading it if necessary.

        Raises Utf8Error if the first row is not valid UTF-8. On empty
        input this is an empty record.
        """
        headers = self._ensure_headers()
        text = headers.text_record
        if isinstance(text, Utf8Error):
            raise Utf8Error(text.field, text.valid_up_to, headers.byte_record.position)
        return TextRecord(text.fields, text.position)

    def byte_headers(self) -> ByteRecord:
        """The first row as raw bytes, reading it if necessary."""
        record = self._ensure_headers().byte_record
        return ByteRecord(record.fields, record.position)

    def set_headers(self, headers: Union[TextRecord, RecordFields]) -> None:
        """Replace the header row with the given text fields."""
        if isinstance(headers, TextRecord):
            record = TextRecord(headers.fields, headers.position)
        else:
            record = TextRecord(headers)
        self._store_headers(text=record)

    def set_byte_headers(self, headers: Union[ByteRecord, RecordFields]) -> None:
        """Replace the header row with the given byte fields."""
        if isinstance(headers, ByteRecord):
            record = ByteRecord(headers.fields, headers.position)
        else:
            record = ByteRecord(headers)
        self._store_headers(raw=record)

    def _ensure_headers(self) -> _Headers:
        if self._headers is None:
            start = replace(self._cur_pos)
            record = self._read_impl()
            self._store_headers(raw=record if record is not None else ByteRecord((), start))
        assert self._headers is not None
        return self._headers

    def _store_headers(
        self, *, text: Optional[TextRecord] = None, raw: Optional[ByteRecord] = None
    ) -> None:
        decoded: Union[TextRecord, Utf8Error]
        if text is not None:
            decoded = text
            raw = text.to_bytes()
        else:
            assert raw is not None
            raw = ByteRecord(raw.fields, raw.position)
            try:
                decoded = raw.decode()
            except Utf8Error as exc:
                decoded = exc
        if self._trim.should_trim_headers():
            if isinstance(decoded, TextRecord):
                decoded.trim()
            raw.trim()
        self._headers = _Headers(raw, decoded)

    # Records

    def read_record(self) -> Optional[TextRecord]:
        """The next record as text, or None when no records are left."""
        raw = self.read_byte_record()
        if raw is None:
            return None
        record = raw.decode()
        if self._trim.should_trim_fields():
            record.trim()
        return record

    def read_byte_record(self) -> Optional[ByteRecord]:
        """The next record as bytes, or None when no records are left.

        When the reader has headers, the first row is never returned.
        """
        trim_fields = self._trim.should_trim_fields()
        if not self._seeked and not self._has_headers and not self._first:
            if self._headers is not None:
                self._first = True
                header = self._headers.byte_record
                record = ByteRecord(header.fields, header.position)
                if trim_fields:
                    record.trim()
                return record if record else None
        start = replace(self._cur_pos)
        record = self._read_impl()
        self._first = True
        if not self._seeked and self._headers is None:
            self._store_headers(raw=record if record is not None else ByteRecord((), start))
            if self._has_headers:
                record = self._read_impl()
                if record is not None and trim_fields:
                    record.trim()
                return record
        elif record is not None and trim_fields:
            record.trim()
        return record

    def records(self) -> _RecordIterator[TextRecord]:
        """An iterator over the remaining records as text."""
        return _RecordIterator(self, self.read_record)

    def byte_records(self) -> _RecordIterator[ByteRecord]:
        """An iterator over the remaining records as bytes."""
        return _RecordIterator(self, self.read_byte_record)

    def __iter__(self) -> _RecordIterator[TextRecord]:
        return self.records()

    def _fill(self) -> memoryview:
        if self._offset >= len(self._buffer):
            try:
                chunk = self._stream.read(self._capacity)
            except OSError as exc:
                self._eof = _EofState.IO_ERROR
                raise CsvIoError(exc) from exc
            if isinstance(chunk, str):
                raise TypeError("CSV input must be a binary stream")
            self._buffer = bytes(chunk or b"")
            self._offset = 0
        return memoryview(self._buffer)[self._offset:]

    def _read_impl(self) -> Optional[ByteRecord]:
        """Read one record from the stream, ignoring header handling."""
        position = replace(self._cur_pos)
        if self._eof is not _EofState.NOT_EOF:
            return None
        while True:
            data = self._fill()
            result, consumed, fields = self._parser.read_record(data, eof=len(data) == 0)
            self._offset += consumed
            self._cur_pos.byte += consumed
            self._cur_pos.line = self._parser.line
            if result is ParseResult.INPUT_EMPTY:
                continue
            if result is ParseResult.RECORD:
                record = ByteRecord(fields, position)
                self._add_record(record)
                return record
            self._eof = _EofState.EOF
            return None

    def _add_record(self, record: ByteRecord) -> None:
        self._cur_pos.record += 1
        if self._flexible:
            return
        if self._first_field_count is None:
            self._first_field_count = len(record)
        elif len(record) != self._first_field_count:
            raise UnequalLengthsError(self._first_field_count, len(record), record.position)

    # State

    def position(self) -> Position:
        """The position of the reader, at the start of the next record."""
        return replace(self._cur_pos)

    def is_done(self) -> bool:
        """Whether the input is exhausted (or the stream failed)."""
        return self._eof is not _EofState.NOT_EOF

    def has_headers(self) -> bool:
        """Whether the first row is treated as a header row."""
        return self._has_headers

    # Seeking

    def seek(self, pos: Position) -> None:
        """Move to the byte offset of ``pos`` and continue parsing from there.

        The header row is read first if it has not been. Skipping of the
        first row is disabled afterwards. No seek happens if the offset
        equals the current one.
        """
        self.byte_headers()
        self._seeked = True
        if pos.byte == self._cur_pos.byte:
            return
        self._reposition(pos.byte, os.SEEK_SET, pos)

    def seek_raw(self, offset: int, whence: int, pos: Position) -> None:
        """Seek the stream with ``offset`` and ``whence``, taking ``pos`` as
        the new position. Always seeks."""
        self.byte_headers()
        self._seeked = True
        self._reposition(offset, whence, pos)

    def _reposition(self, offset: int, whence: int, pos: Position) -> None:
        try:
            self._stream.seek(offset, whence)
        except OSError as exc:
            raise CsvIoError(exc) from exc
        self._buffer = b""
        self._offset = 0
        self._parser.reset()
        self._parser.set_line(pos.line)
        self._cur_pos = replace(pos)
        self._eof = _EofState.NOT_EOF

    # Resource handling

    def close(self) -> None:
        """Close the underlying stream."""
        self._stream.close()

    def __enter__(self) -> "Reader":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
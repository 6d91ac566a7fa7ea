"""A streaming CSV record parser that works on raw bytes."""

from __future__ import annotations

import enum
from typing import List, Optional, Tuple, Union

from delimread.records import Terminator

_LF = 0x0A
_CR = 0x0D

ByteLike = Union[int, bytes, bytearray, str]


class ParseResult(enum.Enum):
    """What a call to :meth:`Parser.read_record` produced."""

    INPUT_EMPTY = "input_empty"
    RECORD = "record"
    END = "end"


class _State(enum.Enum):
    START_RECORD = enum.auto()
    START_FIELD = enum.auto()
    IN_FIELD = enum.auto()
    IN_QUOTED_FIELD = enum.auto()
    IN_ESCAPED_QUOTE = enum.auto()
    IN_DOUBLE_ESCAPED_QUOTE = enum.auto()
    IN_COMMENT = enum.auto()
    CRLF = enum.auto()
    END = enum.auto()


# States in which reaching the end of input ends no record.
_QUIET_AT_EOF = frozenset({_State.START_RECORD, _State.CRLF, _State.IN_COMMENT})


def _as_byte(value: ByteLike, name: str) -> int:
    if isinstance(value, str):
        value = value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 1:
            raise ValueError(f"{name} must be exactly one byte, got {value!r}")
        return value[0]
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 255:
        return value
    raise ValueError(f"{name} must be a single byte, got {value!r}")


def _as_optional_byte(value: Optional[ByteLike], name: str) -> Optional[int]:
    return None if value is None else _as_byte(value, name)


class Parser:
    """Incremental CSV parser.

    Bytes are fed in with :meth:`read_record`; the parser keeps any partial
    record between calls and reports each complete record as a list of
    byte fields. It also counts lines, one per ``\\n`` consumed.
    """

    def __init__(
        self,
        *,
        delimiter: ByteLike = b",",
        quote: ByteLike = b'"',
        escape: Optional[ByteLike] = None,
        double_quote: bool = True,
        quoting: bool = True,
        comment: Optional[ByteLike] = None,
        terminator: Terminator = Terminator(),
    ) -> None:
        self.delimiter = _as_byte(delimiter, "delimiter")
        self.quote = _as_byte(quote, "quote")
        self.escape = _as_optional_byte(escape, "escape")
        self.comment = _as_optional_byte(comment, "comment")
        self.double_quote = bool(double_quote)
        self.quoting = bool(quoting)
        if not isinstance(terminator, Terminator):
            raise TypeError("terminator must be a Terminator")
        self.terminator = terminator
        self.line = 1
        self._state = _State.START_RECORD
        self._field = bytearray()
        self._fields: List[bytes] = []

    def reset(self) -> None:
        """Forget any partial record and start again at line 1."""
        self._state = _State.START_RECORD
        self._field.clear()
        self._fields = []
        self.line = 1

    def set_line(self, line: int) -> None:
        """Set the current line number."""
        self.line = line

    def read_record(
        self, data: bytes = b"", eof: bool = False
    ) -> Tuple[ParseResult, int, List[bytes]]:
        """Parse bytes from ``data``.

        Returns ``(result, consumed, fields)``: the outcome, the number of
        bytes of ``data`` used, and the fields of the record when the
        outcome is ``RECORD`` (an empty list otherwise). When ``eof`` is true
        and ``data`` runs out, any record in progress is completed.
        """
        if self._state is _State.END:
            return ParseResult.END, 0, []
        consumed = 0
        for consumed, byte in enumerate(data, 1):
            record = self._feed(byte)
            if byte == _LF:
                self.line += 1
            if record is not None:
                return ParseResult.RECORD, consumed, record
        if not eof:
            return ParseResult.INPUT_EMPTY, consumed, []
        return self._finish(consumed)

    def _is_terminator(self, byte: int) -> bool:
        if self.terminator.byte is None:
            return byte in (_CR, _LF)
        return byte == self.terminator.byte

    def _end_field(self) -> None:
        self._fields.append(bytes(self._field))
        self._field.clear()

    def _end_record(self, byte: int) -> List[bytes]:
        self._end_field()
        record, self._fields = self._fields, []
        if self.terminator.byte is None and byte == _CR:
            self._state = _State.CRLF
        else:
            self._state = _State.START_RECORD
        return record

    def _unquoted(self, byte: int) -> Optional[List[bytes]]:
        if byte == self.delimiter:
            self._end_field()
            self._state = _State.START_FIELD
        elif self._is_terminator(byte):
            return self._end_record(byte)
        else:
            self._field.append(byte)
            self._state = _State.IN_FIELD
        return None

    def _feed(self, byte: int) -> Optional[List[bytes]]:
        state = self._state
        if state is _State.CRLF:
            self._state = state = _State.START_RECORD
            if byte == _LF:
                return None
        if state is _State.START_RECORD:
            if self._is_terminator(byte):
                return None
            if self.comment is not None and byte == self.comment:
                self._state = _State.IN_COMMENT
                return None
            self._state = state = _State.START_FIELD
        if state is _State.START_FIELD:
            if self.quoting and byte == self.quote:
                self._state = _State.IN_QUOTED_FIELD
                return None
            return self._unquoted(byte)
        if state is _State.IN_FIELD:
            return self._unquoted(byte)
        if state is _State.IN_QUOTED_FIELD:
            if self.quoting and byte == self.quote:
                self._state = _State.IN_DOUBLE_ESCAPED_QUOTE
            elif self.quoting and self.escape is not None and byte == self.escape:
                self._state = _State.IN_ESCAPED_QUOTE
            else:
                self._field.append(byte)
            return None
        if state is _State.IN_ESCAPED_QUOTE:
            self._field.append(byte)
            self._state = _State.IN_QUOTED_FIELD
            return None
        if state is _State.IN_DOUBLE_ESCAPED_QUOTE:
            if self.quoting and self.double_quote and byte == self.quote:
                self._field.append(byte)
                self._state = _State.IN_QUOTED_FIELD
                return None
            return self._unquoted(byte)
        if state is _State.IN_COMMENT:
            if byte == _LF:
                self._state = _State.START_RECORD
            return None
        return None

    def _finish(self, consumed: int) -> Tuple[ParseResult, int, List[bytes]]:
        if self._state in _QUIET_AT_EOF:
            self._state = _State.END
            return ParseResult.END, consumed, []
        self._end_field()
        record, self._fields = self._fields, []
        self._state = _State.START_RECORD
        return ParseResult.RECORD, consumed, record
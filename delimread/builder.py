"""Configuration for CSV readers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, BinaryIO, Optional, Union

from delimread.core import ByteLike, Parser
from delimread.records import CsvIoError, Terminator, Trim

if TYPE_CHECKING:
    from delimread.reader import Reader

# ASCII unit separator and record separator.
_UNIT_SEPARATOR = 0x1F
_RECORD_SEPARATOR = 0x1E


@dataclass
class ReaderBuilder:
    """Settings for a CSV reader.

    The defaults read RFC 4180 style data: comma delimited, double-quoted
    fields with doubled quotes as escapes, any of ``\\r``, ``\\n`` or
    ``\\r\\n`` ending a record, and the first row taken as a header row.
    """

    delimiter: ByteLike = b","
    quote: ByteLike = b'"'
    escape: Optional[ByteLike] = None
    double_quote: bool = True
    quoting: bool = True
    comment: Optional[ByteLike] = None
    terminator: Terminator = field(default_factory=Terminator)
    has_headers: bool = True
    flexible: bool = False
    trim: Trim = Trim.NONE
    buffer_capacity: int = 8 * (1 << 10)

    def __post_init__(self) -> None:
        if isinstance(self.trim, str):
            self.trim = Trim(self.trim)
        if not isinstance(self.trim, Trim):
            raise TypeError("trim must be a Trim")
        if self.buffer_capacity <= 0:
            raise ValueError("buffer_capacity must be positive")
        # Fail early on settings the parser would reject.
        self.make_parser()

    def ascii(self) -> "ReaderBuilder":
        """Use the ASCII unit and record separators; returns the builder."""
        self.delimiter = _UNIT_SEPARATOR
        self.terminator = Terminator.any(_RECORD_SEPARATOR)
        return self

    def make_parser(self) -> Parser:
        """Build a fresh byte parser from the current settings."""
        return Parser(
            delimiter=self.delimiter,
            quote=self.quote,
            escape=self.escape,
            double_quote=self.double_quote,
            quoting=self.quoting,
            comment=self.comment,
            terminator=self.terminator,
        )

    def from_reader(self, stream: BinaryIO) -> "Reader":
        """Build a reader that parses the binary stream given."""
        from delimread.reader import Reader

        return Reader(stream, self)

    def from_path(self, path: Union[str, os.PathLike]) -> "Reader":
        """Open the file at ``path`` and build a reader over it.

        Raises CsvIoError if the file cannot be opened.
        """
        try:
            stream = open(path, "rb")
        except OSError as exc:
            raise CsvIoError(exc) from exc
        return self.from_reader(stream)
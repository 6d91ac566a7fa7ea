# delimread

`delimread` reads delimited text such as CSV and TSV from any binary stream
or file path. It has no dependencies outside the standard library.

It gives you:

- records as raw bytes (`ByteRecord`) or as decoded text (`TextRecord`)
- optional header handling, with the first row kept apart from the data rows
- a choice of delimiter, quote character, escape character and comment
  character, and control over doubled-quote escapes and quoting as a whole
- record terminators: CR, LF and CRLF by default, or any single byte you pick
- whitespace trimming for headers, for fields, or for both
- strict checking that every record has the same number of fields, which can
  be switched off
- the byte, line and record position of every record, and seeking back to a
  saved position
- turning Python values into the fields of a record, and header names from
  the fields of dataclass values

## Installation

```
pip install delimread
```

## Reading records

```python
import io
from delimread.reader import Reader

data = b"city,country,pop\nBoston,United States,4628910\n"
with Reader.from_reader(io.BytesIO(data)) as rdr:
    print(list(rdr.headers()))          # ['city', 'country', 'pop']
    for record in rdr.records():
        print(list(record))             # ['Boston', 'United States', '4628910']
```

`Reader.from_path("data.csv")` opens a file instead. Iterating over a
`Reader` directly yields text records; `byte_records()` yields byte records.
`read_record()` and `read_byte_record()` return one record at a time, or
`None` when no records are left. `headers()` and `byte_headers()` return the
first row whether or not the reader treats it as a header row, and
`set_headers()` / `set_byte_headers()` replace it. `is_done()` tells whether
the input is exhausted, and `close()` (or leaving a `with` block) closes the
underlying stream.

Each record carries its `position` (a `Position` with `byte`, `line` and
`record`), and records compare equal to plain lists of their fields.

## Configuring the parser

Settings go on a `ReaderBuilder` dataclass. Build a reader from it with
`from_reader` or `from_path`.

```python
import io
from delimread.builder import ReaderBuilder
from delimread.records import Terminator, Trim

builder = ReaderBuilder(
    delimiter=b";",
    has_headers=False,
    flexible=True,
    trim=Trim.ALL,
    terminator=Terminator.any(b"$"),
)
rdr = builder.from_reader(io.BytesIO(b"a; b$c;d"))
print([list(r) for r in rdr.records()])   # [['a', 'b'], ['c', 'd']]
```

The settings are `delimiter`, `quote`, `escape`, `double_quote`, `quoting`,
`comment`, `terminator`, `has_headers`, `flexible`, `trim` and
`buffer_capacity`. Single-byte settings take an `int`, a one-byte `bytes`
or a one-character `str`. A record starting with the `comment` byte is
skipped up to the next `\n`.

`ReaderBuilder().ascii()` sets up ASCII delimited text: the unit separator
`\x1f` between fields and the record separator `\x1e` between records.

The byte-level parser is available on its own as `delimread.core.Parser`.
Its `read_record(data, eof)` returns `(ParseResult, consumed, fields)` and
keeps a partial record between calls.

## Errors

Every error raised by the package is a subclass of
`delimread.records.CsvError`:

- `UnequalLengthsError`: a record has a different number of fields from the
  first record, and the reader is not flexible.
- `Utf8Error`: a record is not valid UTF-8 when read as text. Read it with
  the byte API to get the raw data.
- `CsvIoError`: the underlying stream failed. After this the reader acts as
  if it had reached the end of the input.
- `SerializeError`: a value cannot be turned into record fields.

A reader can go on reading after an `UnequalLengthsError`.

## Positions and seeking

```python
import io
from delimread.reader import Reader

rdr = Reader.from_reader(io.BytesIO(b"h1,h2\na,b\nc,d\n"))
saved = None
while True:
    pos = rdr.position()
    if rdr.read_record() is None:
        break
    saved = pos
rdr.seek(saved)
print(list(rdr.read_record()))   # ['c', 'd']
```

`seek_raw(offset, whence, pos)` always seeks the stream with the offset and
whence given and takes `pos` as the new position.

## Values as record fields

`delimread.serializer.serialize(writer, value)` passes a value to any object
with a `write_field(field)` method, one field at a time. Tuples, lists and
dataclasses are flattened in order; `None` becomes an empty field, booleans
`true`/`false`, enum members their names, and floats a shortest form such as
`1.5`, `5.0` or `NaN`. Mappings raise `SerializeError`. `format_scalar(value)`
gives the text of a single scalar field.

`delimread.header.serialize_header(writer, value)` writes the field names of
dataclass values, also when they sit in tuples or lists, and returns whether
any names were written. Mixing dataclasses with bare scalars, or a dataclass
field holding a container, raises `SerializeError`.

```python
from dataclasses import dataclass
from delimread.header import serialize_header
from delimread.serializer import serialize

@dataclass
class Row:
    city: str
    pop: int

class Collect:
    def __init__(self):
        self.fields = []
    def write_field(self, field):
        self.fields.append(field)

names, values = Collect(), Collect()
serialize_header(names, Row("Boston", 4628910))   # True
serialize(values, Row("Boston", 4628910))
print(names.fields, values.fields)   # ['city', 'pop'] ['Boston', '4628910']
```

## What it does not do

The package reads CSV; it does not write it. There is no CSV writer that
quotes fields and ends records: `serialize` and `serialize_header` only hand
fields to a writer you supply. Nor does it turn records back into typed
Python objects; records come out as bytes or text. There is no command-line
tool.
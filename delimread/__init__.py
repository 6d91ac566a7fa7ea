"""Reading delimited text into byte and text records, and turning values into record fields."""

__version__ = "0.1.0"
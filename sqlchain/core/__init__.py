"""Core statement rendering, escaping, result shaping and caching."""

from sqlchain.core.assembler import SqlAssembler, bind_placeholders, is_read_statement
from sqlchain.core.cache import FileCache
from sqlchain.core.escape import Escaper, escape_literal
from sqlchain.core.result import FetchShape, shape_row, shape_rows

__all__ = (
    "Escaper",
    "FetchShape",
    "FileCache",
    "SqlAssembler",
    "bind_placeholders",
    "escape_literal",
    "is_read_statement",
    "shape_row",
    "shape_rows",
)

import tokenio.version
from _tokenio.buffered_writer import BufferedWriter, open_writer
from _tokenio.errors import (
    BufferShrinkError,
    EndOfInputError,
    ImplicitFlushError,
    IOFailureError,
    TokenIOError,
    WrongFileModeError,
)
from _tokenio.streams import DEFAULT_BUFFER_CAPACITY
from _tokenio.token_reader import TokenReader, open_reader
from _tokenio.typed_parsers import narrow, register_parser

__version__ = tokenio.version.version

__all__ = [
    "DEFAULT_BUFFER_CAPACITY",
    "BufferShrinkError",
    "BufferedWriter",
    "EndOfInputError",
    "IOFailureError",
    "ImplicitFlushError",
    "TokenIOError",
    "TokenReader",
    "WrongFileModeError",
    "narrow",
    "open_reader",
    "open_writer",
    "register_parser",
]

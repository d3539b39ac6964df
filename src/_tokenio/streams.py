"""
Adaptation of byte sources and sinks.

A byte source is anything with a readinto(buffer) method returning the
number of bytes placed in the buffer (0 at end of stream), eg. a file opened
in binary mode, sys.stdin.buffer or io.BytesIO. Objects that only have
read(n) are wrapped so they satisfy the same contract.

A byte sink is anything with a write(data) method, eg. a file opened in
binary mode or sys.stdout.buffer.
"""

import io
import pathlib
import sys
from contextlib import contextmanager

from _tokenio.errors import WrongFileModeError

DEFAULT_BUFFER_CAPACITY = 1 << 16


def check_capacity(capacity):
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        raise ValueError(
            f"buffer capacity must be a positive integer, got {capacity!r}"
        )


class ReadSource:
    """
    Wraps a stream which only has read(n) so it can be used as a byte source.
    """

    def __init__(self, stream):
        self.stream = stream

    def readinto(self, buffer):
        data = self.stream.read(len(buffer))
        if data is None:
            return None
        if isinstance(data, str):
            raise WrongFileModeError(
                f"Byte source {self.stream!r} returned text, open it in binary mode"
            )
        length = len(data)
        buffer[:length] = data
        return length


def as_byte_source(source):
    """
    :param source: A byte stream, bytes-like object or None for standard input.
    :returns: An object with a readinto method reading from source.
    """
    if source is None:
        return sys.stdin.buffer
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(source)
    if isinstance(source, io.TextIOBase):
        raise WrongFileModeError(
            f"Expected a byte stream, {source!r} was opened in text mode!"
        )
    if hasattr(source, "readinto"):
        return source
    if hasattr(source, "read"):
        return ReadSource(source)
    raise TypeError(f"Cannot read bytes from {source!r}")


def as_byte_sink(sink):
    """
    :param sink: A byte stream, or None for standard output.
    :returns: The stream to write bytes to.
    """
    if sink is None:
        return sys.stdout.buffer
    if isinstance(sink, io.TextIOBase):
        raise WrongFileModeError(
            f"Expected a byte stream, {sink!r} was opened in text mode!"
        )
    if not hasattr(sink, "write"):
        raise TypeError(f"Cannot write bytes to {sink!r}")
    return sink


@contextmanager
def opened(filelike, mode):
    """
    Opens filelike with the given mode if it is a path (str or
    pathlib.Path) and closes it when done, otherwise filelike is
    assumed to be an open stream and is given as is.
    """
    if isinstance(filelike, (str, pathlib.Path)):
        with open(filelike, mode) as stream:
            yield stream
    else:
        yield filelike

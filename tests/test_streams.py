import io
import sys

import pytest

from _tokenio.buffered_writer import BufferedWriter
from _tokenio.errors import WrongFileModeError
from _tokenio.streams import ReadSource, as_byte_sink, as_byte_source
from _tokenio.token_reader import TokenReader


class ReadOnlyStream:
    """
    A stream with read but without readinto.
    """

    def __init__(self, data):
        self.data = data

    def read(self, size):
        chunk, self.data = self.data[:size], self.data[size:]
        return chunk


def test_defaults_to_standard_streams():
    assert as_byte_source(None) is sys.stdin.buffer
    assert as_byte_sink(None) is sys.stdout.buffer


@pytest.mark.parametrize("data", [b"1 2", bytearray(b"1 2"), memoryview(b"1 2")])
def test_bytes_like_source(data):
    assert list(TokenReader(data).values(int)) == [1, 2]


def test_read_only_stream():
    source = as_byte_source(ReadOnlyStream(b"alpha beta gamma"))
    assert isinstance(source, ReadSource)

    reader = TokenReader(source, buffer_capacity=3)
    assert list(reader) == ["alpha", "beta", "gamma"]


def test_read_only_text_stream():
    class TextStream:
        def read(self, size):
            return "text"

    with pytest.raises(WrongFileModeError):
        TokenReader(TextStream()).next_word()


def test_text_mode_source():
    with pytest.raises(WrongFileModeError):
        TokenReader(io.StringIO("1 2 3"))


def test_text_mode_sink():
    with pytest.raises(WrongFileModeError):
        BufferedWriter(io.StringIO())


def test_not_a_stream():
    with pytest.raises(TypeError):
        as_byte_source(3)
    with pytest.raises(TypeError):
        as_byte_sink(object())

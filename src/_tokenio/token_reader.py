import io
import logging
from contextlib import contextmanager

import numpy as np

from _tokenio.char_class import DIGIT, DOT, GRAPHIC, MINUS, SIGNED_START
from _tokenio.errors import BufferShrinkError, EndOfInputError, IOFailureError
from _tokenio.streams import (
    DEFAULT_BUFFER_CAPACITY,
    as_byte_source,
    check_capacity,
    opened,
)
from _tokenio.typed_parsers import parser_for

logger = logging.getLogger(__name__)

_is_digit = DIGIT.__getitem__
_is_graphic = GRAPHIC.__getitem__
_is_signed_start = SIGNED_START.__getitem__

# Below the default limit of sys.get_int_max_str_digits()
DIGITS_PER_CONVERSION = 4000


class TokenReader:
    """
    Reads whitespace separated tokens from a byte source.

    The reader owns a fixed capacity buffer which is refilled from the
    source, with a single readinto call, whenever all of its bytes have
    been consumed. Tokens may span any number of refills.

    >>> reader = TokenReader.from_bytes(b"3 foo -7\\n")
    >>> reader.next_unsigned(), reader.next_word(), reader.next_signed()
    (3, 'foo', -7)
    >>> reader.next_line()
    ''
    >>> reader.has_more()
    False

    All next_* methods raise EndOfInputError if the source is exhausted
    before a token is found, and IOFailureError if the source fails.
    """

    def __init__(
        self,
        source=None,
        buffer_capacity=DEFAULT_BUFFER_CAPACITY,
        encoding="utf-8",
        decode_errors="surrogateescape",
    ):
        """
        :param source: A byte stream, bytes-like object or None for
            standard input, see _tokenio.streams.as_byte_source.
        :param buffer_capacity: The size in bytes of the read buffer.
        :param encoding: Encoding used to decode words and lines.
        :param decode_errors: Error handler used when decoding words and
            lines, the default keeps undecodable bytes as lone surrogates
            instead of raising.
        """
        check_capacity(buffer_capacity)
        self._source = as_byte_source(source)
        # at most one raw read per refill, so interactive input is not held
        # back waiting for a full buffer
        self._readinto = (
            getattr(self._source, "readinto1", None) or self._source.readinto
        )
        self._buffer = bytearray(buffer_capacity)
        self._view = memoryview(self._buffer)
        self._valid_length = 0
        self._cursor = 0
        self._exhausted = False
        self._token = bytearray()
        self.bytes_read = 0
        self.encoding = encoding
        self.decode_errors = decode_errors

    @classmethod
    def from_bytes(cls, data, **kwargs):
        return cls(io.BytesIO(data), **kwargs)

    @property
    def buffer_capacity(self):
        return len(self._buffer)

    @property
    def exhausted(self):
        """
        Whether the source has signaled end of stream. Bytes read before
        that may still be unconsumed, see has_more.
        """
        return self._exhausted

    def ensure_buffer(self):
        """
        Refill the buffer if all buffered bytes have been consumed.

        :returns: True if there is at least one unread byte in the buffer.
        """
        if self._cursor < self._valid_length:
            return True
        if self._exhausted:
            return False
        self._cursor = 0
        self._valid_length = 0
        try:
            count = self._readinto(self._view)
        except OSError as err:
            raise IOFailureError(f"Could not read from byte source: {err}") from err
        if count is None:
            raise IOFailureError(
                "Byte source had no data available, non-blocking streams "
                "are not supported"
            )
        self._valid_length = count
        self.bytes_read += count
        if count == 0:
            self._exhausted = True
            logger.debug("Byte source exhausted after %d bytes", self.bytes_read)
            return False
        return True

    def has_more(self):
        return self.ensure_buffer()

    def peek(self):
        """
        :returns: The next unread byte (as an int) without consuming it.
        """
        if not self.ensure_buffer():
            raise EndOfInputError("Reached end of input")
        return self._buffer[self._cursor]

    def advance(self):
        """
        Consume one byte, refilling the buffer if that was its last byte.
        """
        if not self.ensure_buffer():
            raise EndOfInputError("Cannot advance past end of input")
        self._cursor += 1
        if self._cursor == self._valid_length:
            self.ensure_buffer()

    def skip_while(self, predicate):
        """
        Consume bytes while predicate(byte) is true.

        :raises EndOfInputError: If the input ends before a byte for
            which predicate is false is found.
        """
        self._skip(predicate, True)

    def skip_until(self, predicate):
        """
        Consume bytes until predicate(byte) is true. The matching byte
        is not consumed.

        :raises EndOfInputError: If the input ends before a matching
            byte is found.
        """
        self._skip(predicate, False)

    def _skip(self, predicate, skip_matching):
        while self.ensure_buffer():
            buffer = self._buffer
            end = self._valid_length
            cursor = self._cursor
            if skip_matching:
                while cursor < end and predicate(buffer[cursor]):
                    cursor += 1
            else:
                while cursor < end and not predicate(buffer[cursor]):
                    cursor += 1
            self._cursor = cursor
            if cursor < end:
                return
        raise EndOfInputError("Reached end of input while looking for a token")

    def _take_while(self, predicate):
        """
        Append bytes to the token buffer while predicate(byte) is true,
        stops silently at end of input.
        """
        while self.ensure_buffer():
            buffer = self._buffer
            end = self._valid_length
            start = cursor = self._cursor
            while cursor < end and predicate(buffer[cursor]):
                cursor += 1
            self._token += self._view[start:cursor]
            self._cursor = cursor
            if cursor < end:
                return

    def _read_sign(self):
        """
        Skip to the start of a signed number and consume its sign.

        A '-' which is not directly followed by a digit is taken to be
        a separator and skipped.

        :returns: -1 if a minus sign was consumed, 1 otherwise.
        """
        while True:
            self.skip_until(_is_signed_start)
            if self.peek() != MINUS:
                return 1
            self.advance()
            if self.has_more() and DIGIT[self.peek()]:
                return -1

    def _read_digits(self):
        self._token.clear()
        self._take_while(_is_digit)
        token = self._token
        if len(token) <= DIGITS_PER_CONVERSION:
            return int(token)
        # int() refuses very long digit strings, so convert piecewise
        value = 0
        for start in range(0, len(token), DIGITS_PER_CONVERSION):
            chunk = token[start : start + DIGITS_PER_CONVERSION]
            value = value * 10 ** len(chunk) + int(chunk)
        return value

    def next_unsigned(self):
        """
        Skip to the next digit and read a run of digits as an int.
        """
        self.skip_until(_is_digit)
        return self._read_digits()

    def next_signed(self):
        """
        Read an int with an optional leading '-', see _read_sign.
        """
        sign = self._read_sign()
        return sign * self._read_digits()

    def next_float(self):
        """
        Read a number of the form [-]digits[.[digits]] as a float.

        The digits are collected and converted as a whole, so the result
        is the correctly rounded value of the decimal number regardless
        of how many fractional digits there are. Magnitudes beyond the
        range of float give inf.
        """
        sign = self._read_sign()
        token = self._token
        token.clear()
        self._take_while(_is_digit)
        if self.has_more() and self.peek() == DOT:
            token.append(DOT)
            self.advance()
            self._take_while(_is_digit)
        return sign * float(token)

    def next_word(self):
        """
        Read the next run of printable non-whitespace ascii characters.
        """
        self.skip_until(_is_graphic)
        self._token.clear()
        self._take_while(_is_graphic)
        return self._token.decode(self.encoding, self.decode_errors)

    def next_line(self):
        """
        Read up to the next newline or end of input. The newline is
        consumed but not part of the returned string.

        :raises EndOfInputError: If there are no bytes left.
        """
        if not self.ensure_buffer():
            raise EndOfInputError("No more lines in input")
        token = self._token
        token.clear()
        while self.ensure_buffer():
            start = self._cursor
            end = self._valid_length
            newline = self._buffer.find(b"\n", start, end)
            if newline < 0:
                token += self._view[start:end]
                self._cursor = end
            else:
                token += self._view[start:newline]
                self._cursor = newline
                self.advance()
                break
        return token.decode(self.encoding, self.decode_errors)

    def next_char(self):
        self.skip_until(_is_graphic)
        char = chr(self.peek())
        self.advance()
        return char

    # The fixed width variants wrap around on overflow,
    # see _tokenio.typed_parsers.narrow.

    def next_int8(self):
        return self.next_value(np.int8)

    def next_int16(self):
        return self.next_value(np.int16)

    def next_int32(self):
        return self.next_value(np.int32)

    def next_int64(self):
        return self.next_value(np.int64)

    def next_uint8(self):
        return self.next_value(np.uint8)

    def next_uint16(self):
        return self.next_value(np.uint16)

    def next_uint32(self):
        return self.next_value(np.uint32)

    def next_uint64(self):
        return self.next_value(np.uint64)

    def next_value(self, typ):
        """
        Read a value of the given type using the parser registered for
        it, see _tokenio.typed_parsers.register_parser.
        """
        return parser_for(typ)(self)

    def values(self, typ=str):
        """
        Generates values of the given type until the input is exhausted.
        """
        while True:
            try:
                value = self.next_value(typ)
            except EndOfInputError:
                return
            yield value

    def __iter__(self):
        return self.values(str)

    def set_buffer_capacity(self, capacity):
        """
        Replace the buffer with one of the given capacity, keeping all
        unread bytes.

        :raises BufferShrinkError: If capacity is less than the number of
            unread bytes in the buffer. The reader is left unchanged.
        """
        check_capacity(capacity)
        unread = self._valid_length - self._cursor
        if capacity < unread:
            raise BufferShrinkError(
                f"Cannot shrink buffer to {capacity} bytes, "
                f"it holds {unread} unread bytes"
            )
        buffer = bytearray(capacity)
        buffer[:unread] = self._view[self._cursor : self._valid_length]
        self._buffer = buffer
        self._view = memoryview(buffer)
        self._cursor = 0
        self._valid_length = unread
        logger.debug("Resized read buffer to %d bytes", capacity)


@contextmanager
def open_reader(filelike=None, **kwargs):
    """
    Create a TokenReader for the given file.

    >>> with open_reader("numbers.txt") as reader:
    ...     total = sum(reader.values(int))

    :param filelike: A path (str or pathlib.Path) which is opened in binary
        mode and closed afterwards, an opened byte stream or None for
        standard input.
    :param kwargs: Passed on to TokenReader.
    """
    with opened(filelike, "rb") as stream:
        yield TokenReader(stream, **kwargs)

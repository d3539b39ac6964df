import logging
import warnings
from contextlib import contextmanager

from _tokenio.errors import ImplicitFlushError, IOFailureError
from _tokenio.streams import (
    DEFAULT_BUFFER_CAPACITY,
    as_byte_sink,
    check_capacity,
    opened,
)

logger = logging.getLogger(__name__)


class BufferedWriter:
    """
    Collects output in memory and writes it to the sink, in a single write
    call, only when flushed.

    The writer should be used as a context manager, which flushes when
    leaving the block:

    >>> with BufferedWriter(sys.stdout.buffer) as out:
    ...     for i in range(3):
    ...         out.write_line(str(i))

    If the final flush fails, there is no caller to hand the error to, so
    the writer logs it, discards the output that could not be written and
    raises ImplicitFlushError from the original IOFailureError, see close.
    A writer which is garbage collected without being closed flushes then,
    with a ResourceWarning.
    """

    def __init__(
        self, sink=None, buffer_capacity=DEFAULT_BUFFER_CAPACITY, encoding="utf-8"
    ):
        """
        :param sink: A byte stream, or None for standard output.
        :param buffer_capacity: Expected size of the output in bytes,
            see set_buffer_capacity.
        :param encoding: Encoding used for text given to write.
        """
        # __del__ must find these even if the checks below fail
        self._closed = True
        self._buffer = bytearray()

        check_capacity(buffer_capacity)
        self._sink = as_byte_sink(sink)
        self._buffer_capacity = buffer_capacity
        self.encoding = encoding
        self._closed = False

    @property
    def pending(self):
        """
        The number of bytes waiting to be flushed.
        """
        return len(self._buffer)

    @property
    def buffer_capacity(self):
        return self._buffer_capacity

    @property
    def closed(self):
        return self._closed

    def set_buffer_capacity(self, capacity):
        """
        Hint at how many bytes will be written between flushes. The value
        is only recorded and reported by buffer_capacity, bytearray has no
        way to reserve storage ahead of time. Does not change the contents
        of the buffer, so a capacity less than the number of pending bytes
        is allowed and loses nothing.
        """
        check_capacity(capacity)
        self._buffer_capacity = capacity

    def write(self, text):
        """
        Append text (a str, encoded with the writer's encoding, or
        a bytes-like object) to the buffer.
        """
        if self._closed:
            raise ValueError("write to closed BufferedWriter")
        if isinstance(text, str):
            text = text.encode(self.encoding)
        self._buffer += text

    def write_line(self, text=""):
        self.write(text)
        self._buffer.append(10)

    def flush(self):
        """
        Write the entire buffer to the sink and empty it. Does nothing if
        the buffer is empty.

        :raises IOFailureError: If the sink raises OSError or accepts fewer
            bytes than given. Bytes the sink did not accept stay in the buffer.
        """
        pending = len(self._buffer)
        if not pending:
            return
        logger.debug("Flushing %d bytes", pending)
        try:
            written = self._sink.write(bytes(self._buffer))
        except OSError as err:
            raise IOFailureError(f"Could not write to sink: {err}") from err

        if isinstance(written, int) and written < pending:
            del self._buffer[:written]
            raise IOFailureError(
                f"Partial write, sink accepted {written} of {pending} bytes"
            )
        self._buffer.clear()

        sink_flush = getattr(self._sink, "flush", None)
        if sink_flush is not None:
            try:
                sink_flush()
            except OSError as err:
                raise IOFailureError(f"Could not flush sink: {err}") from err

    def close(self):
        """
        Flush and close the writer. The sink is not closed.

        :raises ImplicitFlushError: If the final flush failed. The output
            that was not written is discarded.
        """
        if self._closed:
            return
        self._closed = True
        try:
            self.flush()
        except IOFailureError as err:
            lost = self._discard()
            logger.error("Final flush failed, %d bytes of output lost: %s", lost, err)
            raise ImplicitFlushError(
                f"Final flush failed, {lost} bytes of output lost"
            ) from err

    def _discard(self):
        lost = len(self._buffer)
        self._buffer.clear()
        return lost

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __del__(self):
        if self._closed:
            return
        if self._buffer:
            warnings.warn(
                f"BufferedWriter with {len(self._buffer)} unflushed bytes "
                "was not closed, flushing on garbage collection",
                ResourceWarning,
                stacklevel=2,
            )
        self._closed = True
        try:
            self.flush()
        except IOFailureError as err:
            lost = self._discard()
            logger.critical(
                "Flush on garbage collection failed, %d bytes of output lost: %s",
                lost,
                err,
            )
            raise ImplicitFlushError(
                f"Flush on garbage collection failed, {lost} bytes of output lost"
            ) from err


@contextmanager
def open_writer(filelike=None, **kwargs):
    """
    Create a BufferedWriter for the given file, which is flushed
    when leaving the block.

    :param filelike: A path (str or pathlib.Path) which is opened in binary
        mode and closed afterwards, an opened byte stream or None for
        standard output.
    :param kwargs: Passed on to BufferedWriter.
    """
    with opened(filelike, "wb") as stream, BufferedWriter(stream, **kwargs) as writer:
        yield writer

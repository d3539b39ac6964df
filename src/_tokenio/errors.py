class TokenIOError(Exception):
    """
    Base class for all errors raised by tokenio.
    """

    pass


class EndOfInputError(TokenIOError, EOFError):
    """
    The byte source was exhausted before the requested token could be
    completed. Callers may treat it as "no more tokens".
    """

    pass


class IOFailureError(TokenIOError, OSError):
    """
    The underlying byte source or sink failed with an error that is not a
    clean end of stream, or a sink did not accept all of the bytes given to
    it. The original OSError, if any, is available as __cause__.
    """

    pass


class BufferShrinkError(TokenIOError, ValueError):
    """
    Thrown when the reader buffer is asked to shrink below the number of
    bytes it currently holds unread.
    """

    pass


class ImplicitFlushError(TokenIOError, RuntimeError):
    """
    Raised when the final flush of a BufferedWriter, performed when leaving
    its scope, fails. See BufferedWriter.__exit__.
    """

    pass


class WrongFileModeError(TokenIOError, TypeError):
    """
    Thrown when a text mode stream is given where a byte stream
    is required.
    """

    pass

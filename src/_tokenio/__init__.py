"""
Implementation of tokenio.

TokenReader (token_reader.py) reads whitespace separated tokens from a byte
source through a fixed size buffer, BufferedWriter (buffered_writer.py)
collects output until it is flushed. The two are independent of each other
and only share the stream handling in streams.py.

The byte source must be a byte stream (a file opened in binary mode,
sys.stdin.buffer, io.BytesIO, ...), text streams are rejected with
WrongFileModeError.
"""

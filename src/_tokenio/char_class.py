"""
ASCII character classes used by the tokenizer. Each class is a 256 entry
lookup table indexed by byte value, so that a class test is a single tuple
lookup.

Only ASCII is recognized: every byte >= 0x80 is neither digit, graphic nor
whitespace.
"""


def _table(members):
    members = frozenset(members)
    return tuple(b in members for b in range(256))


DIGIT = _table(b"0123456789")
GRAPHIC = _table(range(0x21, 0x7F))
WHITESPACE = _table(b" \t\n\v\f\r")
SIGNED_START = _table(b"-0123456789")

MINUS = ord("-")
DOT = ord(".")


def is_digit(byte):
    return DIGIT[byte]


def is_graphic(byte):
    return GRAPHIC[byte]


def is_whitespace(byte):
    return WHITESPACE[byte]


def is_signed_start(byte):
    """
    :returns: Whether the byte can start a signed number, ie. is a digit or
        a minus sign.
    """
    return SIGNED_START[byte]

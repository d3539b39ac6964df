"""
A parser reads one value of some type from a TokenReader. Parsers are
registered for the type they produce, which lets TokenReader.next_value
read any registered type without knowing about it in advance:

>>> @register_parser(Fraction)
... def parse_fraction(reader):
...     return Fraction(reader.next_signed(), reader.next_unsigned())
>>> TokenReader.from_bytes(b"-1 3").next_value(Fraction)
Fraction(-1, 3)

Parsers for int, float, str, bytes and the numpy integer and float
types are registered on import.
"""

import numpy as np

_parsers = {}

SIGNED_INTEGERS = (np.int8, np.int16, np.int32, np.int64)
UNSIGNED_INTEGERS = (np.uint8, np.uint16, np.uint32, np.uint64)
FLOATS = (np.float32, np.float64)


def register_parser(typ):
    """
    Decorator registering the decorated function as the parser for typ,
    replacing any previously registered parser for it.
    """

    def decorator(parser):
        _parsers[typ] = parser
        return parser

    return decorator


def parser_for(typ):
    if isinstance(typ, np.dtype):
        typ = typ.type
    try:
        return _parsers[typ]
    except KeyError as err:
        raise TypeError(f"No parser registered for {typ}") from err


def narrow(value, dtype):
    """
    Convert an int to a fixed width numpy integer.

    There is no range check: values outside the range of dtype wrap around
    modulo 2**bits (two's complement for signed types), which is what a C
    integer cast or numpy's astype does.

    >>> narrow(300, np.uint8)
    np.uint8(44)
    >>> narrow(128, np.int8)
    np.int8(-128)
    """
    dtype = np.dtype(dtype)
    unsigned = np.dtype(f"u{dtype.itemsize}")
    wrapped = value % (1 << (8 * dtype.itemsize))
    return np.array(wrapped, dtype=unsigned).astype(dtype)[()]


@register_parser(int)
def parse_int(reader):
    return reader.next_signed()


@register_parser(float)
def parse_float(reader):
    return reader.next_float()


@register_parser(str)
def parse_word(reader):
    return reader.next_word()


@register_parser(bytes)
def parse_raw_word(reader):
    return reader.next_word().encode("ascii")


def fixed_width_parser(dtype):
    if dtype in UNSIGNED_INTEGERS:

        def parser(reader):
            return narrow(reader.next_unsigned(), dtype)

    elif dtype in SIGNED_INTEGERS:

        def parser(reader):
            return narrow(reader.next_signed(), dtype)

    else:

        def parser(reader):
            return dtype(reader.next_float())

    return parser


for _dtype in SIGNED_INTEGERS + UNSIGNED_INTEGERS + FLOATS:
    register_parser(_dtype)(fixed_width_parser(_dtype))

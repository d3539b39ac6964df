from fractions import Fraction

import hypothesis.strategies as st
import numpy as np
import pytest
from hypothesis import given

from _tokenio.token_reader import TokenReader
from _tokenio.typed_parsers import (
    SIGNED_INTEGERS,
    UNSIGNED_INTEGERS,
    _parsers,
    narrow,
    parser_for,
    register_parser,
)


@pytest.fixture
def restore_parsers():
    saved = dict(_parsers)
    yield
    _parsers.clear()
    _parsers.update(saved)


@pytest.mark.parametrize(
    "value, dtype, expected",
    [
        (300, np.uint8, 44),
        (255, np.uint8, 255),
        (128, np.int8, -128),
        (-129, np.int8, 127),
        (-1, np.uint16, 65535),
        (2**32, np.uint32, 0),
        (2**31, np.int32, -(2**31)),
        (2**64 + 5, np.uint64, 5),
        (-(2**63) - 1, np.int64, 2**63 - 1),
    ],
)
def test_narrow_wraps_around(value, dtype, expected):
    result = narrow(value, dtype)
    assert result.dtype == np.dtype(dtype)
    assert int(result) == expected


@given(st.integers(min_value=-(2**31), max_value=2**31 - 1))
def test_narrow_in_range_is_exact(value):
    assert int(narrow(value, np.int32)) == value
    assert int(narrow(value, np.int64)) == value


@pytest.mark.parametrize("dtype", SIGNED_INTEGERS)
def test_fixed_width_signed(dtype):
    reader = TokenReader.from_bytes(b"-12 100")
    first = reader.next_value(dtype)
    assert type(first) is dtype
    assert first == -12
    assert reader.next_value(dtype) == 100


@pytest.mark.parametrize("dtype", UNSIGNED_INTEGERS)
def test_fixed_width_unsigned_ignores_sign(dtype):
    reader = TokenReader.from_bytes(b"-12 100")
    first = reader.next_value(dtype)
    assert type(first) is dtype
    assert first == 12
    assert reader.next_value(dtype) == 100


def test_fixed_width_methods():
    reader = TokenReader.from_bytes(b"200 200 70000 -70000 1 -1 5 5")

    assert reader.next_int8() == -56
    assert reader.next_uint8() == 200
    assert reader.next_int16() == 4464
    assert reader.next_uint16() == 4464
    assert reader.next_int32() == 1
    assert reader.next_uint32() == 1
    assert reader.next_int64() == 5
    assert reader.next_uint64() == 5


@pytest.mark.parametrize("dtype", [np.float32, np.float64])
def test_numpy_floats(dtype):
    value = TokenReader.from_bytes(b"-2.5").next_value(dtype)
    assert type(value) is dtype
    assert value == -2.5


def test_builtin_types():
    reader = TokenReader.from_bytes(b"-4 2.5 word raw")

    assert reader.next_value(int) == -4
    assert reader.next_value(float) == 2.5
    assert reader.next_value(str) == "word"
    assert reader.next_value(bytes) == b"raw"


def test_dtype_instances_are_accepted():
    assert parser_for(np.dtype("int16")) is parser_for(np.int16)


def test_unknown_type():
    with pytest.raises(TypeError, match="No parser registered"):
        TokenReader.from_bytes(b"1").next_value(complex)


@pytest.mark.usefixtures("restore_parsers")
def test_register_parser():
    @register_parser(Fraction)
    def parse_fraction(reader):
        return Fraction(reader.next_signed(), reader.next_unsigned())

    reader = TokenReader.from_bytes(b"-1 3\n2 4")
    assert list(reader.values(Fraction)) == [Fraction(-1, 3), Fraction(1, 2)]


@pytest.mark.usefixtures("restore_parsers")
def test_register_parser_replaces_builtin():
    @register_parser(str)
    def parse_line(reader):
        return reader.next_line()

    reader = TokenReader.from_bytes(b"two words\nthree more words\n")
    assert list(reader) == ["two words", "three more words"]

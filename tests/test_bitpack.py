import math

import pytest

from bitpack import pack_bits, unpack_bits
from errors import MalformedPayloadError


def test_pack_msb_first_with_zero_padding():
    packed, pad = pack_bits("101")
    assert packed == bytes([0b10100000])
    assert pad == 5


def test_pack_full_bytes_have_no_padding():
    packed, pad = pack_bits("1111000010101010")
    assert packed == bytes([0xF0, 0xAA])
    assert pad == 0


def test_pack_empty():
    assert pack_bits("") == (b"", 0)


@pytest.mark.parametrize("n", [0, 1, 7, 8, 9, 15, 16, 17, 100])
def test_packed_length_is_ceil_of_bits(n):
    packed, pad = pack_bits("1" * n)
    assert len(packed) == math.ceil(n / 8)
    assert (n + pad) % 8 == 0


def test_unpack_keeps_padding_by_default():
    assert unpack_bits(bytes([0b10100000])) == "10100000"


def test_unpack_truncates_to_bit_length():
    assert unpack_bits(bytes([0xF0, 0xAA]), 11) == "11110000101"
    assert unpack_bits(b"", 0) == ""


def test_unpack_bit_length_out_of_range():
    with pytest.raises(MalformedPayloadError):
        unpack_bits(bytes([0xFF]), 9)
    with pytest.raises(MalformedPayloadError):
        unpack_bits(bytes([0xFF]), -1)

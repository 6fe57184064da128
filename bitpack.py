from typing import List, Optional, Tuple

from errors import MalformedPayloadError


def pack_bits(bits: str) -> Tuple[bytes, int]:
    """
    Converts a string of '0'/'1' into packed bytes, MSB first
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for ch in bits:
        acc = (acc << 1) | (1 if ch == '1' else 0)
        acc_bits += 1
        if acc_bits == 8:
            out.append(acc & 0xFF)
            acc = 0
            acc_bits = 0

    pad_bits = 0
    if acc_bits != 0:
        pad_bits = 8 - acc_bits
        acc = acc << pad_bits
        out.append(acc & 0xFF)

    return bytes(out), pad_bits


def unpack_bits(packed: bytes, bit_length: Optional[int] = None) -> str:
    """
    Expand bytes back into a '0'/'1' string, 8 bits per byte MSB first.
    With bit_length set, trailing padding past that count is cut off
    """
    total_bits = len(packed) * 8
    if bit_length is not None:
        if bit_length < 0 or bit_length > total_bits:
            raise MalformedPayloadError(
                f"bit length {bit_length} does not fit in {len(packed)} bytes")
        total_bits = bit_length

    bits: List[str] = []
    bit_index = 0
    for byte in packed:
        for i in range(7, -1, -1):
            if bit_index >= total_bits:
                break
            bits.append('1' if (byte >> i) & 1 else '0')
            bit_index += 1

    return "".join(bits)

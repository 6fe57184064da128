"""
Compress / decompress entry points tying the tree, bit packing and tree text together.

Payload formats:
  raw     packed code bits only, ceil(bits / 8) bytes, the headerless layout of
          legacy encoded.bin files. Up to 7 zero padding bits reach the decoder and
          can come back as extra trailing symbols
  framed  4 byte big-endian count of meaningful bits, then the raw bytes.
          Decoding stops exactly at that count
"""

from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Dict, TextIO, Tuple

from bitpack import pack_bits, unpack_bits
from errors import MalformedPayloadError, PayloadTooLargeError
from huffman import (HuffmanTree, build_huffman_tree, freq_table,
                     generate_huffman_codes, huffman_decode, huffman_encode)
from treecodec import deserialize_tree, serialize_tree

BIT_LENGTH_BYTES = 4
MAX_FRAMED_BITS = (1 << (8 * BIT_LENGTH_BYTES)) - 1


class PayloadFormat(Enum):
    RAW = "raw"
    FRAMED = "framed"


DEFAULT_PAYLOAD_FORMAT = PayloadFormat.FRAMED


@dataclass
class CompressResult:
    payload: bytes
    tree_text: str
    tree: HuffmanTree
    code_map: Dict[str, str]
    bit_length: int
    pad_bits: int


def encode_payload(bits: str, payload_format: PayloadFormat = DEFAULT_PAYLOAD_FORMAT) -> Tuple[bytes, int]:
    packed, pad_bits = pack_bits(bits)
    if payload_format is PayloadFormat.FRAMED:
        if len(bits) > MAX_FRAMED_BITS:
            raise PayloadTooLargeError(
                f"{len(bits)} bits do not fit a {BIT_LENGTH_BYTES} byte length header")
        packed = len(bits).to_bytes(BIT_LENGTH_BYTES, "big") + packed
    return packed, pad_bits


def decode_payload(payload: bytes, payload_format: PayloadFormat = DEFAULT_PAYLOAD_FORMAT) -> str:
    if payload_format is PayloadFormat.RAW:
        return unpack_bits(payload)

    if len(payload) < BIT_LENGTH_BYTES:
        raise MalformedPayloadError(
            f"framed payload needs a {BIT_LENGTH_BYTES} byte header, got {len(payload)} bytes")
    bit_length = int.from_bytes(payload[:BIT_LENGTH_BYTES], "big")
    body = payload[BIT_LENGTH_BYTES:]
    if len(body) != (bit_length + 7) // 8:
        raise MalformedPayloadError(
            f"header says {bit_length} bits but body holds {len(body)} bytes")
    return unpack_bits(body, bit_length)


def compress_text(text: str, payload_format: PayloadFormat = DEFAULT_PAYLOAD_FORMAT) -> CompressResult:
    ft = freq_table(text)
    tree = build_huffman_tree(ft)
    code_map = generate_huffman_codes(tree)
    bits = huffman_encode(text, code_map)
    payload, pad_bits = encode_payload(bits, payload_format)
    return CompressResult(
        payload=payload,
        tree_text=serialize_tree(tree),
        tree=tree,
        code_map=code_map,
        bit_length=len(bits),
        pad_bits=pad_bits,
    )


def compress(text: str, payload_format: PayloadFormat = DEFAULT_PAYLOAD_FORMAT) -> Tuple[bytes, str]:
    result = compress_text(text, payload_format)
    return result.payload, result.tree_text


def decompress(tree_text: str, payload: bytes, payload_format: PayloadFormat = DEFAULT_PAYLOAD_FORMAT) -> str:
    tree = deserialize_tree(tree_text)
    bits = decode_payload(payload, payload_format)
    return huffman_decode(bits, tree, strict=payload_format is PayloadFormat.FRAMED)


def compress_to(text: str, payload_sink: BinaryIO, tree_sink: TextIO,
                payload_format: PayloadFormat = DEFAULT_PAYLOAD_FORMAT) -> CompressResult:
    result = compress_text(text, payload_format)
    payload_sink.write(result.payload)
    tree_sink.write(result.tree_text)
    return result


def decompress_to(tree_text: str, payload: bytes, text_sink: TextIO,
                  payload_format: PayloadFormat = DEFAULT_PAYLOAD_FORMAT) -> str:
    # Nothing reaches the sink unless the whole payload decoded
    decoded = decompress(tree_text, payload, payload_format)
    text_sink.write(decoded)
    return decoded

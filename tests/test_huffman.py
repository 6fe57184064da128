import itertools
import random

import pytest

from errors import CodeLookupError, EmptyInputError, TraversalError
from huffman import (ALPHABET, HuffmanTree, build_huffman_tree, filter_and_fold,
                     freq_table, generate_huffman_codes, huffman_decode, huffman_encode)


def test_filter_and_fold():
    assert filter_and_fold("Hello, World!\n") == "hello, world\n"
    assert filter_and_fold("a!b") == "ab"
    assert filter_and_fold("Tab\there\r\n") == "tabhere\n"
    assert filter_and_fold("café 42.") == "caf 42."
    # only A-Z fold, other letters that lowercase into ASCII are dropped
    assert filter_and_fold("\u212a\u0130") == ""
    assert filter_and_fold("\u212aelvin") == "elvin"


def test_freq_table_counts_folded_symbols_only():
    assert freq_table("ab ab\n") == {"a": 2, "b": 2, " ": 1, "\n": 1}
    assert freq_table("AaA?") == {"a": 3}
    assert freq_table("!!!") == {}


def test_ab_ab_newline_tree_shape_and_codes():
    tree = build_huffman_tree(freq_table("ab ab\n"))
    assert tree.structure() == (("\n", " "), ("a", "b"))
    assert tree.nodes[tree.root].frequency == 6
    assert generate_huffman_codes(tree) == {"\n": "00", " ": "01", "a": "10", "b": "11"}


def test_tie_break_ignores_symbol_value_once_inserted():
    # a, z and the merged (b, c) node all weigh 2, they pop in insertion order
    tree = build_huffman_tree({"z": 2, "b": 1, "c": 1, "a": 2})
    assert tree.structure() == (("b", "c"), ("a", "z"))


def test_zero_counts_are_ignored():
    tree = build_huffman_tree({"a": 3, "b": 0, "c": 1})
    assert tree.structure() == ("c", "a")


def test_empty_table_raises():
    with pytest.raises(EmptyInputError):
        build_huffman_tree({})
    with pytest.raises(EmptyInputError):
        build_huffman_tree({"a": 0})


def test_single_symbol_gets_one_bit_code():
    tree = build_huffman_tree({"a": 4})
    assert tree.structure() == "a"
    assert tree.is_leaf(tree.root)
    assert generate_huffman_codes(tree) == {"a": "0"}
    assert huffman_decode(huffman_encode("aaaa", {"a": "0"}), tree) == "aaaa"


def test_internal_nodes_have_two_children():
    tree = build_huffman_tree(freq_table("the quick brown fox jumps over the lazy dog 0123456789.,\n"))
    for node_id, node in enumerate(tree.nodes):
        if tree.is_leaf(node_id):
            assert node.symbol is not None
        else:
            assert node.left is not None and node.right is not None
            assert node.symbol is None


def test_codes_are_prefix_free():
    rng = random.Random(7)
    text = "".join(rng.choice(ALPHABET) for _ in range(2000))
    codes = generate_huffman_codes(build_huffman_tree(freq_table(text)))
    assert set(codes) == set(ALPHABET)
    for a, b in itertools.permutations(codes.values(), 2):
        assert not b.startswith(a)


def test_encode_skips_disallowed_characters():
    codes = {"a": "0", "b": "1"}
    assert huffman_encode("a!b", codes) == "01"
    assert huffman_encode("A?B", codes) == "01"


def test_encode_missing_code_raises_lookup_error():
    with pytest.raises(CodeLookupError):
        huffman_encode("abc", {"a": "0", "b": "1"})
    with pytest.raises(LookupError):
        huffman_encode("c", {"a": "0"})


def test_decode_walks_tree():
    tree = build_huffman_tree(freq_table("ab ab\n"))
    assert huffman_decode("101101101100" + "00", tree) == "ab ab\n\n"
    assert huffman_decode("1011011011", tree, strict=True) == "ab ab"


def test_decode_dangling_path():
    tree = build_huffman_tree(freq_table("ab ab\n"))
    assert huffman_decode("101", tree) == "a"
    with pytest.raises(TraversalError):
        huffman_decode("101", tree, strict=True)


def test_decode_rejects_bad_bits():
    tree = build_huffman_tree(freq_table("ab ab\n"))
    with pytest.raises(TraversalError):
        huffman_decode("10x1", tree)


def test_decode_single_leaf_tree_rejects_one_bits():
    tree = build_huffman_tree({"a": 3})
    with pytest.raises(TraversalError):
        huffman_decode("001", tree)


def test_decode_missing_child_raises():
    tree = HuffmanTree()
    a = tree.add_leaf("a")
    b = tree.add_leaf("b")
    tree.root = tree.add_internal(a, b)
    tree.nodes[tree.root].right = None  # damaged tree, right branch gone
    with pytest.raises(TraversalError):
        huffman_decode("01", tree)


def test_decode_empty_tree_raises():
    with pytest.raises(TraversalError):
        huffman_decode("0", HuffmanTree())


def test_round_trip_random_texts():
    rng = random.Random(1234)
    pool = ALPHABET + "ABCXYZ!?\t"
    for size in [1, 2, 3, 10, 100, 1000]:
        text = "".join(rng.choice(pool) for _ in range(size))
        expected = filter_and_fold(text)
        if not expected:
            continue
        tree = build_huffman_tree(freq_table(text))
        bits = huffman_encode(text, generate_huffman_codes(tree))
        assert huffman_decode(bits, tree, strict=True) == expected

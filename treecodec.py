"""
Text form of a Huffman tree.

Preorder walk, one whitespace separated token per node:
    #          absent child
    SPACE      leaf for ' '
    NEWLINE    leaf for '\\n'
    <char>     leaf for any other alphabet character
    *          internal node (placeholder, ignored when reading)

Example: the tree for "ab ab\\n" serializes to
    * * NEWLINE # # SPACE # # * a # # b # #
"""

from typing import Dict, Iterator, List, Optional, Set

from errors import MalformedTreeError
from huffman import ALPHABET, HuffmanTree

NULL_TOKEN = "#"
INTERNAL_TOKEN = "*"
_SYMBOL_TO_TOKEN: Dict[str, str] = {" ": "SPACE", "\n": "NEWLINE"}
_TOKEN_TO_SYMBOL: Dict[str, str] = {v: k for k, v in _SYMBOL_TO_TOKEN.items()}

# A full binary tree with len(ALPHABET) leaves is at most len(ALPHABET) - 1 deep,
# the extra level covers the '#' children under the deepest leaves
MAX_DEPTH = len(ALPHABET)


def symbol_token(symbol: str) -> str:
    return _SYMBOL_TO_TOKEN.get(symbol, symbol)


def token_symbol(token: str) -> Optional[str]: # None if token cannot name a leaf
    if token in _TOKEN_TO_SYMBOL:
        return _TOKEN_TO_SYMBOL[token]
    if len(token) == 1 and token in ALPHABET and not token.isspace():
        return token
    return None


def serialize_tree(tree: HuffmanTree) -> str:
    tokens: List[str] = []

    def walk(node_id):
        if node_id is None:
            tokens.append(NULL_TOKEN)
            return
        node = tree.nodes[node_id]
        if tree.is_leaf(node_id):
            tokens.append(symbol_token(node.symbol))
        else:
            tokens.append(INTERNAL_TOKEN)
        walk(node.left)
        walk(node.right)

    walk(tree.root)
    return " ".join(tokens) + "\n"


def deserialize_tree(text: str) -> HuffmanTree:
    """
    Rebuild a tree from serialize_tree output.

    Whether a node is a leaf or internal is decided by its children, not by its
    token. Raises MalformedTreeError when the token stream is truncated, has
    leftovers, or describes something that is not a full binary tree over
    distinct alphabet symbols
    """
    tokens: Iterator[str] = iter(text.split())
    tree = HuffmanTree()
    seen: Set[str] = set()

    def read(depth):
        token = next(tokens, None)
        if token is None:
            raise MalformedTreeError("tree description ends early")
        if token == NULL_TOKEN:
            return None
        if depth > MAX_DEPTH:
            raise MalformedTreeError(f"tree is deeper than {MAX_DEPTH} levels")

        left = read(depth + 1)
        right = read(depth + 1)

        if left is not None and right is not None:
            return tree.add_internal(left, right, frequency=0)
        if left is not None or right is not None:
            raise MalformedTreeError(f"node {token!r} has exactly one child")

        symbol = token_symbol(token)
        if symbol is None:
            raise MalformedTreeError(f"invalid leaf token {token!r}")
        if symbol in seen:
            raise MalformedTreeError(f"symbol {token!r} appears in more than one leaf")
        seen.add(symbol)
        return tree.add_leaf(symbol)

    root = read(0)
    if root is None:
        raise MalformedTreeError("tree description has no root")
    leftover = next(tokens, None)
    if leftover is not None:
        raise MalformedTreeError(f"unexpected token {leftover!r} after end of tree")

    tree.root = root
    return tree


def format_tree(tree: HuffmanTree) -> str: # indented dump, one node per line
    lines: List[str] = []

    def walk(node_id, depth):
        indent = "  " * depth
        if node_id is None:
            lines.append(indent + NULL_TOKEN)
            return
        node = tree.nodes[node_id]
        if tree.is_leaf(node_id):
            label = symbol_token(node.symbol)
        else:
            label = INTERNAL_TOKEN
        if node.frequency:
            label += f" ({node.frequency})"
        lines.append(indent + label)
        walk(node.left, depth + 1)
        walk(node.right, depth + 1)

    walk(tree.root, 0)
    return "\n".join(lines) + "\n"

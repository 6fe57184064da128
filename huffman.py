import string
from typing import Dict, List, Optional

from errors import CodeLookupError, EmptyInputError, TraversalError
from heap import MinPriorityQueue

ALPHABET = string.ascii_lowercase + string.digits + ".," + " \n" # every symbol the codec can carry
_ALLOWED = frozenset(ALPHABET)
_ASCII_FOLD = str.maketrans(string.ascii_uppercase, string.ascii_lowercase) # A-Z only, like C tolower


class HuffmanNode: # Node for Huffman tree, stored in HuffmanTree.nodes
    __slots__ = ("symbol", "frequency", "left", "right")

    def __init__(self, symbol, frequency, left=None, right=None):
        self.symbol = symbol        # character, or None for internal nodes
        self.frequency = frequency
        self.left = left            # arena index of the left child or None
        self.right = right


class HuffmanTree:
    """
    Arena of HuffmanNodes; children and root are indexes into `nodes`
    """

    def __init__(self):
        self.nodes: List[HuffmanNode] = []
        self.root: Optional[int] = None

    def add_leaf(self, symbol: str, frequency: int = 0) -> int:
        self.nodes.append(HuffmanNode(symbol, frequency))
        return len(self.nodes) - 1

    def add_internal(self, left: int, right: int, frequency: Optional[int] = None) -> int:
        if frequency is None:
            frequency = self.nodes[left].frequency + self.nodes[right].frequency
        self.nodes.append(HuffmanNode(None, frequency, left, right))
        return len(self.nodes) - 1

    def is_leaf(self, node_id: int) -> bool:
        node = self.nodes[node_id]
        return node.left is None and node.right is None

    def structure(self, node_id: Optional[int] = None):
        """
        Nested tuples describing shape and symbols only (frequencies are ignored).
        A leaf is its symbol, an internal node is (left, right)
        """
        if node_id is None:
            node_id = self.root
        if node_id is None:
            return None
        node = self.nodes[node_id]
        if self.is_leaf(node_id):
            return node.symbol
        return (self.structure(node.left), self.structure(node.right))


def filter_and_fold(text: str) -> str: # lowercase A-Z, drop anything outside ALPHABET
    return "".join(ch for ch in text.translate(_ASCII_FOLD) if ch in _ALLOWED)


def freq_table(text: str) -> Dict[str, int]:
    ft: Dict[str, int] = {}
    for ch in filter_and_fold(text):
        ft[ch] = ft.get(ch, 0) + 1
    return ft


def build_huffman_tree(frequency_table: Dict[str, int]) -> HuffmanTree: # frequency_table: dict of symbol -> frequency
    tree = HuffmanTree()
    priority_queue = MinPriorityQueue()

    # Leaves go in by ascending symbol code, which fixes the tie-break order
    for symbol in sorted(frequency_table, key=ord):
        frequency = frequency_table[symbol]
        if frequency > 0:
            priority_queue.push(tree.add_leaf(symbol, frequency), frequency)

    if len(priority_queue) == 0:
        raise EmptyInputError("no encodable symbols in input")

    # Build the tree
    while len(priority_queue) > 1:
        left = priority_queue.pop()
        right = priority_queue.pop()
        merged = tree.add_internal(left, right) # internal node with combined frequency
        priority_queue.push(merged, tree.nodes[merged].frequency)

    tree.root = priority_queue.pop() # a single symbol leaves the lone leaf as root
    return tree


def generate_huffman_codes(tree: HuffmanTree) -> Dict[str, str]:
    codes: Dict[str, str] = {}
    if tree.root is None:
        raise EmptyInputError("tree has no root")

    # Lone leaf root has no edge to label, give it a one bit code
    if tree.is_leaf(tree.root):
        codes[tree.nodes[tree.root].symbol] = "0"
        return codes

    def generate_codes_helper(node_id, current_code):
        if node_id is None:
            return

        node = tree.nodes[node_id]
        # Leaf node -> assign code
        if tree.is_leaf(node_id):
            codes[node.symbol] = current_code
            return

        generate_codes_helper(node.left, current_code + "0")
        generate_codes_helper(node.right, current_code + "1")

    generate_codes_helper(tree.root, "")
    return codes


def huffman_encode(text: str, code_map: Dict[str, str]) -> str:
    parts: List[str] = []
    for ch in filter_and_fold(text):
        code = code_map.get(ch)
        if code is None:
            raise CodeLookupError(f"no code for symbol {ch!r}")
        parts.append(code)
    return "".join(parts)


def huffman_decode(bitstring: str, tree: HuffmanTree, strict: bool = False) -> str:
    """
    Walk the tree once per bit and emit a symbol at every leaf.

    Running out of bits part way down a path is allowed unless `strict` is set,
    in which case the bit count is known to be exact and a dangling path means
    the payload does not belong to this tree
    """
    if tree.root is None:
        raise TraversalError("cannot decode with an empty tree")

    nodes = tree.nodes
    root = tree.root
    decoded: List[str] = []

    if tree.is_leaf(root):
        symbol = nodes[root].symbol
        for position, bit in enumerate(bitstring):
            if bit != "0":
                raise TraversalError(f"bit {position}: {bit!r} has no branch in a single-symbol tree")
            decoded.append(symbol)
        return "".join(decoded)

    current = root
    for position, bit in enumerate(bitstring):
        if bit == "0":
            child = nodes[current].left
        elif bit == "1":
            child = nodes[current].right
        else:
            raise TraversalError(f"bit {position}: invalid bit {bit!r}")

        if child is None:
            raise TraversalError(f"bit {position}: no child to descend into")

        if nodes[child].left is None and nodes[child].right is None: # reached a leaf
            decoded.append(nodes[child].symbol)
            current = root
        else:
            current = child

    if strict and current != root:
        raise TraversalError("bitstream ends in the middle of a code")

    return "".join(decoded)

"""
Command line front end for the text codec

How to run:
  python cli.py compress script.txt
  python cli.py compress script.txt --payload encoded.bin --tree tree.txt --payload-format raw
  python cli.py decompress --payload encoded.bin --tree tree.txt --output result.txt
  python cli.py show-tree tree.txt

An omitted input file name is asked for on the terminal.
Exit status is 0 on success and 1 when the input cannot be read or the codec rejects it.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from codec import DEFAULT_PAYLOAD_FORMAT, PayloadFormat, compress_text, decompress
from errors import HuffmanError
from huffman import filter_and_fold
from treecodec import deserialize_tree, format_tree, symbol_token

DEFAULT_PAYLOAD_FILE = "encoded.bin"
DEFAULT_TREE_FILE = "tree.txt"
DEFAULT_RESULT_FILE = "result.txt"


class Reporter: # status lines on stdout, silenced by --quiet
    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def __call__(self, message: str) -> None:
        if not self.quiet:
            print(message)


def ask_if_missing(value: Optional[str], prompt: str) -> str:
    if value:
        return value
    return input(prompt).strip()


def cmd_compress(args: argparse.Namespace, say: Reporter) -> int:
    source = Path(ask_if_missing(args.input, "Enter the name of the file: "))
    # newline="" keeps a stray \r as-is so the alphabet filter drops it
    with open(source, encoding="utf-8", errors="replace", newline="") as f:
        text = f.read()
    say("File read successfully.")

    payload_format = PayloadFormat(args.payload_format)
    result = compress_text(text, payload_format)

    if args.verbose:
        say("Dictionary built successfully. Contents:")
        for symbol in sorted(result.code_map, key=lambda s: (len(result.code_map[s]), s)):
            say(f"  {symbol_token(symbol):<8} {result.code_map[symbol]}")
    say("Text encoded successfully.")

    payload_path = Path(args.payload)
    payload_path.write_bytes(result.payload)
    say("Encoded text written to file successfully.")
    try:
        Path(args.tree).write_text(result.tree_text, encoding="ascii")
    except OSError:
        # a payload without its tree cannot be decoded
        payload_path.unlink(missing_ok=True)
        raise
    say("Huffman tree written to file successfully.")

    kept = len(filter_and_fold(text))
    ratio = len(result.payload) / max(1, kept)
    say(f"Symbols encoded: {kept}  bits: {result.bit_length}  padding: {result.pad_bits}  "
        f"payload bytes: {len(result.payload)}  ratio: {ratio:.3f}")
    say("Compression completed.")
    return 0


def cmd_decompress(args: argparse.Namespace, say: Reporter) -> int:
    payload_path = Path(ask_if_missing(args.payload, "Enter the name of the encoded file: "))
    tree_path = Path(ask_if_missing(args.tree, "Enter the name of the tree file: "))

    tree_text = tree_path.read_text(encoding="ascii")
    if args.verbose:
        say("Deserialized Huffman Tree:")
        say(format_tree(deserialize_tree(tree_text)).rstrip("\n"))

    payload = payload_path.read_bytes()
    say("Encoded text read from file successfully.")

    decoded = decompress(tree_text, payload, PayloadFormat(args.payload_format))

    with open(args.output, "w", encoding="ascii", newline="") as f:
        f.write(decoded)
    say("Decoded text written to file successfully.")
    say("Decompression completed.")
    return 0


def cmd_show_tree(args: argparse.Namespace, say: Reporter) -> int:
    tree_path = Path(ask_if_missing(args.tree, "Enter the name of the tree file: "))
    tree = deserialize_tree(tree_path.read_text(encoding="ascii"))
    # The dump is the command's output, --quiet does not apply
    print(format_tree(tree), end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Huffman codec for lowercase text, digits, '.', ',', space and newline")
    ap.add_argument("--quiet", action="store_true", help="Suppress status messages")
    sub = ap.add_subparsers(dest="command", required=True)

    formats = [f.value for f in PayloadFormat]

    c = sub.add_parser("compress", help="Encode a text file into a payload and a tree file")
    c.add_argument("input", nargs="?", help="Text file to compress (asked for if omitted)")
    c.add_argument("--payload", default=DEFAULT_PAYLOAD_FILE, help="Output payload file")
    c.add_argument("--tree", default=DEFAULT_TREE_FILE, help="Output tree description file")
    c.add_argument("--payload-format", choices=formats, default=DEFAULT_PAYLOAD_FORMAT.value,
                   help="'framed' stores the bit count, 'raw' matches the headerless legacy files")
    c.add_argument("--verbose", action="store_true", help="Print the code table")
    c.set_defaults(func=cmd_compress)

    d = sub.add_parser("decompress", help="Decode a payload using its tree file")
    d.add_argument("--payload", default=None, help=f"Payload file (e.g. {DEFAULT_PAYLOAD_FILE})")
    d.add_argument("--tree", default=None, help=f"Tree description file (e.g. {DEFAULT_TREE_FILE})")
    d.add_argument("--output", default=DEFAULT_RESULT_FILE, help="Decoded text output file")
    d.add_argument("--payload-format", choices=formats, default=DEFAULT_PAYLOAD_FORMAT.value,
                   help="Must match the format used when compressing")
    d.add_argument("--verbose", action="store_true", help="Print the deserialized tree")
    d.set_defaults(func=cmd_decompress)

    t = sub.add_parser("show-tree", help="Print a tree description as an indented tree")
    t.add_argument("tree", nargs="?", help="Tree description file (asked for if omitted)")
    t.set_defaults(func=cmd_show_tree)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    say = Reporter(args.quiet)
    try:
        return args.func(args, say)
    except (HuffmanError, OSError, UnicodeError, EOFError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

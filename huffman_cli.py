#!/usr/bin/env python3
"""
Command line front end for the Huffman text codec.

    huffman compress notes.txt              # writes notes.huff
    huffman compress notes.txt --show-codes --show-tree
    huffman decompress notes.huff           # writes notes_decompressed.txt
"""
import argparse
import sys
from pathlib import Path

from loguru import logger

import huffman_config
from huffman_service import HuffmanService, code_table_rows, tree_edges


def compressed_name(path):
    path = Path(path)
    if path.suffix == huffman_config.TEXT_SUFFIX:
        return path.with_suffix(huffman_config.COMPRESSED_SUFFIX)
    return path.with_name(path.name + huffman_config.COMPRESSED_SUFFIX)


def decompressed_name(path):
    path = Path(path)
    if path.suffix == huffman_config.COMPRESSED_SUFFIX:
        return path.with_name(path.stem + huffman_config.DECOMPRESSED_SUFFIX)
    return path.with_name(path.name + huffman_config.DECOMPRESSED_SUFFIX)


def print_code_table(result):
    print(f"{'Char':<6} {'Frequency':>9}  {'Code':<24} {'Bits':>4}")
    for char, freq, code, bits in code_table_rows(result.code_map, result.frequency_map):
        print(f"{char:<6} {freq:>9}  {code:<24} {bits:>4}")


def print_tree(result):
    for parent_id, bit, child_id, label in tree_edges(result.tree):
        suffix = f" {label}" if label is not None else ""
        print(f"{parent_id} -{bit}-> {child_id}{suffix}")


def run_compress(args, service):
    source = Path(args.input)
    with open(source, encoding=huffman_config.TEXT_ENCODING, newline="") as f:
        text = f.read()
    if not text:
        logger.error("File is empty: {}", source)
        return 1

    result = service.compress(text)
    target = Path(args.output) if args.output else compressed_name(source)
    target.write_bytes(service.create_container_buffer(result))
    logger.info("Compressed {} -> {}", source, target)

    print(result.summary())
    if args.show_codes:
        print()
        print_code_table(result)
    if args.show_tree:
        print()
        print_tree(result)
    return 0


def run_decompress(args, service):
    source = Path(args.input)
    decoded, info = service.decompress_container(source.read_bytes())
    if not decoded.success:
        logger.error("{}: {}", decoded.error, source)
        return 1

    target = Path(args.output) if args.output else decompressed_name(source)
    with open(target, "w", encoding=huffman_config.TEXT_ENCODING, newline="") as f:
        f.write(decoded.text)
    logger.info("Decompressed {} -> {}", source, target)

    if info is not None:
        print(info.summary())
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="huffman", description="Compress and decompress text with Huffman coding"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help=f"Log level for stderr (default: $HUFFMAN_LOG_LEVEL or {huffman_config.LOG_LEVEL})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compress_parser = subparsers.add_parser("compress", help="Compress a text file to .huff")
    compress_parser.add_argument("input", help="Text file to compress")
    compress_parser.add_argument("-o", "--output", help="Output path (default: <name>.huff)")
    compress_parser.add_argument(
        "--show-codes", action="store_true", help="Print the code table"
    )
    compress_parser.add_argument(
        "--show-tree", action="store_true", help="Print the tree as parent -bit-> child edges"
    )
    compress_parser.set_defaults(handler=run_compress)

    decompress_parser = subparsers.add_parser("decompress", help="Restore a .huff file")
    decompress_parser.add_argument("input", help="Compressed .huff file")
    decompress_parser.add_argument(
        "-o", "--output", help="Output path (default: <name>_decompressed.txt)"
    )
    decompress_parser.set_defaults(handler=run_decompress)

    return parser


def configure_logging(level):
    logger.remove()
    logger.add(sys.stderr, level=(level or huffman_config.LOG_LEVEL).upper())


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        return args.handler(args, HuffmanService())
    except (OSError, UnicodeDecodeError) as e:
        logger.error("{}", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())

# // filename: huffman_service.py

from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

import huffman_container
from huffman_bits import encode_symbols, unpack_bits
from huffman_config import TEXT_ENCODING
from huffman_core import HuffmanLogic, HuffmanNode, iter_nodes, parent_lookup, tree_depth


@dataclass
class CompressionResult:
    compressed_data: bytes = b""
    code_map: dict = field(default_factory=dict)
    original_size: int = 0
    compressed_size: int = 0
    compression_ratio: float = 0.0
    tree: Optional[HuffmanNode] = None
    frequency_map: dict = field(default_factory=dict)
    padding_bits: int = 0

    @property
    def is_expansion(self):
        return self.compression_ratio < 0

    @property
    def unique_symbols(self):
        return len(self.frequency_map)

    def summary(self):
        label = "Size Increase" if self.is_expansion else "Space Saved"
        return (
            f"Original Size: {format_bytes(self.original_size)}\n"
            f"Compressed Size: {format_bytes(self.compressed_size)}\n"
            f"{label}: {self.compression_ratio:.1f}%\n"
            f"Unique Chars: {self.unique_symbols}\n"
            f"Tree Depth: {tree_depth(self.tree)}"
        )


@dataclass
class DecompressionResult:
    text: str = ""
    success: bool = True
    error: Optional[str] = None


def size_metrics(text, compressed_size):
    """Return (original_size, compression_ratio) for text packed into compressed_size bytes."""
    # Lone surrogates count as the 3 bytes of their replacement character
    original_size = len(text.encode(TEXT_ENCODING, "surrogatepass"))
    if original_size == 0:
        return 0, 0.0
    return original_size, (original_size - compressed_size) / original_size * 100


class HuffmanService:
    def __init__(self):
        self.logic = HuffmanLogic()

    def build_tree(self, frequency_map):
        return self.logic.build_tree(frequency_map)

    def compress(self, data):
        if not data:
            return CompressionResult()

        frequency_map = self.logic.count_frequencies(data)
        tree = self.logic.build_tree(frequency_map)
        codes = self.logic.generate_codes(tree)

        payload, padding = encode_symbols(data, codes)
        original_size, ratio = size_metrics(data, len(payload))
        logger.debug(
            "Compressed {} bytes to {} bytes ({} padding bits)",
            original_size,
            len(payload),
            padding,
        )
        return CompressionResult(
            compressed_data=payload,
            code_map=codes,
            original_size=original_size,
            compressed_size=len(payload),
            compression_ratio=ratio,
            tree=tree,
            frequency_map=dict(frequency_map),
            padding_bits=padding,
        )

    def decompress(self, compressed_data, tree, padding_bits):
        if tree is None or len(compressed_data) == 0:
            return DecompressionResult()

        try:
            bits = unpack_bits(compressed_data, padding_bits)
        except (TypeError, ValueError) as e:
            return DecompressionResult(text="", success=False, error=str(e))

        decoded = []
        node = tree
        for bit in bits:
            # One-symbol alphabet: no branch to take, each bit is one symbol
            if node.is_single_wrapper():
                decoded.append(node.left.char)
                continue

            node = node.right if bit else node.left
            if node is None:
                return DecompressionResult(
                    text="", success=False, error="bit stream does not match tree"
                )
            if node.is_leaf():
                decoded.append(node.char)
                node = tree

        if node is not tree:
            return DecompressionResult(
                text="", success=False, error="bit stream ends inside a code"
            )
        return DecompressionResult(text="".join(decoded))

    def create_container_buffer(self, result):
        return huffman_container.create_container_buffer(
            result.code_map,
            result.padding_bits,
            result.frequency_map,
            result.compressed_data,
        )

    def parse_container_buffer(self, data):
        return huffman_container.parse_container_buffer(data)

    def decompress_container(self, data):
        """Decode a container buffer.

        Returns (DecompressionResult, CompressionResult or None). The second
        value describes the container: the rebuilt tree, its maps and sizes
        measured against the decoded text.
        """
        parsed = self.parse_container_buffer(data)
        if parsed is None:
            return (
                DecompressionResult(
                    text="", success=False, error="Invalid compressed file format"
                ),
                None,
            )

        tree = self.build_tree(parsed.frequency_map)
        result = self.decompress(parsed.compressed_data, tree, parsed.padding_bits)
        if not result.success:
            return result, None

        original_size, ratio = size_metrics(result.text, len(parsed.compressed_data))
        return result, CompressionResult(
            compressed_data=parsed.compressed_data,
            code_map=parsed.code_map,
            original_size=original_size,
            compressed_size=len(parsed.compressed_data),
            compression_ratio=ratio,
            tree=tree,
            frequency_map=parsed.frequency_map,
            padding_bits=parsed.padding_bits,
        )


def display_char(char):
    if char == " ":
        return "␣"
    if char == "\n":
        return "↵"
    if char == "\t":
        return "→"
    if char == "\r":
        return "⏎"
    if char and ord(char[0]) < 32:
        return f"\\x{ord(char[0]):02x}"
    return char


def format_bytes(size):
    if size == 0:
        return "0 B"
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} KB"
    return f"{size / (1024 * 1024):.2f} MB"


def code_table_rows(code_map, frequency_map):
    """Rows of (display char, frequency, code, bit length), most frequent first."""
    entries = sorted(
        code_map.items(), key=lambda item: frequency_map.get(item[0], 0), reverse=True
    )
    return [
        (display_char(char), frequency_map.get(char, 0), code, len(code))
        for char, code in entries
    ]


def tree_edges(tree):
    """Edges as (parent id, bit, child id, display char or None), parents first."""
    nodes = {node.node_id: node for node in iter_nodes(tree)}
    edges = []
    for child_id, parent_id in parent_lookup(tree).items():
        parent, child = nodes[parent_id], nodes[child_id]
        bit = "0" if parent.left is child else "1"
        label = display_char(child.char) if child.is_leaf() else None
        edges.append((parent_id, bit, child_id, label))
    return edges


_default_service = HuffmanService()

compress = _default_service.compress
decompress = _default_service.decompress
build_tree = _default_service.build_tree
create_container_buffer = _default_service.create_container_buffer
parse_container_buffer = _default_service.parse_container_buffer
decompress_container = _default_service.decompress_container

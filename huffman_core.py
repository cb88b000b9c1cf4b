# filename: huffman_core.py

import heapq
from collections import Counter
from itertools import count

from loguru import logger


class HuffmanNode:
    def __init__(self, char, freq, left=None, right=None, node_id=None):
        self.char = char
        self.freq = freq
        self.left = left
        self.right = right
        self.node_id = node_id

    def __lt__(self, other):
        return self.freq < other.freq

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode({self.char!r}, {self.freq})"
        return f"HuffmanNode(None, {self.freq}, id={self.node_id})"

    def is_leaf(self):
        return self.char is not None

    def is_single_wrapper(self):
        """True for the synthetic root that wraps a one-symbol alphabet."""
        return (
            not self.is_leaf()
            and self.right is None
            and self.left is not None
            and self.left.is_leaf()
        )


class MinHeap:
    """Min-ordered queue of tree nodes.

    Entries are (freq, sequence, node); the sequence number makes equal
    frequencies come out in insertion order.
    """

    def __init__(self):
        self._heap = []
        self._sequence = count()

    def insert(self, node):
        heapq.heappush(self._heap, (node.freq, next(self._sequence), node))

    def extract_min(self):
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]

    def size(self):
        return len(self._heap)

    def __len__(self):
        return len(self._heap)


class HuffmanLogic:
    def count_frequencies(self, data):
        return Counter(data)

    def build_tree(self, freqs):
        if not freqs:
            return None

        # Labels only; local so separate builds never share a counter
        ids = count()

        def next_id():
            return f"node_{next(ids)}"

        priority_queue = MinHeap()
        for char, freq in freqs.items():
            priority_queue.insert(HuffmanNode(char, freq, node_id=next_id()))

        if priority_queue.size() == 1:
            leaf = priority_queue.extract_min()
            return HuffmanNode(None, leaf.freq, left=leaf, node_id=next_id())

        # Iteratively merge the two lightest nodes into one binary tree
        while priority_queue.size() > 1:
            left = priority_queue.extract_min()
            right = priority_queue.extract_min()
            merged = HuffmanNode(
                None, left.freq + right.freq, left=left, right=right, node_id=next_id()
            )
            priority_queue.insert(merged)

        root = priority_queue.extract_min()
        logger.debug("Built Huffman tree: {} symbols, weight {}", len(freqs), root.freq)
        return root

    def generate_codes(self, node, current_code="", codes=None):
        if codes is None:
            codes = {}
        if node is None:
            return codes
        if node.is_leaf():
            codes[node.char] = current_code or "0"
            return codes
        if node.left is not None:
            self.generate_codes(node.left, current_code + "0", codes)
        if node.right is not None:
            self.generate_codes(node.right, current_code + "1", codes)
        return codes


def iter_nodes(tree):
    """Yield every node of the tree in pre-order."""
    stack = [tree] if tree is not None else []
    while stack:
        node = stack.pop()
        yield node
        if node.right is not None:
            stack.append(node.right)
        if node.left is not None:
            stack.append(node.left)


def parent_lookup(tree):
    """Map each child's node_id to its parent's node_id.

    Nodes hold no back references; anything that needs to walk upwards
    (drawing edges, for instance) builds this table once instead.
    """
    parents = {}
    for node in iter_nodes(tree):
        for child in (node.left, node.right):
            if child is not None:
                parents[child.node_id] = node.node_id
    return parents


def tree_depth(node):
    """Number of levels in the tree, 0 for an empty tree."""
    depth = 0
    stack = [(node, 1)] if node is not None else []
    while stack:
        current, level = stack.pop()
        depth = max(depth, level)
        for child in (current.left, current.right):
            if child is not None:
                stack.append((child, level + 1))
    return depth

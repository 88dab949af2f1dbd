"""Tree header: pre-order transmission of the Huffman tree.

Layout (8 bits per entry, no weights, no length prefix):
  - leaf            -> its symbol byte
  - internal node   -> NODE_MARKER, then child0 subtree, then child1 subtree
  - the root writes no marker: the header starts directly with its children

The header is self-terminating: the reader stops when every child slot below
the root is filled.

Single-symbol trees (root is a leaf) are sent as a root with two identical
leaves. Real trees never repeat a symbol, so the reader turns that shape back
into a leaf root. An empty tree is sent the same way with symbol 0x00.

Known limitation: leaf bytes are not escaped, so a leaf holding NODE_MARKER
would be read back as an internal node. ``write_tree`` refuses such trees
(SentinelCollision) instead of emitting a header nobody can read.
"""

from __future__ import annotations

from typing import List, Tuple

from shuff.errors import CorruptHeader, SentinelCollision

from .bitstream import BitReader, BitWriter
from .tree import HuffmanTree

NODE_MARKER = 0x07
EMPTY_TREE_SYMBOL = 0x00

# 256 leaves at most => 255 internal nodes, the root carries no marker
MAX_MARKERS = 254


def write_tree(tree: HuffmanTree, writer: BitWriter) -> None:
    for leaf in tree.leaves():
        if tree[leaf].symbol == NODE_MARKER:
            raise SentinelCollision(
                f"il byte 0x{NODE_MARKER:02x} coincide con il marker dei nodi interni: "
                "header non rappresentabile"
            )

    if tree.root is None:
        writer.write(EMPTY_TREE_SYMBOL, 8)
        writer.write(EMPTY_TREE_SYMBOL, 8)
        return

    root = tree[tree.root]
    if root.is_leaf:
        writer.write(root.symbol, 8)  # type: ignore[arg-type]
        writer.write(root.symbol, 8)  # type: ignore[arg-type]
        return

    _write_subtree(tree, tree.root, writer, is_root=True)


def _write_subtree(tree: HuffmanTree, idx: int, writer: BitWriter, is_root: bool) -> None:
    node = tree[idx]
    if node.is_leaf:
        writer.write(node.symbol, 8)  # type: ignore[arg-type]
        return

    if not is_root:
        writer.write(NODE_MARKER, 8)
    _write_subtree(tree, node.child0, writer, is_root=False)  # type: ignore[arg-type]
    _write_subtree(tree, node.child1, writer, is_root=False)  # type: ignore[arg-type]


def read_tree(reader: BitReader) -> HuffmanTree:
    """Rebuild the tree from the header. Node ids follow creation order, root is 0."""
    tree = HuffmanTree()
    tree.root = tree.add_internal()

    # open child slots, popped in pre-order
    pending: List[Tuple[int, int]] = [(tree.root, 1), (tree.root, 0)]
    markers = 0

    while pending:
        parent, slot = pending.pop()
        b = reader.read_byte()

        if b == NODE_MARKER:
            markers += 1
            if markers > MAX_MARKERS:
                raise CorruptHeader(f"header albero: troppi nodi interni (> {MAX_MARKERS})")
            child = tree.add_internal(parent=parent)
            pending.append((child, 1))
            pending.append((child, 0))
        else:
            child = tree.add_leaf(b, parent=parent)

        if slot == 0:
            tree[parent].child0 = child
        else:
            tree[parent].child1 = child

    return _collapse_single_symbol(tree)


def _collapse_single_symbol(tree: HuffmanTree) -> HuffmanTree:
    root = tree[tree.root]  # type: ignore[index]
    c0 = tree[root.child0]  # type: ignore[index]
    c1 = tree[root.child1]  # type: ignore[index]

    if c0.is_leaf and c1.is_leaf and c0.symbol == c1.symbol:
        single = HuffmanTree()
        single.root = single.add_leaf(c0.symbol)  # type: ignore[arg-type]
        return single

    symbols = [tree[i].symbol for i in tree.leaves()]
    if len(set(symbols)) != len(symbols):
        raise CorruptHeader("header albero: simbolo foglia ripetuto")
    return tree

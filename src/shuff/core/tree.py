from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .freq import FrequencyTable

# -------------------
# Albero Huffman come arena di nodi (indici interi, niente riferimenti diretti)
# -------------------
@dataclass
class HuffmanNode:
    weight: int = 0
    symbol: Optional[int] = None  # 0-255 per foglie, None per interni
    parent: Optional[int] = None
    child0: Optional[int] = None
    child1: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return self.symbol is not None


@dataclass
class HuffmanTree:
    nodes: List[HuffmanNode] = field(default_factory=list)
    root: Optional[int] = None

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, idx: int) -> HuffmanNode:
        return self.nodes[idx]

    def add_leaf(self, symbol: int, weight: int = 0, parent: Optional[int] = None) -> int:
        if not 0 <= symbol <= 0xFF:
            raise ValueError(f"simbolo fuori range: {symbol}")
        self.nodes.append(HuffmanNode(weight=weight, symbol=symbol, parent=parent))
        return len(self.nodes) - 1

    def add_internal(
        self,
        child0: Optional[int] = None,
        child1: Optional[int] = None,
        weight: int = 0,
        parent: Optional[int] = None,
    ) -> int:
        idx = len(self.nodes)
        self.nodes.append(HuffmanNode(weight=weight, parent=parent, child0=child0, child1=child1))
        for c in (child0, child1):
            if c is not None:
                self.nodes[c].parent = idx
        return idx

    def leaves(self) -> List[int]:
        """Leaf indices in creation order."""
        return [i for i, n in enumerate(self.nodes) if n.is_leaf]

    def to_nested(self) -> Any:
        """Shape of the tree reachable from root: leaf -> symbol, internal -> (child0, child1).

        Two trees with equal ``to_nested()`` decode identically, whatever their node ids.
        """
        if self.root is None:
            return None

        def walk(idx: int) -> Any:
            node = self.nodes[idx]
            if node.is_leaf:
                return node.symbol
            if node.child0 is None or node.child1 is None:
                raise ValueError(f"nodo interno {idx} senza due figli")
            return (walk(node.child0), walk(node.child1))

        return walk(self.root)


def build_tree(table: FrequencyTable) -> HuffmanTree:
    """Classic Huffman merge: always join the two lightest active nodes.

    Ties go to the node created first. The heap key (weight, index) gives the
    same choice as a linear scan for the first node of minimum weight, so the
    resulting codes do not depend on the heap implementation.
    """
    tree = HuffmanTree()
    heap: List[Tuple[int, int]] = []

    for sym, w in table.items():
        idx = tree.add_leaf(sym, weight=w)
        heapq.heappush(heap, (w, idx))

    if not heap:
        return tree

    while len(heap) > 1:
        w0, n0 = heapq.heappop(heap)
        w1, n1 = heapq.heappop(heap)
        parent = tree.add_internal(n0, n1, weight=w0 + w1)
        heapq.heappush(heap, (w0 + w1, parent))

    tree.root = heap[0][1]
    return tree


def build_code_table(tree: HuffmanTree) -> Dict[int, str]:
    """Symbol -> code ('0'/'1' string), following parent links from each leaf up to the root."""
    codes: Dict[int, str] = {}
    if tree.root is None:
        return codes

    for leaf in tree.leaves():
        node = tree[leaf]
        # Caso speciale: radice foglia (un solo simbolo) => codice "0"
        if leaf == tree.root:
            codes[node.symbol] = "0"  # type: ignore[index]
            continue

        bits: List[str] = []
        cur = leaf
        while cur != tree.root:
            par = tree[cur].parent
            if par is None:
                raise ValueError(f"foglia {leaf} non collegata alla radice")
            bits.append("0" if tree[par].child0 == cur else "1")
            cur = par
        codes[node.symbol] = "".join(reversed(bits))  # type: ignore[index]

    return codes


def build(table: FrequencyTable) -> Tuple[HuffmanTree, Dict[int, str]]:
    tree = build_tree(table)
    return tree, build_code_table(tree)

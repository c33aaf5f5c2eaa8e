"""Persistent rope: a height-balanced binary tree of bounded text leaves.

Nodes are never mutated after construction. ``split`` and ``join`` rebuild only
the nodes along one root-to-leaf path, so insert, delete, and slice cost
``O(log n)`` node visits plus the size of the text moved. Because old roots
stay valid, a caller can snapshot a rope before an edit and restore it in O(1).

Every node caches its character length and newline count, which gives the
owning buffer ``O(1)`` ``length`` and ``line_count``.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from vim_core.runtime.settings import DEFAULT_LEAF_SIZE


class RopeNode:
    __slots__ = ("left", "right", "text", "length", "newlines", "height")

    def __init__(
        self,
        *,
        text: Optional[str] = None,
        left: Optional["RopeNode"] = None,
        right: Optional["RopeNode"] = None,
    ) -> None:
        self.text = text
        self.left = left
        self.right = right
        if text is not None:
            self.length = len(text)
            self.newlines = text.count("\n")
            self.height = 0
        else:
            assert left is not None and right is not None
            self.length = left.length + right.length
            self.newlines = left.newlines + right.newlines
            self.height = max(left.height, right.height) + 1

    @property
    def is_leaf(self) -> bool:
        return self.text is not None

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        if self.is_leaf:
            return f"RopeNode(leaf, length={self.length})"
        return f"RopeNode(height={self.height}, length={self.length})"


def _balance(left: RopeNode, right: RopeNode) -> RopeNode:
    diff = left.height - right.height
    if diff > 1:
        assert left.left is not None and left.right is not None
        if left.left.height >= left.right.height:
            return RopeNode(
                left=left.left, right=RopeNode(left=left.right, right=right)
            )
        inner = left.right
        assert inner.left is not None and inner.right is not None
        return RopeNode(
            left=RopeNode(left=left.left, right=inner.left),
            right=RopeNode(left=inner.right, right=right),
        )
    if diff < -1:
        assert right.left is not None and right.right is not None
        if right.right.height >= right.left.height:
            return RopeNode(
                left=RopeNode(left=left, right=right.left), right=right.right
            )
        inner = right.left
        assert inner.left is not None and inner.right is not None
        return RopeNode(
            left=RopeNode(left=left, right=inner.left),
            right=RopeNode(left=inner.right, right=right.right),
        )
    return RopeNode(left=left, right=right)


def join(
    left: Optional[RopeNode], right: Optional[RopeNode], leaf_size: int
) -> Optional[RopeNode]:
    """Concatenate two trees, descending the taller spine to keep balance."""

    if left is None or left.length == 0:
        return right
    if right is None or right.length == 0:
        return left
    if left.height > right.height + 1:
        assert left.left is not None
        merged = join(left.right, right, leaf_size)
        assert merged is not None
        return _balance(left.left, merged)
    if right.height > left.height + 1:
        assert right.right is not None
        merged = join(left, right.left, leaf_size)
        assert merged is not None
        return _balance(merged, right.right)
    if left.is_leaf and right.is_leaf and left.length + right.length <= leaf_size:
        return RopeNode(text=left.text + right.text)  # type: ignore[operator]
    return RopeNode(left=left, right=right)


def split(
    node: Optional[RopeNode], index: int, leaf_size: int
) -> tuple[Optional[RopeNode], Optional[RopeNode]]:
    """Split into ``[0, index)`` and ``[index, length)``."""

    if node is None:
        return None, None
    if index <= 0:
        return None, node
    if index >= node.length:
        return node, None
    if node.is_leaf:
        text = node.text
        assert text is not None
        return RopeNode(text=text[:index]), RopeNode(text=text[index:])
    assert node.left is not None and node.right is not None
    pivot = node.left.length
    if index == pivot:
        return node.left, node.right
    if index < pivot:
        head, tail = split(node.left, index, leaf_size)
        return head, join(tail, node.right, leaf_size)
    head, tail = split(node.right, index - pivot, leaf_size)
    return join(node.left, head, leaf_size), tail


def build(text: str, leaf_size: int) -> Optional[RopeNode]:
    """Build a perfectly balanced tree from ``text``."""

    if not text:
        return None
    leaves = [
        RopeNode(text=text[i : i + leaf_size]) for i in range(0, len(text), leaf_size)
    ]
    return _build_from_leaves(leaves, 0, len(leaves))


def _build_from_leaves(leaves: List[RopeNode], lo: int, hi: int) -> RopeNode:
    if hi - lo == 1:
        return leaves[lo]
    mid = (lo + hi) // 2
    return RopeNode(
        left=_build_from_leaves(leaves, lo, mid),
        right=_build_from_leaves(leaves, mid, hi),
    )


def iter_chunks(node: Optional[RopeNode], start: int, end: int) -> Iterator[str]:
    """Yield leaf fragments covering ``[start, end)`` in document order."""

    if node is None or start >= end:
        return
    stack: List[tuple[RopeNode, int]] = [(node, 0)]
    while stack:
        current, base = stack.pop()
        if base >= end or base + current.length <= start:
            continue
        if current.is_leaf:
            text = current.text
            assert text is not None
            lo = max(start - base, 0)
            hi = min(end - base, current.length)
            yield text[lo:hi]
            continue
        assert current.left is not None and current.right is not None
        stack.append((current.right, base + current.left.length))
        stack.append((current.left, base))


def char_at(node: RopeNode, index: int) -> str:
    current = node
    while not current.is_leaf:
        assert current.left is not None and current.right is not None
        if index < current.left.length:
            current = current.left
        else:
            index -= current.left.length
            current = current.right
    assert current.text is not None
    return current.text[index]


class Rope:
    """Mutable handle around an immutable tree of ``RopeNode`` objects."""

    __slots__ = ("root", "leaf_size")

    def __init__(self, text: str = "", *, leaf_size: int = DEFAULT_LEAF_SIZE) -> None:
        self.leaf_size = leaf_size
        self.root: Optional[RopeNode] = build(text, leaf_size)

    def __len__(self) -> int:
        return self.root.length if self.root is not None else 0

    @property
    def newlines(self) -> int:
        return self.root.newlines if self.root is not None else 0

    @property
    def height(self) -> int:
        return self.root.height if self.root is not None else 0

    def insert(self, index: int, text: str) -> None:
        if not text:
            return
        head, tail = split(self.root, index, self.leaf_size)
        middle = build(text, self.leaf_size)
        self.root = join(join(head, middle, self.leaf_size), tail, self.leaf_size)

    def remove(self, start: int, end: int) -> None:
        if start >= end:
            return
        head, rest = split(self.root, start, self.leaf_size)
        _, tail = split(rest, end - start, self.leaf_size)
        self.root = join(head, tail, self.leaf_size)

    def char(self, index: int) -> str:
        assert self.root is not None
        return char_at(self.root, index)

    def chunks(self, start: int = 0, end: Optional[int] = None) -> Iterator[str]:
        stop = len(self) if end is None else end
        return iter_chunks(self.root, start, stop)

    def slice(self, start: int, end: int) -> str:
        return "".join(self.chunks(start, end))

    def __str__(self) -> str:
        return self.slice(0, len(self))


__all__ = ["Rope", "RopeNode", "build", "join", "split", "iter_chunks"]

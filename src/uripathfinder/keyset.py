"""
A capacity bounded set of names borrowed from a source buffer.

Keys are `(start, stop)` ranges into one `bytes` object and are compared by the
bytes they cover.  The set is a red-black tree whose nodes live in a single list
and reference each other by index, so rotations only relink integer handles.
"""

import logging
from collections.abc import Iterator
from enum import IntEnum, auto
from typing import Final, final

from .defs import DEFAULT_MAX_PARAMS
from .exc import CapacityExceeded, ConfigurationError, DuplicateKey

logger = logging.getLogger(__name__)

NIL: Final[int] = -1


@final
class Color(IntEnum):
    RED = auto()
    BLACK = auto()


@final
class _Node:
    __slots__ = ("start", "stop", "color", "parent", "left", "right")

    def __init__(self, start: int, stop: int, parent: int):
        self.start: int = start
        self.stop: int = stop
        self.color: Color = Color.RED
        self.parent: int = parent
        self.left: int = NIL
        self.right: int = NIL


@final
class KeySet:
    __slots__ = ("_source", "_capacity", "_nodes", "_root")

    def __init__(self, source: bytes, capacity: int = DEFAULT_MAX_PARAMS):
        if capacity < 1:
            raise ConfigurationError(f"capacity must be positive, got {capacity}")
        self._source: Final[bytes] = source
        self._capacity: Final[int] = capacity
        self._nodes: Final[list[_Node]] = list()
        self._root: int = NIL

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, bytes):
            return False
        h = self._root
        while h != NIL:
            other = self._key(h)
            if key == other:
                return True
            h = self._nodes[h].left if key < other else self._nodes[h].right
        return False

    def __iter__(self) -> Iterator[bytes]:
        stack: list[int] = list()
        h = self._root
        while stack or h != NIL:
            while h != NIL:
                stack.append(h)
                h = self._nodes[h].left
            h = stack.pop()
            yield self._key(h)
            h = self._nodes[h].right

    def _key(self, h: int) -> bytes:
        node = self._nodes[h]
        return self._source[node.start : node.stop]

    def insert(self, start: int, stop: int) -> int:
        """
        Inserts the name covering `source[start:stop]` and returns its handle.

        Raises DuplicateKey if an equal name is already present and
        CapacityExceeded if the set is full.  Either way the set is unchanged.
        """
        key = self._source[start:stop]
        parent = NIL
        h = self._root
        while h != NIL:
            parent = h
            other = self._key(h)
            if key == other:
                logger.debug("rejecting duplicate key %r", key)
                raise DuplicateKey(key)
            h = self._nodes[h].left if key < other else self._nodes[h].right
        if len(self._nodes) == self._capacity:
            logger.debug("rejecting key %r; capacity=%d exhausted", key, self._capacity)
            raise CapacityExceeded(self._capacity)
        z = len(self._nodes)
        self._nodes.append(_Node(start, stop, parent))
        if parent == NIL:
            self._root = z
        elif key < self._key(parent):
            self._nodes[parent].left = z
        else:
            self._nodes[parent].right = z
        self._rebalance(z)
        return z

    #      x            y
    #    a   y   ->   x   g
    #       b g      a b
    def _rotate_left(self, x: int) -> None:
        nodes = self._nodes
        y = nodes[x].right
        b = nodes[y].left
        nodes[x].right = b
        if b != NIL:
            nodes[b].parent = x
        self._replace_child(nodes[x].parent, x, y)
        nodes[y].left = x
        nodes[x].parent = y

    #      y            x
    #    x   g   ->   a   y
    #   a b              b g
    def _rotate_right(self, y: int) -> None:
        nodes = self._nodes
        x = nodes[y].left
        b = nodes[x].right
        nodes[y].left = b
        if b != NIL:
            nodes[b].parent = y
        self._replace_child(nodes[y].parent, y, x)
        nodes[x].right = y
        nodes[y].parent = x

    def _replace_child(self, parent: int, old: int, new: int) -> None:
        self._nodes[new].parent = parent
        if parent == NIL:
            self._root = new
        elif self._nodes[parent].left == old:
            self._nodes[parent].left = new
        else:
            self._nodes[parent].right = new

    def _rebalance(self, z: int) -> None:
        nodes = self._nodes
        while (p := nodes[z].parent) != NIL and nodes[p].color == Color.RED:
            # a red node is never the root, so the grandparent exists
            g = nodes[p].parent
            if p == nodes[g].left:
                u = nodes[g].right
                if u != NIL and nodes[u].color == Color.RED:
                    nodes[p].color = Color.BLACK
                    nodes[u].color = Color.BLACK
                    nodes[g].color = Color.RED
                    z = g
                    continue
                if z == nodes[p].right:
                    z = p
                    self._rotate_left(z)
                    p = nodes[z].parent
                nodes[p].color = Color.BLACK
                nodes[g].color = Color.RED
                self._rotate_right(g)
            else:
                u = nodes[g].left
                if u != NIL and nodes[u].color == Color.RED:
                    nodes[p].color = Color.BLACK
                    nodes[u].color = Color.BLACK
                    nodes[g].color = Color.RED
                    z = g
                    continue
                if z == nodes[p].left:
                    z = p
                    self._rotate_right(z)
                    p = nodes[z].parent
                nodes[p].color = Color.BLACK
                nodes[g].color = Color.RED
                self._rotate_left(g)
        nodes[self._root].color = Color.BLACK

    def check(self) -> int:
        """
        Verifies ordering and the red-black properties, returns the black height.
        """
        if self._root == NIL:
            return 1
        if self._nodes[self._root].color != Color.BLACK:
            raise RuntimeError("root is not black")
        keys = list(self)
        if any(a >= b for a, b in zip(keys, keys[1:])):
            raise RuntimeError("keys are not in order")
        return self._check(self._root)

    def _check(self, h: int) -> int:
        if h == NIL:
            return 1
        node = self._nodes[h]
        for child in (node.left, node.right):
            if child == NIL:
                continue
            if self._nodes[child].parent != h:
                raise RuntimeError(f"broken parent link at {self._key(child)!r}")
            if node.color == Color.RED and self._nodes[child].color == Color.RED:
                raise RuntimeError(f"red node {self._key(h)!r} has a red child")
        left = self._check(node.left)
        right = self._check(node.right)
        if left != right:
            raise RuntimeError(f"unequal black height below {self._key(h)!r}")
        return left + (1 if node.color == Color.BLACK else 0)

# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""NestedSet node classes."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class NestedSetNode(Protocol):
    """Capabilities a NestedSet needs from a node.

    The store reads and writes these four attributes and compares nodes
    by identity. Any object exposing them can live in a NestedSet, so
    payload types wrap or extend a node instead of being known to the
    store.
    """

    id: int
    level: int
    left: int
    right: int


class Node:
    """Generic node for a NestedSet.

    Each node has:
    - id: Identifier assigned by the store on insertion
    - name: Free text label, only used for export and display
    - level: Depth in the tree (root = 0)
    - left, right: The nested set bounds

    Example:
        >>> node = Node('Fruits')
        >>> store.add(node)
        >>> node.left, node.right, node.level
        (1, 2, 1)
    """

    __slots__ = ('id', 'name', 'level', 'left', 'right')

    def __init__(
        self,
        name: str = '',
        id: int = 0,
        level: int = 0,
        left: int = 0,
        right: int = 0,
    ) -> None:
        """Initialize a Node.

        Args:
            name: The node's display name.
            id: Identifier, normally assigned by the store.
            level: Depth in the tree.
            left: Left bound.
            right: Right bound.
        """
        self.name = name
        self.id = id
        self.level = level
        self.left = left
        self.right = right

    def __repr__(self) -> str:
        return (
            f"Node({self.name!r}, id={self.id}, level={self.level}, "
            f"left={self.left}, right={self.right})"
        )

    @property
    def node_type(self) -> str:
        """Type name of the node; subclasses may override it."""
        return 'generic'

    @property
    def is_leaf(self) -> bool:
        """True if the node has no descendants."""
        return self.right == self.left + 1

    @property
    def descendant_count(self) -> int:
        """Number of nodes below this one, computed from the bounds."""
        return (self.right - self.left - 1) // 2

    def as_dict(self) -> dict[str, Any]:
        """Return the export record of this node."""
        return {
            'id': self.id,
            'node_name': self.name,
            'level': self.level,
            'left': self.left,
            'right': self.right,
        }

# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""NestedSet - A thread-safe tree stored as nested set bounds.

This module provides the NestedSet class. Every node carries a ``left``
and ``right`` bound and a ``level``; the bounds of a node's descendants
lie strictly inside its own, and sibling branches never overlap. Ancestry
and branch queries become range comparisons, while add, delete and move
renumber the bounds of the affected nodes.

Key Features:
    - **Range queries**: parent, ancestors, children and branches by bounds
    - **Renumbering engine**: add, delete and move keep the bounds valid
    - **Thread safety**: one lock serialises every operation
    - **Export/import**: records, JSON, trusted restore or replay
    - **Subscriptions**: insert, delete and move notifications

Example:
    Basic usage::

        store = NestedSet()
        fruits = store.add(Node('Fruits'))
        apple = store.add(Node('Apple'), fruits)
        veggies = store.add(Node('Vegetables'))

        store.move(apple, veggies)
        for node in store.branch():
            print('..' * node.level, node.name, node.left, node.right)
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Iterator

from ..exceptions import IntegrityError, InvalidArgumentError, NodeNotFoundError
from ..node import NestedSetNode, Node
from .integrity import bound_violations, by_left
from .loading import dump_records, replay_records, restore_records
from .subscription import SubscriptionMixin

logger = logging.getLogger(__name__)


class NestedSet(SubscriptionMixin):
    """A tree of nodes encoded with nested set bounds.

    NestedSet provides:
    - add(node, parent): Insert a leaf under parent (root if None)
    - delete(node): Remove a node and its whole branch
    - move(node, parent): Relocate a node and its branch under parent
    - parent(node) / find_by_id(id) / branch(node): Queries

    The store starts with a root node at level 0 with bounds [0, 1].
    Node fields must only be changed through the store.

    Attributes:
        root: The root node, parent of every top level node.

    Example:
        >>> store = NestedSet()
        >>> n1 = store.add(Node('N1'))
        >>> n2 = store.add(Node('N2'))
        >>> n3 = store.add(Node('N3'), n1)
        >>> [(n.name, n.left, n.right) for n in store.branch()]
        [('Root node', 0, 7), ('N1', 1, 4), ('N3', 2, 3), ('N2', 5, 6)]
    """

    __slots__ = (
        '_nodes', '_index', '_root', '_max_id', '_lock',
        '_node_factory', '_check_integrity',
        '_ins_subscribers', '_del_subscribers', '_mov_subscribers',
    )

    def __init__(
        self,
        source: list[dict[str, Any]] | None = None,
        trusted: bool = True,
        root_name: str = 'Root node',
        node_factory: Callable[[], NestedSetNode] = Node,
        check_integrity: bool = False,
    ) -> None:
        """Initialize a NestedSet.

        Args:
            source: Optional list of node records, as produced by as_list().
            trusted: If True (default), source bounds are restored as they
                are after being verified. If False, the records are replayed
                through add() in pre-order and get fresh ids.
            root_name: Name given to the root node.
            node_factory: Callable returning a new empty node. Used for the
                root and for nodes created from source records.
            check_integrity: If True, every mutation verifies the nested set
                invariants on completion and raises IntegrityError if one is
                broken. Costs one extra pass over the tree per mutation.

        Example:
            >>> NestedSet()
            >>> NestedSet(root_name='Catalog')
            >>> NestedSet(other.as_list())  # copy
            >>> NestedSet(records, trusted=False)  # rebuild from records
        """
        self._lock = threading.RLock()
        self._node_factory = node_factory
        self._check_integrity = check_integrity
        self._init_subscriptions()

        root = node_factory()
        root.id = 0
        root.level = 0
        root.left = 0
        root.right = 1
        if hasattr(root, 'name'):
            root.name = root_name
        self._reset(root)

        if source is not None:
            self._load_source(source, trusted)

    def _reset(
        self,
        root: NestedSetNode,
        nodes: list[NestedSetNode] | None = None,
        max_id: int = 0,
    ) -> None:
        """Replace the whole content of the store."""
        self._root = root
        self._nodes = [root] if nodes is None else list(nodes)
        self._index = {n.id: n for n in self._nodes}
        self._max_id = max_id

    def _load_source(self, source: list[dict[str, Any]], trusted: bool) -> None:
        """Load node records into this store.

        Raises:
            TypeError: If source is not a list.
        """
        if not isinstance(source, list):
            raise TypeError(
                f"source must be a list of records, not {type(source).__name__}"
            )
        if trusted:
            restore_records(self, source)
        else:
            replay_records(self, source)

    @classmethod
    def from_json(cls, text: str, trusted: bool = True, **kwargs: Any) -> NestedSet:
        """Create a NestedSet from the output of to_json().

        Args:
            text: JSON array of node records.
            trusted: Restore bounds as they are (True) or replay (False).
            **kwargs: Other constructor arguments.
        """
        return cls(source=json.loads(text), trusted=trusted, **kwargs)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"NestedSet({len(self._nodes)} nodes)"

    def __len__(self) -> int:
        """Return the number of nodes, root included."""
        with self._lock:
            return len(self._nodes)

    def __iter__(self) -> Iterator[NestedSetNode]:
        """Iterate over a pre-order snapshot of the whole tree."""
        return iter(self.branch())

    def __contains__(self, node: object) -> bool:
        """True if this very node object is in the tree."""
        with self._lock:
            return self._exists(node)

    @property
    def root(self) -> NestedSetNode:
        """The root node."""
        return self._root

    # ==================== Internals ====================

    def _exists(self, node: Any) -> bool:
        if node is None:
            return False
        try:
            return self._index.get(getattr(node, 'id', None)) is node
        except TypeError:
            # unhashable id: cannot be one of ours
            return False

    def _parent(self, node: NestedSetNode) -> NestedSetNode | None:
        for n in self._nodes:
            if (
                n.left <= node.left
                and n.right >= node.right
                and n.level == node.level - 1
            ):
                return n
        return None

    def _branch(self, node: NestedSetNode | None) -> list[NestedSetNode]:
        self._nodes.sort(key=by_left)

        if node is None:
            return list(self._nodes)

        if not self._exists(node):
            return []

        return [
            n for n in self._nodes
            if n.left >= node.left and n.right <= node.right
        ]

    def _after_mutation(self, operation: str) -> None:
        if not self._check_integrity:
            return
        errors = bound_violations(self._nodes, self._root)
        if errors:
            logger.warning("Tree integrity broken after %s: %s", operation, errors)
            raise IntegrityError(f"Tree integrity broken after {operation}: {'; '.join(errors)}")

    # ==================== Mutations ====================

    def add(
        self, new_node: NestedSetNode, parent: NestedSetNode | None = None
    ) -> NestedSetNode:
        """Add a new leaf node as the last child of parent.

        The node receives a fresh id, level and bounds. Every node whose
        right bound is at or after the insertion point shifts by 2.

        Args:
            new_node: The node to insert. Its fields are overwritten.
            parent: Parent node. If None, the node goes under the root.

        Returns:
            The inserted node, for chaining.

        Raises:
            InvalidArgumentError: If new_node is None or already in the tree.
            NodeNotFoundError: If parent is not in the tree.
        """
        with self._lock:
            self._add(new_node, parent)

        self._on_node_inserted(new_node)
        return new_node

    def _add(
        self, new_node: NestedSetNode, parent: NestedSetNode | None
    ) -> None:
        """Insert new_node without locking or notifying; the caller does both."""
        if new_node is None:
            logger.debug("add rejected: node is None")
            raise InvalidArgumentError("Can't add None as a node")
        if self._exists(new_node):
            logger.debug("add rejected: node %d already in structure", new_node.id)
            raise InvalidArgumentError(
                f"Node {new_node.id} is already in structure"
            )
        if parent is None:
            parent = self._root
        elif not self._exists(parent):
            logger.debug("add rejected: parent %r not found", parent)
            raise NodeNotFoundError("Parent node not found in structure")

        right = parent.right

        new_node.level = parent.level + 1
        self._max_id += 1
        new_node.id = self._max_id
        new_node.left = right
        new_node.right = right + 1

        for n in self._nodes:
            if n.right >= right:
                n.right += 2
                if n.left > right:
                    n.left += 2

        self._nodes.append(new_node)
        self._index[new_node.id] = new_node
        logger.debug(
            "added node %d at [%d,%d] level %d under node %d",
            new_node.id, new_node.left, new_node.right,
            new_node.level, parent.id,
        )
        self._after_mutation('add')

    def delete(self, node: NestedSetNode) -> list[NestedSetNode]:
        """Delete a node together with its whole branch.

        Nodes after the branch shift left to close the gap. To keep the
        descendants, move them elsewhere first.

        Args:
            node: The node to delete.

        Returns:
            The removed nodes in pre-order, node first.

        Raises:
            InvalidArgumentError: If node is None or the root.
            NodeNotFoundError: If node is not in the tree.
        """
        with self._lock:
            if node is None or node is self._root:
                logger.debug("delete rejected: node %r is the root or None", node)
                raise InvalidArgumentError("Can't delete root node")
            if not self._exists(node):
                logger.debug("delete rejected: node %r not found", node)
                raise NodeNotFoundError("Node not found in structure")

            left = node.left
            right = node.right
            width = right - left + 1

            kept: list[NestedSetNode] = []
            removed: list[NestedSetNode] = []
            for n in self._nodes:
                if n.left < left or n.right > right:
                    if n.right > right:
                        n.right -= width
                    if n.left > left:
                        n.left -= width
                    kept.append(n)
                else:
                    removed.append(n)

            self._nodes = kept
            for n in removed:
                del self._index[n.id]
            removed.sort(key=by_left)

            logger.debug(
                "deleted node %d and %d descendants, bounds shifted by %d",
                node.id, len(removed) - 1, width,
            )
            self._after_mutation('delete')

        self._on_node_deleted(node, removed)
        return removed

    def move(
        self, node: NestedSetNode, parent: NestedSetNode | None = None
    ) -> NestedSetNode:
        """Move a node and its branch to become the last child of parent.

        The nodes between the branch and its destination shift by the
        branch width, then the branch shifts by the net distance and its
        levels by the depth difference. The tree width does not change.

        Args:
            node: The node to move.
            parent: New parent. If None, the node moves under the root.

        Returns:
            The moved node.

        Raises:
            InvalidArgumentError: If node is None or the root, if parent is
                inside the node's own branch, or if parent is already the
                node's parent (reordering siblings is not supported).
            NodeNotFoundError: If node or parent is not in the tree, or if
                the current parent of node cannot be resolved.
        """
        with self._lock:
            if node is None:
                logger.debug("move rejected: node is None")
                raise InvalidArgumentError("Can't move None")
            if not self._exists(node):
                logger.debug("move rejected: node %r not found", node)
                raise NodeNotFoundError("Node not found in structure")
            if node.level == 0:
                logger.debug("move rejected: node %d is the root", node.id)
                raise InvalidArgumentError("Can't move root node")

            if parent is None:
                parent = self._root
            elif not self._exists(parent):
                logger.debug("move rejected: parent %r not found", parent)
                raise NodeNotFoundError("Parent node not found in structure")

            if parent.left >= node.left and parent.right <= node.right:
                logger.debug(
                    "move rejected: node %d is inside branch of node %d",
                    parent.id, node.id,
                )
                raise InvalidArgumentError("Can't move branch to node within itself")

            current_parent = self._parent(node)
            if current_parent is None:
                logger.warning("Parent of node %d not found, the structure is broken", node.id)
                raise NodeNotFoundError("Parent node not found, the structure broken")
            if current_parent is parent:
                logger.debug(
                    "move rejected: node %d is already under node %d",
                    node.id, parent.id,
                )
                raise InvalidArgumentError("Moving in same branch not implemented")

            left = node.left
            right = node.right
            right_near = parent.right - 1
            skew_level = parent.level - node.level + 1
            skew_tree = right - left + 1
            skew_edit = right_near - left + 1
            is_up = right_near < right

            to_update = self._branch(node)

            if is_up:
                for n in self._nodes:
                    if right_near < n.right < left:
                        n.right += skew_tree
                    if right_near < n.left < left:
                        n.left += skew_tree
            else:
                skew_edit = right_near - left + 1 - skew_tree
                for n in self._nodes:
                    if right < n.right <= right_near:
                        n.right -= skew_tree
                    if right < n.left <= right_near:
                        n.left -= skew_tree

            for n in to_update:
                n.left += skew_edit
                n.right += skew_edit
                n.level += skew_level

            logger.debug(
                "moved node %d (%d nodes) %s under node %d, now at [%d,%d]",
                node.id, len(to_update), 'up' if is_up else 'down',
                parent.id, node.left, node.right,
            )
            self._after_mutation('move')

        self._on_node_moved(node, current_parent, parent)
        return node

    # ==================== Queries ====================

    def parent(self, node: NestedSetNode) -> NestedSetNode | None:
        """Return the parent of node, or None for the root or a foreign node."""
        with self._lock:
            if not self._exists(node):
                return None
            return self._parent(node)

    def find_by_id(self, node_id: int) -> NestedSetNode | None:
        """Return the node with the given id, or None."""
        with self._lock:
            return self._index.get(node_id)

    def branch(self, node: NestedSetNode | None = None) -> list[NestedSetNode]:
        """Return node and all its descendants in pre-order.

        Args:
            node: Top of the branch. If None, returns the whole tree.

        Returns:
            Nodes sorted by left bound; empty if node is not in the tree.
        """
        with self._lock:
            return self._branch(node)

    def ancestors(
        self, node: NestedSetNode, include_self: bool = False
    ) -> list[NestedSetNode]:
        """Return the ancestors of node from the root down.

        Args:
            node: The node whose ancestors are wanted.
            include_self: If True, node itself ends the list.

        Returns:
            List of nodes, empty if node is not in the tree.
        """
        with self._lock:
            if not self._exists(node):
                return []
            result = [
                n for n in self._nodes
                if n.left < node.left and n.right > node.right
            ]
            result.sort(key=by_left)
            if include_self:
                result.append(node)
            return result

    def children(self, node: NestedSetNode | None = None) -> list[NestedSetNode]:
        """Return the direct children of node (root if None) by left bound."""
        with self._lock:
            if node is None:
                node = self._root
            return [
                n for n in self._branch(node)
                if n.level == node.level + 1
            ]

    def is_ancestor(self, ancestor: NestedSetNode, node: NestedSetNode) -> bool:
        """True if ancestor strictly contains node. Both must be in the tree."""
        with self._lock:
            if not (self._exists(ancestor) and self._exists(node)):
                return False
            return ancestor.left < node.left and ancestor.right > node.right

    # ==================== Validation ====================

    @property
    def is_valid(self) -> bool:
        """True if the bounds satisfy every nested set invariant."""
        return not self.validation_errors()

    def validation_errors(self) -> list[str]:
        """Return all invariant violations found in the tree.

        Returns:
            List of messages, empty for a healthy tree.
        """
        with self._lock:
            return bound_violations(self._nodes, self._root)

    # ==================== Conversion ====================

    def as_list(self) -> list[dict[str, Any]]:
        """Export the tree as a pre-order list of node records."""
        with self._lock:
            return dump_records(self._branch(None))

    def to_json(self, indent: int | None = 2) -> str:
        """Export the tree as a JSON array of node records."""
        return json.dumps(self.as_list(), indent=indent)

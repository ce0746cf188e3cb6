# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Export and import of NestedSet node records.

A record is a plain dict::

    {'id': 3, 'node_name': 'Apple', 'level': 2, 'left': 2, 'right': 3}

Two import strategies exist:

- restore_records: the bounds are trusted and copied as they are, after
  being verified. Ids are kept.
- replay_records: only the level and left-to-right order of the records
  is used; each record is added under the closest preceding record one
  level above it. Ids are reassigned, names are kept.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, TYPE_CHECKING

from ..exceptions import IntegrityError
from .integrity import bound_violations

if TYPE_CHECKING:
    from ..node import NestedSetNode
    from .core import NestedSet

logger = logging.getLogger(__name__)

RECORD_FIELDS = ('id', 'level', 'left', 'right')


def dump_records(nodes: Iterable[Any]) -> list[dict[str, Any]]:
    """Convert nodes to records, in the order given.

    Nodes without a ``name`` attribute are exported with an empty name.
    """
    return [
        {
            'id': n.id,
            'node_name': getattr(n, 'name', ''),
            'level': n.level,
            'left': n.left,
            'right': n.right,
        }
        for n in nodes
    ]


def _check_record(
    record: Any, position: int, fields: tuple[str, ...] = RECORD_FIELDS
) -> None:
    if not isinstance(record, dict):
        raise TypeError(
            f"record #{position} must be a dict, not {type(record).__name__}"
        )
    missing = [f for f in fields if f not in record]
    if missing:
        raise IntegrityError(f"record #{position} is missing {', '.join(missing)}")


def _node_from_record(
    record: dict[str, Any], factory: Callable[[], NestedSetNode]
) -> NestedSetNode:
    node = factory()
    node.id = int(record['id'])
    node.level = int(record['level'])
    node.left = int(record['left'])
    node.right = int(record['right'])
    if 'node_name' in record and hasattr(node, 'name'):
        node.name = record['node_name']
    return node


def restore_records(
    store: NestedSet,
    records: list[dict[str, Any]],
    node_factory: Callable[[], NestedSetNode] | None = None,
) -> None:
    """Replace the content of store with nodes built from trusted records.

    Args:
        store: Target NestedSet; its current nodes are discarded.
        records: Node records in any order, exactly one with level 0.
        node_factory: Callable creating empty nodes. Defaults to the
            store's node factory.

    Raises:
        IntegrityError: If the records do not describe a valid tree. The
            store is left unchanged.
    """
    factory = node_factory or store._node_factory
    for position, record in enumerate(records):
        _check_record(record, position)

    nodes = [_node_from_record(record, factory) for record in records]
    roots = [n for n in nodes if n.level == 0]
    if len(roots) != 1:
        raise IntegrityError(f"expected exactly one root record, found {len(roots)}")
    root = roots[0]

    errors = bound_violations(nodes, root)
    if errors:
        logger.warning("Rejected %d records: %s", len(records), errors)
        raise IntegrityError('; '.join(errors))

    with store._lock:
        store._reset(root, nodes, max_id=max(n.id for n in nodes))
    logger.debug("restored %d nodes", len(nodes))


def replay_records(
    store: NestedSet,
    records: list[dict[str, Any]],
    node_factory: Callable[[], NestedSetNode] | None = None,
) -> None:
    """Rebuild records into store by adding them in pre-order.

    Records are sorted by left bound. A level 0 record only renames the
    root; any other record is added under the closest preceding record
    whose level is one less. Only ``level``, ``left`` and ``node_name``
    are read.
    Insert events are sent once every record has been added and the
    store lock has been released.

    Args:
        store: Target NestedSet. Nodes are added to the existing tree,
            top level records going under its root.
        records: Node records.
        node_factory: Callable creating empty nodes. Defaults to the
            store's node factory.

    Raises:
        IntegrityError: If a record has no possible parent. Nothing is
            added in that case.
    """
    factory = node_factory or store._node_factory
    for position, record in enumerate(records):
        _check_record(record, position, fields=('level', 'left'))
    ordered = sorted(records, key=lambda r: r['left'])

    # resolve the whole plan before touching the store
    plan: list[tuple[NestedSetNode, NestedSetNode | None]] = []
    root_name = None
    stack: list[tuple[int, NestedSetNode | None]] = [(0, None)]
    for record in ordered:
        level = int(record['level'])
        if level == 0:
            root_name = record.get('node_name')
            continue
        while stack[-1][0] >= level:
            stack.pop()
        parent_level, parent = stack[-1]
        if parent_level != level - 1:
            raise IntegrityError(
                f"record at left {record['left']} has level {level} "
                f"but no parent at level {level - 1}"
            )
        node = factory()
        if 'node_name' in record and hasattr(node, 'name'):
            node.name = record['node_name']
        plan.append((node, parent))
        stack.append((level, node))

    with store._lock:
        if root_name is not None and hasattr(store.root, 'name'):
            store.root.name = root_name
        for node, parent in plan:
            store._add(node, parent)
    logger.debug("replayed %d records", len(plan))

    # lock released: subscribers see the whole replayed tree
    for node, parent in plan:
        store._on_node_inserted(node)

# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""NestedSet store package - Tree container encoded with nested set bounds.

The package is organized into:
- core: Main NestedSet class with the renumbering engine and queries
- integrity: Invariant checks on nested set bounds
- loading: Export of node records and trusted or replayed import
- subscription: Event subscription and notification system

Example:
    >>> from genro_nestedset import NestedSet, Node
    >>> store = NestedSet()
    >>> fruits = store.add(Node('Fruits'))
    >>> store.add(Node('Apple'), fruits)
    >>> [n.name for n in store.branch(fruits)]
    ['Fruits', 'Apple']
"""

from .core import NestedSet
from .loading import dump_records, replay_records, restore_records

__all__ = ["NestedSet", "dump_records", "replay_records", "restore_records"]

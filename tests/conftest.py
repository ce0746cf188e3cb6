# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for NestedSet tests."""

import pytest

from genro_nestedset import NestedSet, Node


def build_tree(**kwargs):
    """Build the reference tree used by most tests.

    root [0,13]
    ..node 1 [1,6]
    ....node 2 [2,3]
    ....node 5 [4,5]
    ..node 3 [7,12]
    ....node 4 [8,11]
    ......node 6 [9,10]
    """
    store = NestedSet(**kwargs)
    nodes = [store.root] + [Node(f'node {i}') for i in range(1, 7)]
    store.add(nodes[1], None)
    store.add(nodes[2], nodes[1])
    store.add(nodes[3], nodes[0])
    store.add(nodes[4], nodes[3])
    store.add(nodes[5], nodes[1])
    store.add(nodes[6], nodes[4])
    return store, nodes


@pytest.fixture
def make_tree():
    """Factory building the reference tree with constructor options."""
    return build_tree


@pytest.fixture
def tree():
    """The reference tree as (store, nodes); nodes[0] is the root."""
    return build_tree()


@pytest.fixture
def snapshot():
    """Callable returning (id, level, left, right) of every node in pre-order."""

    def _snapshot(store):
        return [(n.id, n.level, n.left, n.right) for n in store.branch()]

    return _snapshot

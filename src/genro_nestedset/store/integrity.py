# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Invariant checks for nested set bounds.

Used by NestedSet.validation_errors() and by the trusted record loader,
which has to verify raw bounds before adopting them.
"""

from __future__ import annotations

from operator import attrgetter
from typing import Any, Sequence

by_left = attrgetter('left')


def bound_violations(nodes: Sequence[Any], root: Any) -> list[str]:
    """Return a description of every broken nested set invariant.

    Checks that each range is well formed, that ranges never overlap
    partially, that every level is one more than its immediate parent,
    that the root contains everything, and that the bounds of N nodes
    are exactly the integers 0 .. 2N-1.

    Args:
        nodes: All nodes of the tree, root included, in any order.
        root: The node expected to contain all the others.

    Returns:
        List of error messages, empty if the bounds describe a tree.
    """
    errors: list[str] = []

    if not any(n is root for n in nodes):
        errors.append('root node is not part of the tree')
    if root.level != 0:
        errors.append(f'root level is {root.level}, expected 0')

    ids = [n.id for n in nodes]
    if len(set(ids)) != len(ids):
        errors.append('node ids are not unique')

    for n in nodes:
        if n.left >= n.right:
            errors.append(f'node {n.id}: left {n.left} >= right {n.right}')

    bounds = sorted([n.left for n in nodes] + [n.right for n in nodes])
    if bounds != list(range(2 * len(nodes))):
        errors.append(f'bounds do not cover 0..{2 * len(nodes) - 1} exactly')

    ordered = sorted(nodes, key=by_left)
    if ordered and ordered[0] is not root:
        errors.append(f'node {ordered[0].id} precedes the root')

    stack: list[Any] = []
    for n in ordered:
        while stack and stack[-1].right < n.left:
            stack.pop()
        if not stack:
            if n is not root:
                errors.append(f'node {n.id} lies outside the root')
        else:
            parent = stack[-1]
            if n.right > parent.right:
                errors.append(
                    f'node {n.id} [{n.left},{n.right}] partially overlaps '
                    f'node {parent.id} [{parent.left},{parent.right}]'
                )
            elif n.level != parent.level + 1:
                errors.append(
                    f'node {n.id}: level {n.level}, parent {parent.id} '
                    f'has level {parent.level}'
                )
        stack.append(n)

    return errors

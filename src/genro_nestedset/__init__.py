# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-NestedSet - Hierarchical node collections with nested set bounds.

A lightweight, zero-dependency library keeping a tree of nodes encoded
as nested sets, for the Genro ecosystem (Genro Kyō).
"""

__version__ = "0.1.0"

from .exceptions import (
    IntegrityError,
    InvalidArgumentError,
    NestedSetError,
    NodeNotFoundError,
)
from .node import NestedSetNode, Node
from .store import NestedSet

__all__ = [
    # Core classes
    "NestedSet",
    "Node",
    "NestedSetNode",
    # Exceptions
    "NestedSetError",
    "NodeNotFoundError",
    "InvalidArgumentError",
    "IntegrityError",
]

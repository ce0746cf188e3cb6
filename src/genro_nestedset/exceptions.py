# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""NestedSet exceptions."""

from __future__ import annotations


class NestedSetError(Exception):
    """Base exception for NestedSet errors."""

    pass


class NodeNotFoundError(NestedSetError, LookupError):
    """Raised when a referenced node is not a member of the store."""

    pass


class InvalidArgumentError(NestedSetError, ValueError):
    """Raised when a request is structurally impossible.

    Deleting or moving the root, moving a node inside its own branch,
    or moving a node under the parent it already has.
    """

    pass


class IntegrityError(NestedSetError):
    """Raised when the nested set bounds no longer describe a tree."""

    pass

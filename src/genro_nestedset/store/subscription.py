# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Event subscriptions for NestedSet.

Subscribers register callbacks per event type. Callbacks are called with
keyword arguments only:

- store: the NestedSet that changed
- node: the inserted, deleted or moved node
- evt: 'ins', 'del' or 'mov'
- removed: (delete only) every node removed with the branch, pre-order
- old_parent, new_parent: (move only) the parents before and after

Notifications are sent once the mutation is complete and the store lock
has been released, so a callback always sees a consistent tree.

Example:
    >>> def on_insert(store, node, evt, **kw):
    ...     print(f'{evt}: {node.name} at {node.left}')
    >>> store.subscribe('logger', insert=on_insert)
    >>> store.add(Node('Fruits'))
    ins: Fruits at 1
"""

from __future__ import annotations

from typing import Any, Callable

SubscriberCallback = Callable[..., Any]


class SubscriptionMixin:
    """Mixin adding subscribe/unsubscribe and event dispatch to a store."""

    __slots__ = ()

    _ins_subscribers: dict[str, SubscriberCallback]
    _del_subscribers: dict[str, SubscriberCallback]
    _mov_subscribers: dict[str, SubscriberCallback]

    def _init_subscriptions(self) -> None:
        self._ins_subscribers = {}
        self._del_subscribers = {}
        self._mov_subscribers = {}

    def subscribe(
        self,
        subscriber_id: str,
        insert: SubscriberCallback | None = None,
        delete: SubscriberCallback | None = None,
        move: SubscriberCallback | None = None,
        any: SubscriberCallback | None = None,
    ) -> None:
        """Register callbacks for tree events.

        Args:
            subscriber_id: Key used to unsubscribe later. Subscribing again
                with the same id replaces the previous callbacks.
            insert: Called after add().
            delete: Called after delete().
            move: Called after move().
            any: Called after every mutation.
        """
        if any is not None:
            insert = insert or any
            delete = delete or any
            move = move or any
        if insert is not None:
            self._ins_subscribers[subscriber_id] = insert
        if delete is not None:
            self._del_subscribers[subscriber_id] = delete
        if move is not None:
            self._mov_subscribers[subscriber_id] = move

    def unsubscribe(
        self,
        subscriber_id: str,
        insert: bool = False,
        delete: bool = False,
        move: bool = False,
        any: bool = False,
    ) -> None:
        """Remove callbacks registered under subscriber_id.

        Args:
            subscriber_id: The id passed to subscribe().
            insert, delete, move: Which event types to drop.
            any: Drop all event types.
        """
        if any or insert:
            self._ins_subscribers.pop(subscriber_id, None)
        if any or delete:
            self._del_subscribers.pop(subscriber_id, None)
        if any or move:
            self._mov_subscribers.pop(subscriber_id, None)

    def _notify(
        self, subscribers: dict[str, SubscriberCallback], **kwargs: Any
    ) -> None:
        # copy: a callback may unsubscribe itself
        for callback in list(subscribers.values()):
            callback(store=self, **kwargs)

    def _on_node_inserted(self, node: Any) -> None:
        self._notify(self._ins_subscribers, node=node, evt='ins')

    def _on_node_deleted(self, node: Any, removed: list[Any]) -> None:
        self._notify(self._del_subscribers, node=node, evt='del', removed=removed)

    def _on_node_moved(self, node: Any, old_parent: Any, new_parent: Any) -> None:
        self._notify(
            self._mov_subscribers,
            node=node,
            evt='mov',
            old_parent=old_parent,
            new_parent=new_parent,
        )

# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for NestedSet event subscriptions."""

import threading

import pytest

from genro_nestedset import InvalidArgumentError, NestedSet, Node
from genro_nestedset.store import replay_records


class TestSubscription:
    """Tests for subscribe, unsubscribe and event dispatch."""

    def test_insert_event(self):
        """Test insert callback receives the new node."""
        store = NestedSet()
        events = []
        store.subscribe('t', insert=lambda **kw: events.append(kw))
        node = store.add(Node('a'))
        assert len(events) == 1
        assert events[0]['store'] is store
        assert events[0]['node'] is node
        assert events[0]['evt'] == 'ins'

    def test_delete_event(self, make_tree):
        """Test delete callback receives the removed branch."""
        store, nodes = make_tree()
        events = []
        store.subscribe('t', delete=lambda **kw: events.append(kw))
        store.delete(nodes[1])
        assert events[0]['evt'] == 'del'
        assert events[0]['node'] is nodes[1]
        assert events[0]['removed'] == [nodes[1], nodes[2], nodes[5]]

    def test_move_event(self, make_tree):
        """Test move callback receives old and new parent."""
        store, nodes = make_tree()
        events = []
        store.subscribe('t', move=lambda **kw: events.append(kw))
        store.move(nodes[4], nodes[2])
        assert events[0]['evt'] == 'mov'
        assert events[0]['old_parent'] is nodes[3]
        assert events[0]['new_parent'] is nodes[2]

    def test_any_subscribes_all_events(self):
        """Test the any callback receives every event type."""
        store = NestedSet()
        events = []
        store.subscribe('t', any=lambda evt, **kw: events.append(evt))
        a = store.add(Node('a'))
        b = store.add(Node('b'))
        store.move(b, a)
        store.delete(a)
        assert events == ['ins', 'ins', 'mov', 'del']

    def test_unsubscribe(self):
        """Test unsubscribed callbacks are no longer called."""
        store = NestedSet()
        events = []
        store.subscribe('t', any=lambda evt, **kw: events.append(evt))
        store.unsubscribe('t', insert=True)
        node = store.add(Node('a'))
        store.unsubscribe('t', any=True)
        store.delete(node)
        assert events == []

    def test_rejected_mutation_not_notified(self, make_tree):
        """Test a failed mutation sends no event."""
        store, nodes = make_tree()
        events = []
        store.subscribe('t', any=lambda evt, **kw: events.append(evt))
        with pytest.raises(InvalidArgumentError):
            store.move(nodes[2], nodes[1])
        assert events == []

    def test_callback_sees_updated_tree(self, make_tree):
        """Test a callback can query the store it was called from."""
        store, nodes = make_tree()
        seen = []

        def on_move(store, node, **kw):
            seen.append(store.parent(node))

        store.subscribe('t', move=on_move)
        store.move(nodes[6], nodes[1])
        assert seen == [nodes[1]]

    def test_replay_events(self):
        """Test replay sends one insert event per record, in pre-order."""
        store = NestedSet()
        events = []
        store.subscribe('t', insert=lambda node, **kw: events.append(node.name))
        replay_records(store, [
            {'node_name': 'b', 'level': 2, 'left': 2},
            {'node_name': 'a', 'level': 1, 'left': 1},
            {'node_name': 'c', 'level': 1, 'left': 4},
        ])
        assert events == ['a', 'b', 'c']

    def test_replay_events_see_whole_tree(self):
        """Test replay events are sent after every record was added."""
        store = NestedSet()
        sizes = []
        store.subscribe('t', insert=lambda store, **kw: sizes.append(len(store)))
        replay_records(store, [
            {'node_name': 'a', 'level': 1, 'left': 1},
            {'node_name': 'b', 'level': 1, 'left': 3},
        ])
        assert sizes == [3, 3]

    def test_events_sent_outside_lock(self):
        """Test another thread can take the lock while a callback runs."""
        store = NestedSet()
        acquired = []

        def on_insert(store, **kw):
            result = []

            def take_lock():
                got = store._lock.acquire(timeout=1)
                if got:
                    store._lock.release()
                result.append(got)

            worker = threading.Thread(target=take_lock)
            worker.start()
            worker.join()
            acquired.append(result[0])

        store.subscribe('t', insert=on_insert)
        store.add(Node('direct'))
        replay_records(store, [
            {'node_name': 'a', 'level': 1, 'left': 1},
            {'node_name': 'b', 'level': 2, 'left': 2},
        ])
        assert acquired == [True, True, True]

"""Tests for the in-memory bookmark tree store."""
import threading

import pytest

from bookmarker.core.exceptions import NotFoundError
from bookmarker.core.models.bookmark import BookmarkNode
from bookmarker.core.tree.store import BookmarkTreeStore, locate


def titles(nodes):
    return [n.title for n in nodes]


class TestLocate:
    def test_finds_nested_node(self):
        target = BookmarkNode("C", 3)
        forest = [BookmarkNode("A", 1, [BookmarkNode("B", 2, [target])])]
        siblings, index = locate(forest, target.id)
        assert siblings[index] is target

    def test_missing_id_returns_none(self):
        assert locate([BookmarkNode("A", 1)], "nope") is None


class TestInsert:
    def test_insert_root_appends(self):
        store = BookmarkTreeStore()
        store.insert_root("A", 1)
        store.insert_root("B", 5)
        assert titles(store.snapshot()) == ["A", "B"]

    def test_insert_child_appends_under_parent(self):
        store = BookmarkTreeStore()
        parent = store.insert_root("A", 1)
        store.insert_child(parent.id, "B", 2)
        store.insert_child(parent.id, "C", 3)
        assert titles(store.snapshot()[0].children) == ["B", "C"]

    def test_insert_child_deep(self):
        store = BookmarkTreeStore()
        a = store.insert_root("A", 1)
        b = store.insert_child(a.id, "B", 2)
        store.insert_child(b.id, "C", 3)
        assert store.snapshot()[0].children[0].children[0].title == "C"

    def test_insert_child_unknown_parent_raises_and_keeps_forest(self):
        store = BookmarkTreeStore()
        store.insert_root("A", 1)
        before = store.snapshot()
        with pytest.raises(NotFoundError):
            store.insert_child("missing", "B", 2)
        assert store.snapshot() == before

    def test_returned_node_is_detached_copy(self):
        store = BookmarkTreeStore()
        node = store.insert_root("A", 1)
        node.title = "changed"
        assert store.snapshot()[0].title == "A"


class TestEdit:
    def test_edit_replaces_title_and_page_only(self):
        store = BookmarkTreeStore()
        a = store.insert_root("A", 1)
        child = store.insert_child(a.id, "B", 2)
        store.edit(a.id, "A2", 7)
        root = store.snapshot()[0]
        assert (root.id, root.title, root.page) == (a.id, "A2", 7)
        assert root.children[0].id == child.id

    def test_edit_after_insert_child_touches_only_that_node(self):
        store = BookmarkTreeStore()
        a = store.insert_root("A", 1)
        store.insert_child(a.id, "B", 2)
        c = store.insert_child(a.id, "C", 3)
        store.insert_child(a.id, "D", 4)
        store.edit(c.id, "C2", 9)
        children = store.snapshot()[0].children
        assert [(n.title, n.page) for n in children] == [("B", 2), ("C2", 9), ("D", 4)]

    def test_edit_missing_raises(self):
        with pytest.raises(NotFoundError):
            BookmarkTreeStore().edit("missing", "X", 1)


class TestRemove:
    def test_remove_child(self):
        store = BookmarkTreeStore()
        a = store.insert_root("A", 1)
        b = store.insert_child(a.id, "B", 2)
        store.insert_child(a.id, "C", 3)
        store.remove(b.id)
        assert titles(store.snapshot()[0].children) == ["C"]

    def test_remove_root_cascades(self):
        store = BookmarkTreeStore()
        a = store.insert_root("A", 1)
        store.insert_child(a.id, "B", 2)
        store.insert_child(a.id, "C", 3)
        removed = store.remove(a.id)
        assert store.snapshot() == []
        assert titles(removed.children) == ["B", "C"]

    def test_remove_missing_raises(self):
        store = BookmarkTreeStore()
        store.insert_root("A", 1)
        with pytest.raises(NotFoundError):
            store.remove("missing")
        assert len(store) == 1

    def test_node_count_tracks_inserts_and_subtree_removals(self):
        store = BookmarkTreeStore()
        a = store.insert_root("A", 1)
        b = store.insert_child(a.id, "B", 2)
        store.insert_child(b.id, "C", 3)
        store.insert_root("D", 4)
        with pytest.raises(NotFoundError):
            store.insert_child("missing", "X", 1)
        assert len(store) == 4
        store.remove(b.id)
        assert len(store) == 2


class TestSnapshotAndSeed:
    def test_snapshot_is_independent(self):
        store = BookmarkTreeStore()
        store.insert_root("A", 1)
        snapshot = store.snapshot()
        store.insert_root("B", 2)
        snapshot[0].title = "mutated"
        assert titles(snapshot) == ["mutated"]
        assert titles(store.snapshot()) == ["A", "B"]

    def test_find_returns_copy(self):
        store = BookmarkTreeStore()
        a = store.insert_root("A", 1)
        found = store.find(a.id)
        assert found.title == "A"
        assert store.find("missing") is None

    def test_seed_only_when_empty(self):
        store = BookmarkTreeStore()
        assert store.seed([BookmarkNode("Imported", 1)]) == 1
        assert store.seed([BookmarkNode("Again", 2)]) == 0
        assert titles(store.snapshot()) == ["Imported"]

    def test_seed_with_nothing_is_noop(self):
        store = BookmarkTreeStore()
        assert store.seed([]) == 0
        assert store.is_empty()

    def test_clear(self):
        store = BookmarkTreeStore([BookmarkNode("A", 1)])
        store.clear()
        assert store.is_empty()


class TestConcurrency:
    def test_parallel_inserts_are_all_applied(self):
        store = BookmarkTreeStore()
        parent = store.insert_root("Parent", 1)

        def worker():
            for i in range(25):
                store.insert_child(parent.id, f"C{i}", i + 1)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 1 + 4 * 25

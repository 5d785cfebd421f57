"""Tests for the resource reducer and ResourceStore."""

from unittest.mock import MagicMock

import pytest

from src.data.errors import ConflictError, NetworkError
from src.data.store import (
    Added,
    ErrorCleared,
    Failed,
    Loaded,
    Removed,
    ResourceState,
    ResourceStore,
    Updated,
    reduce,
)


class TestReduce:
    def test_initial_state_is_loading(self):
        state = ResourceState()
        assert state.loading and state.rows == () and state.error is None

    def test_loaded_replaces_rows(self):
        state = reduce(ResourceState(error="old"), Loaded(({"id": 1},)))
        assert state.rows == ({"id": 1},)
        assert not state.loading
        assert state.error is None

    def test_added_prepends(self):
        state = reduce(ResourceState(rows=({"id": 1},)), Added({"id": 2}))
        assert [r["id"] for r in state.rows] == [2, 1]

    def test_updated_replaces_by_id(self):
        before = ResourceState(rows=({"id": 1, "v": "a"}, {"id": 2, "v": "b"}))
        after = reduce(before, Updated({"id": 2, "v": "c"}))
        assert after.rows == ({"id": 1, "v": "a"}, {"id": 2, "v": "c"})

    def test_removed_filters_by_id(self):
        state = reduce(ResourceState(rows=({"id": 1}, {"id": 2})), Removed(1))
        assert state.rows == ({"id": 2},)

    def test_failed_keeps_rows(self):
        state = reduce(ResourceState(rows=({"id": 1},)), Failed("boom"))
        assert state.error == "boom"
        assert state.rows == ({"id": 1},)
        assert not state.loading

    def test_error_cleared(self):
        assert reduce(ResourceState(error="x"), ErrorCleared()).error is None

    def test_does_not_mutate_input(self):
        before = ResourceState(rows=({"id": 1},))
        reduce(before, Added({"id": 2}))
        assert before.rows == ({"id": 1},)

    def test_unknown_action(self):
        with pytest.raises(TypeError):
            reduce(ResourceState(), object())


def _store(**client_methods):
    client = MagicMock()
    for name, value in client_methods.items():
        setattr(client, name, value)
    return ResourceStore("schools", client), client


class TestResourceStore:
    def test_refresh_loads_rows(self):
        store, client = _store()
        client.list_all.return_value = [{"id": 2}, {"id": 1}]
        assert store.refresh() is True
        assert store.rows == [{"id": 2}, {"id": 1}]
        assert not store.loading
        client.list_all.assert_called_once_with("schools")

    def test_refresh_failure_sets_error(self):
        store, client = _store()
        client.list_all.side_effect = NetworkError("تعذر الاتصال")
        assert store.refresh() is False
        assert store.error == "تعذر الاتصال"
        assert not store.loading

    def test_add_item_prepends_server_row(self):
        store, client = _store()
        store.dispatch(Loaded(({"id": 1},)))
        client.create.return_value = {"id": 2, "schoolNameAr": "أ"}
        assert store.add_item({"schoolNameAr": "أ"}) is True
        assert store.rows[0]["id"] == 2

    def test_add_item_conflict_keeps_rows(self):
        store, client = _store()
        store.dispatch(Loaded(({"id": 1},)))
        client.create.side_effect = ConflictError("الرقم الوطني مستخدم")
        assert store.add_item({}) is False
        assert store.error == "الرقم الوطني مستخدم"
        assert store.rows == [{"id": 1}]

    def test_next_action_clears_error(self):
        store, client = _store()
        store.dispatch(Failed("old"))
        client.create.return_value = {"id": 1}
        store.add_item({})
        assert store.error is None

    def test_batch_then_refresh(self):
        store, client = _store()
        client.create_batch.return_value = {"insertedCount": 2}
        client.list_all.return_value = [{"id": 3}, {"id": 2}]
        assert store.add_multiple_items([{"a": 1}, {"a": 2}]) is True
        client.create_batch.assert_called_once_with("schools", [{"a": 1}, {"a": 2}])
        assert [r["id"] for r in store.rows] == [3, 2]

    def test_batch_failure_skips_refresh(self):
        store, client = _store()
        client.create_batch.side_effect = ConflictError("مكرر")
        assert store.add_multiple_items([{}]) is False
        client.list_all.assert_not_called()

    def test_update_strips_meta_fields(self):
        store, client = _store()
        store.dispatch(Loaded(({"id": 4, "v": 1},)))
        client.update.return_value = {"id": 4, "v": 2}
        assert store.update_item({"id": 4, "dateAdded": "x", "v": 2}) is True
        client.update.assert_called_once_with("schools", 4, {"v": 2})
        assert store.rows == [{"id": 4, "v": 2}]

    def test_remove_item(self):
        store, client = _store()
        store.dispatch(Loaded(({"id": 4},)))
        assert store.remove_item(4) is True
        client.delete.assert_called_once_with("schools", 4)
        assert store.rows == []

"""Unit tests for the Completion Store."""

import json
from unittest.mock import MagicMock

import pytest

from techtree.core.errors import InvalidNodeKind, StorageError, UnknownNodeError
from techtree.core.store import DEFAULT_SLOT, CompletionStore
from techtree.storage import JsonFileBackend, MemoryBackend, SQLiteBackend
from techtree.storage.base import StateBackend


def _store(graph, raw=None):
    initial = {} if raw is None else {DEFAULT_SLOT: raw}
    store = CompletionStore(graph, MemoryBackend(initial))
    store.load()
    return store


class TestLoad:
    def test_missing_slot_is_empty(self, chain_graph):
        assert _store(chain_graph).completed_ids() == frozenset()

    @pytest.mark.parametrize("raw", ["", "{not json", '{"A": true}', "42"])
    def test_malformed_slot_is_empty(self, chain_graph, raw):
        assert _store(chain_graph, raw).completed_ids() == frozenset()

    def test_loads_completed_ids(self, chain_graph):
        store = _store(chain_graph, '["A", "C"]')
        assert store.is_complete("A")
        assert not store.is_complete("B")
        assert store.is_complete("C")

    def test_drops_ids_not_in_graph(self, chain_graph, caplog):
        store = _store(chain_graph, '["A", "ghost", "b-hall", 7]')
        assert store.completed_ids() == frozenset({"A"})
        assert "Ignored 3 stored id(s)" in caplog.text

    def test_unreadable_backend_is_empty(self, chain_graph):
        backend = MagicMock(spec=StateBackend)
        backend.read.side_effect = StorageError("locked")
        store = CompletionStore(chain_graph, backend)
        assert store.load() == frozenset()


class TestToggle:
    def test_toggle_twice_restores_state(self, chain_graph):
        store = _store(chain_graph, '["B"]')
        for tech_id in ("A", "B"):
            before = store.is_complete(tech_id)
            store.toggle(tech_id)
            store.toggle(tech_id)
            assert store.is_complete(tech_id) == before

    def test_toggle_persists_full_state(self, chain_graph):
        backend = MemoryBackend()
        store = CompletionStore(chain_graph, backend)
        store.load()

        store.toggle("C")
        outcome = store.toggle("A")

        assert outcome.completed
        assert outcome.persisted
        assert json.loads(backend.read(DEFAULT_SLOT)) == ["A", "C"]

    def test_round_trip_through_backend(self, sample_graph):
        backend = MemoryBackend()
        first = CompletionStore(sample_graph, backend)
        first.load()
        for tech_id in ("optics", "pottery", "mining"):
            first.toggle(tech_id)

        second = CompletionStore(sample_graph, backend)
        assert second.load() == first.completed_ids()

    def test_unlock_id_is_rejected(self, chain_graph):
        store = _store(chain_graph)
        with pytest.raises(InvalidNodeKind):
            store.toggle("b-hall")
        with pytest.raises(InvalidNodeKind):
            store.is_complete("b-hall")

    def test_unknown_id_is_rejected(self, chain_graph):
        with pytest.raises(UnknownNodeError):
            _store(chain_graph).toggle("nowhere")

    def test_failed_flush_keeps_toggle(self, chain_graph):
        backend = MagicMock(spec=StateBackend)
        backend.read.return_value = None
        backend.write.side_effect = StorageError("disk full")
        store = CompletionStore(chain_graph, backend)
        store.load()

        outcome = store.toggle("A")

        assert outcome.completed
        assert not outcome.persisted
        assert "disk full" in outcome.flush.unwrap_err()
        assert store.is_complete("A")

    def test_next_successful_flush_reconciles(self, chain_graph):
        backend = MemoryBackend()
        store = CompletionStore(chain_graph, backend)
        store.load()

        original_write = backend.write
        backend.write = MagicMock(side_effect=StorageError("offline"))
        store.toggle("A")
        backend.write = original_write
        store.toggle("B")

        assert json.loads(backend.read(DEFAULT_SLOT)) == ["A", "B"]

    def test_set_complete(self, chain_graph):
        store = _store(chain_graph)
        store.set_complete("A", True)
        store.set_complete("A", True)
        assert store.is_complete("A")
        store.set_complete("A", False)
        assert not store.is_complete("A")


class TestClearAll:
    def test_clear_all_resets_and_persists(self, chain_graph):
        backend = MemoryBackend({DEFAULT_SLOT: '["A", "B"]'})
        store = CompletionStore(chain_graph, backend)
        store.load()

        result = store.clear_all()

        assert result.is_ok()
        assert store.completed_ids() == frozenset()
        assert json.loads(backend.read(DEFAULT_SLOT)) == []


class TestCorruptStateFiles:
    def test_non_utf8_json_file_loads_empty_and_toggle_persists(self, chain_graph, tmp_path):
        path = tmp_path / "state.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        store = CompletionStore(chain_graph, JsonFileBackend(path))

        assert store.load() == frozenset()
        outcome = store.toggle("A")

        assert outcome.persisted
        assert json.loads(json.loads(path.read_text())[DEFAULT_SLOT]) == ["A"]

    def test_non_database_sqlite_file_loads_empty_and_keeps_toggle(self, chain_graph, tmp_path):
        path = tmp_path / "state.db"
        path.write_bytes(b"this is not an sqlite database" * 10)
        store = CompletionStore(chain_graph, SQLiteBackend(path))

        assert store.load() == frozenset()
        outcome = store.toggle("A")

        assert outcome.completed
        assert not outcome.persisted
        assert store.is_complete("A")

"""Unit tests for hover highlighting."""

import pytest

from techtree.core.errors import UnknownNodeError
from techtree.core.highlight import HighlightSession, compute_highlight
from techtree.core.resolver import DependencyResolver
from techtree.core.store import CompletionStore
from techtree.core.types import HighlightTag


@pytest.fixture
def parts(chain_graph, memory_backend):
    store = CompletionStore(chain_graph, memory_backend)
    store.load()
    resolver = DependencyResolver(chain_graph, store)
    return store, resolver, HighlightSession(chain_graph, resolver)


class TestComputeHighlight:
    def test_incomplete_ancestors_make_node_required(self, chain_graph, parts):
        _, resolver, _ = parts
        highlight = compute_highlight("C", chain_graph, resolver)

        assert highlight.ids_with(HighlightTag.REQUIRED) == {"A", "B", "C"}
        assert highlight.ids_with(HighlightTag.UNLOCKED) == frozenset()

    def test_complete_ancestors_make_node_unlocked(self, chain_graph, parts):
        store, resolver, _ = parts
        store.toggle("A")
        store.toggle("B")
        highlight = compute_highlight("C", chain_graph, resolver)

        assert highlight.tag_of("C") == HighlightTag.UNLOCKED
        assert highlight.tag_of("A") == HighlightTag.REQUIRED
        assert highlight.tag_of("B") == HighlightTag.REQUIRED

    def test_unlock_resolves_to_parent(self, chain_graph, parts):
        _, resolver, _ = parts
        highlight = compute_highlight("b-hall", chain_graph, resolver)

        assert highlight.hovered_id == "b-hall"
        assert highlight.tech_id == "B"
        assert highlight.tag_of("b-hall") is None
        assert highlight.tag_of("B") == HighlightTag.REQUIRED

    def test_root_is_unlocked(self, chain_graph, parts):
        _, resolver, _ = parts
        highlight = compute_highlight("A", chain_graph, resolver)
        assert highlight.tags == frozenset({("A", HighlightTag.UNLOCKED)})


class TestHighlightSession:
    def test_enter_emits_additions(self, parts):
        _, _, session = parts
        update = session.enter("B")

        assert update.added("required") == ["A", "B"]
        assert update.removed("required") == []

    def test_exit_clears_everything(self, parts):
        _, _, session = parts
        session.enter("C")
        update = session.exit()

        assert update.removed("required") == ["A", "B", "C"]
        assert not session.active
        assert session.current.tags == frozenset()

    def test_new_hover_replaces_old_one(self, parts):
        _, _, session = parts
        session.enter("C")
        update = session.enter("A")

        assert update.removed("required") == ["A", "B", "C"]
        assert update.added("unlocked") == ["A"]
        assert session.current.tags == frozenset({("A", HighlightTag.UNLOCKED)})

    def test_refresh_sees_new_completion(self, parts):
        store, _, session = parts
        session.enter("B")
        store.toggle("A")
        update = session.refresh()

        assert update.removed("required") == ["B"]
        assert update.added("unlocked") == ["B"]

    def test_refresh_without_hover_is_empty(self, parts):
        _, _, session = parts
        assert session.refresh().is_empty

    def test_unknown_id_raises_and_keeps_current_hover(self, parts):
        _, _, session = parts
        session.enter("B")
        with pytest.raises(UnknownNodeError):
            session.enter("nowhere")
        assert session.current.hovered_id == "B"

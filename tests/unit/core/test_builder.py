"""Unit tests for the Graph Builder."""

import pytest

from techtree.core.builder import GraphBuilder, build_graph
from techtree.core.errors import IssueCategory, ValidationError
from techtree.core.types import NodeKind


class TestBuildValidTrees:
    def test_chain_builds_in_declaration_order(self, chain_graph):
        assert [t.id for t in chain_graph.tech_nodes] == ["A", "B", "C"]
        assert [u.id for u in chain_graph.unlock_nodes] == ["b-hall"]
        assert [(e.source_id, e.target_id) for e in chain_graph.edges] == [("A", "B"), ("B", "C")]

    def test_unlock_nodes_keep_parent_and_kind(self, chain_graph):
        hall = chain_graph.get_node("b-hall")
        assert hall.parent_id == "B"
        assert hall.kind == NodeKind.BUILDING
        assert chain_graph.get_node("B").unlocks == (hall,)

    def test_unlocks_are_not_edge_participants(self, chain_graph):
        endpoints = {e.source_id for e in chain_graph.edges} | {e.target_id for e in chain_graph.edges}
        assert "b-hall" not in endpoints

    def test_missing_optional_fields(self):
        graph = build_graph([{"id": "solo", "name": "Solo", "prereqs": None, "unlocks": None}])
        assert graph.get_node("solo").prereq_ids == ()
        assert graph.get_node("solo").unlocks == ()

    def test_repeated_prereq_collapses_to_one_edge(self):
        graph = build_graph([
            {"id": "a", "name": "A"},
            {"id": "b", "name": "B", "prereqs": ["a", "a"]},
        ])
        assert graph.prereqs("b") == ("a",)
        assert graph.edge_count == 1

    def test_empty_tree(self):
        graph = build_graph([])
        assert graph.node_count == 0
        assert graph.stats()["longest_chain"] == 0


class TestValidationErrors:
    def test_dangling_prereq_is_named(self):
        with pytest.raises(ValidationError) as exc:
            build_graph([{"id": "a", "name": "A", "prereqs": ["X"]}])

        assert exc.value.categories() == [IssueCategory.DANGLING_PREREQ]
        assert "'X'" in str(exc.value)

    def test_two_independent_faults_are_both_reported(self):
        with pytest.raises(ValidationError) as exc:
            build_graph([
                {"id": "a", "name": "A"},
                {"id": "a", "name": "A again"},
                {"id": "b", "name": "B", "prereqs": ["missing"]},
            ])

        categories = exc.value.categories()
        assert IssueCategory.DUPLICATE_ID in categories
        assert IssueCategory.DANGLING_PREREQ in categories
        assert len(exc.value.issues) == 2

    def test_unlock_colliding_with_technology_id(self):
        with pytest.raises(ValidationError) as exc:
            build_graph([
                {"id": "a", "name": "A"},
                {"id": "b", "name": "B", "unlocks": [{"id": "a", "name": "Clash", "type": "unit"}]},
            ])
        assert exc.value.categories() == [IssueCategory.DUPLICATE_ID]

    def test_cycle_is_reported_once(self):
        with pytest.raises(ValidationError) as exc:
            build_graph([
                {"id": "a", "name": "A", "prereqs": ["c"]},
                {"id": "b", "name": "B", "prereqs": ["a"]},
                {"id": "c", "name": "C", "prereqs": ["b"]},
                {"id": "d", "name": "D"},
            ])

        assert exc.value.categories() == [IssueCategory.CYCLE]
        message = exc.value.issues[0].message
        for node_id in ("a", "b", "c"):
            assert node_id in message

    def test_two_separate_cycles(self):
        with pytest.raises(ValidationError) as exc:
            build_graph([
                {"id": "a", "name": "A", "prereqs": ["b"]},
                {"id": "b", "name": "B", "prereqs": ["a"]},
                {"id": "c", "name": "C", "prereqs": ["d"]},
                {"id": "d", "name": "D", "prereqs": ["c"]},
            ])
        assert exc.value.categories() == [IssueCategory.CYCLE, IssueCategory.CYCLE]

    def test_self_prerequisite(self):
        with pytest.raises(ValidationError) as exc:
            build_graph([{"id": "a", "name": "A", "prereqs": ["a"]}])
        assert exc.value.categories() == [IssueCategory.SELF_PREREQ]

    def test_prereq_pointing_at_an_unlock(self):
        with pytest.raises(ValidationError) as exc:
            build_graph([
                {"id": "a", "name": "A", "unlocks": [{"id": "hut", "name": "Hut", "type": "building"}]},
                {"id": "b", "name": "B", "prereqs": ["hut"]},
            ])
        assert exc.value.categories() == [IssueCategory.DANGLING_PREREQ]
        assert "unlock" in exc.value.issues[0].message

    def test_schema_faults_reported_with_structural_ones(self):
        with pytest.raises(ValidationError) as exc:
            build_graph([
                {"id": "a"},
                {"id": "b", "name": "B", "unlocks": [{"id": "u", "name": "U", "type": "technology"}]},
                "not an object",
                {"id": "c", "name": "C", "prereqs": ["nope"]},
            ])

        categories = exc.value.categories()
        assert categories.count(IssueCategory.SCHEMA) == 3
        assert IssueCategory.DANGLING_PREREQ in categories

    def test_unknown_unlock_type(self):
        with pytest.raises(ValidationError) as exc:
            build_graph([
                {"id": "a", "name": "A", "unlocks": [{"id": "u", "name": "U", "type": "relic"}]},
            ])
        assert exc.value.issues[0].node_id == "a"


class TestBuildElements:
    def test_round_trip_through_elements(self, sample_graph):
        rebuilt = GraphBuilder().build_elements(sample_graph.to_elements())

        assert [t.id for t in rebuilt.tech_nodes] == [t.id for t in sample_graph.tech_nodes]
        assert [u.id for u in rebuilt.unlock_nodes] == [u.id for u in sample_graph.unlock_nodes]
        assert set(rebuilt.edges) == set(sample_graph.edges)

    def test_dangling_parent(self):
        elements = [
            {"group": "nodes", "data": {"id": "a", "name": "A"}, "classes": ["technology"]},
            {"group": "nodes", "data": {"id": "u", "name": "U", "parent": "ghost"}, "classes": ["unit"]},
        ]
        with pytest.raises(ValidationError) as exc:
            GraphBuilder().build_elements(elements)

        assert exc.value.categories() == [IssueCategory.DANGLING_PARENT]
        assert "ghost" in str(exc.value)

    def test_dangling_parent_and_dangling_edge_together(self):
        elements = [
            {"group": "nodes", "data": {"id": "a", "name": "A"}, "classes": ["technology"]},
            {"group": "nodes", "data": {"id": "u", "name": "U", "parent": "ghost"}, "classes": ["unit"]},
            {"group": "edges", "data": {"source": "phantom", "target": "a"}},
        ]
        with pytest.raises(ValidationError) as exc:
            GraphBuilder().build_elements(elements)

        assert set(exc.value.categories()) == {
            IssueCategory.DANGLING_PARENT, IssueCategory.DANGLING_PREREQ,
        }

    def test_unlock_without_parent_is_rejected(self):
        elements = [{"group": "nodes", "data": {"id": "u", "name": "U"}, "classes": ["wonder"]}]
        with pytest.raises(ValidationError) as exc:
            GraphBuilder().build_elements(elements)
        assert exc.value.categories() == [IssueCategory.SCHEMA]

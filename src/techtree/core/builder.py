"""
Graph Builder - turns raw tech definitions into a validated TechGraph.

Validation is exhaustive: every violated invariant is collected and
reported together in one ValidationError, and no partial graph escapes.

Checked invariants:
1. Node ids are unique across technologies and unlocks.
2. Every prerequisite refers to an existing technology.
3. The prerequisite relation is acyclic.
4. Every unlock's parent refers to an existing technology.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

import networkx as nx
import pydantic

from .errors import GraphIssue, IssueCategory, ValidationError
from .graph import TechGraph
from .types import UNLOCK_KINDS, NodeKind, RawTech, TechNode, UnlockNode

logger = logging.getLogger(__name__)


@dataclass
class _TechEntry:
    id: str
    name: str
    prereqs: List[str] = field(default_factory=list)


@dataclass
class _UnlockEntry:
    id: str
    name: str
    kind: NodeKind
    parent_id: str


@dataclass
class _Draft:
    """Nodes collected from the input before any invariant is checked."""
    techs: List[_TechEntry] = field(default_factory=list)
    unlocks: List[_UnlockEntry] = field(default_factory=list)
    issues: List[GraphIssue] = field(default_factory=list)


class GraphBuilder:
    """
    Builds immutable TechGraphs from tree definitions.

    Two input shapes are accepted:
    - `build`: the nested definition list
      `[{id, name, prereqs?, unlocks?: [{id, name, type}]}]`
    - `build_elements`: the flat renderer payload produced by
      `TechGraph.to_elements()`

    Example:
        ```python
        graph = GraphBuilder().build([
            {"id": "mining", "name": "Mining"},
            {"id": "bronze", "name": "Bronze Working", "prereqs": ["mining"]},
        ])
        ```
    """

    def build(self, definitions: Iterable[Any]) -> TechGraph:
        """
        Build a graph from nested tech definitions.

        Raises:
            ValidationError: listing every schema and structural fault.
        """
        draft = _Draft()

        for position, item in enumerate(definitions):
            try:
                raw = RawTech.model_validate(item)
            except pydantic.ValidationError as e:
                draft.issues.append(_schema_issue(item, position, e))
                continue

            draft.techs.append(_TechEntry(id=raw.id, name=raw.name, prereqs=list(raw.prereqs)))
            for unlock in raw.unlocks:
                draft.unlocks.append(
                    _UnlockEntry(id=unlock.id, name=unlock.name, kind=unlock.type, parent_id=raw.id)
                )

        return self._assemble(draft)

    def build_elements(self, elements: Iterable[Dict[str, Any]]) -> TechGraph:
        """
        Build a graph from a flat node/edge element list.

        Raises:
            ValidationError: listing every schema and structural fault.
        """
        draft = _Draft()
        techs_by_id: Dict[str, _TechEntry] = {}
        pending_edges = []

        for position, element in enumerate(elements):
            if not isinstance(element, dict):
                draft.issues.append(GraphIssue(
                    category=IssueCategory.SCHEMA,
                    message=f"Element #{position} is not an object",
                ))
                continue

            data = element.get("data") or {}
            group = element.get("group")

            if group == "edges":
                source, target = data.get("source"), data.get("target")
                if not source or not target:
                    draft.issues.append(GraphIssue(
                        category=IssueCategory.SCHEMA,
                        message=f"Edge element #{position} needs both source and target",
                    ))
                    continue
                pending_edges.append((source, target))
                continue

            node_id, name = data.get("id"), data.get("name")
            if group != "nodes" or not node_id or name is None:
                draft.issues.append(GraphIssue(
                    category=IssueCategory.SCHEMA,
                    node_id=node_id or None,
                    message=f"Element #{position} is not a node with an id and a name",
                ))
                continue

            kind = _kind_from_classes(element.get("classes") or [])
            parent_id = data.get("parent")

            if parent_id is None and kind in (None, NodeKind.TECHNOLOGY):
                entry = _TechEntry(id=node_id, name=name)
                draft.techs.append(entry)
                techs_by_id.setdefault(node_id, entry)
            elif parent_id is not None and kind in UNLOCK_KINDS:
                draft.unlocks.append(
                    _UnlockEntry(id=node_id, name=name, kind=kind, parent_id=parent_id)
                )
            else:
                draft.issues.append(GraphIssue(
                    category=IssueCategory.SCHEMA,
                    node_id=node_id,
                    message=(
                        f"Node '{node_id}' has kind '{kind}' and parent '{parent_id}'; "
                        "technologies have no parent and unlocks need one"
                    ),
                ))

        for source, target in pending_edges:
            entry = techs_by_id.get(target)
            if entry is None:
                draft.issues.append(GraphIssue(
                    category=IssueCategory.DANGLING_PREREQ,
                    node_id=target,
                    message=f"Edge '{source}' -> '{target}' targets unknown technology '{target}'",
                ))
                continue
            entry.prereqs.append(source)

        return self._assemble(draft)

    # =========================================================================
    # Validation
    # =========================================================================

    def _assemble(self, draft: _Draft) -> TechGraph:
        issues = list(draft.issues)
        issues.extend(self._check_duplicates(draft))

        tech_ids = {t.id for t in draft.techs}
        unlock_ids = {u.id for u in draft.unlocks}

        for unlock in draft.unlocks:
            if unlock.parent_id not in tech_ids:
                issues.append(GraphIssue(
                    category=IssueCategory.DANGLING_PARENT,
                    node_id=unlock.id,
                    message=(
                        f"Unlock '{unlock.id}' belongs to unknown technology '{unlock.parent_id}'"
                    ),
                ))

        cycle_graph = nx.DiGraph()
        cycle_graph.add_nodes_from(t.id for t in draft.techs)

        for tech in draft.techs:
            for prereq_id in _dedupe(tech.prereqs):
                if prereq_id == tech.id:
                    issues.append(GraphIssue(
                        category=IssueCategory.SELF_PREREQ,
                        node_id=tech.id,
                        message=f"Technology '{tech.id}' lists itself as a prerequisite",
                    ))
                elif prereq_id not in tech_ids:
                    hint = " (an unlock, not a technology)" if prereq_id in unlock_ids else ""
                    issues.append(GraphIssue(
                        category=IssueCategory.DANGLING_PREREQ,
                        node_id=tech.id,
                        message=(
                            f"Technology '{tech.id}' requires unknown technology "
                            f"'{prereq_id}'{hint}"
                        ),
                    ))
                else:
                    cycle_graph.add_edge(prereq_id, tech.id)

        issues.extend(self._check_cycles(cycle_graph, draft.techs))

        if issues:
            logger.debug(f"Tree definition rejected with {len(issues)} issue(s)")
            raise ValidationError(issues)

        graph = TechGraph(self._freeze(draft))
        logger.debug(
            f"Built tech graph: {len(graph.tech_nodes)} technologies, "
            f"{len(graph.unlock_nodes)} unlocks, {graph.edge_count} edges"
        )
        return graph

    @staticmethod
    def _check_duplicates(draft: _Draft) -> List[GraphIssue]:
        seen: Dict[str, str] = {}
        issues = []
        labelled = [(t.id, "technology") for t in draft.techs]
        labelled += [(u.id, f"{u.kind} unlock") for u in draft.unlocks]

        for node_id, label in labelled:
            if node_id in seen:
                issues.append(GraphIssue(
                    category=IssueCategory.DUPLICATE_ID,
                    node_id=node_id,
                    message=f"Id '{node_id}' used by a {seen[node_id]} and a {label}",
                ))
            else:
                seen[node_id] = label
        return issues

    @staticmethod
    def _check_cycles(graph: nx.DiGraph, techs: Sequence[_TechEntry]) -> List[GraphIssue]:
        order = {}
        for index, tech in enumerate(techs):
            order.setdefault(tech.id, index)

        components = [
            component
            for component in nx.strongly_connected_components(graph)
            if len(component) > 1
        ]
        components.sort(key=lambda c: min(order[n] for n in c))

        issues = []
        for component in components:
            start = min(component, key=order.__getitem__)
            cycle = nx.find_cycle(graph.subgraph(component), source=start)
            path = [u for u, _ in cycle] + [cycle[-1][1]]
            issues.append(GraphIssue(
                category=IssueCategory.CYCLE,
                node_id=start,
                message=f"Prerequisite cycle: {' -> '.join(path)}",
            ))
        return issues

    @staticmethod
    def _freeze(draft: _Draft) -> List[TechNode]:
        unlocks_by_parent: Dict[str, List[UnlockNode]] = {}
        for unlock in draft.unlocks:
            unlocks_by_parent.setdefault(unlock.parent_id, []).append(
                UnlockNode(
                    id=unlock.id,
                    name=unlock.name,
                    kind=unlock.kind,
                    parent_id=unlock.parent_id,
                )
            )

        return [
            TechNode(
                id=tech.id,
                name=tech.name,
                prereq_ids=tuple(_dedupe(tech.prereqs)),
                unlocks=tuple(unlocks_by_parent.get(tech.id, ())),
            )
            for tech in draft.techs
        ]


def build_graph(definitions: Iterable[Any]) -> TechGraph:
    """Convenience wrapper around GraphBuilder().build()."""
    return GraphBuilder().build(definitions)


def _dedupe(ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(ids))


def _kind_from_classes(classes: Iterable[str]) -> Optional[NodeKind]:
    for css_class in classes:
        try:
            return NodeKind(css_class)
        except ValueError:
            continue
    return None


def _schema_issue(item: Any, position: int, error: pydantic.ValidationError) -> GraphIssue:
    node_id = item.get("id") if isinstance(item, dict) else None
    if not isinstance(node_id, str) or not node_id:
        node_id = None
    label = f"'{node_id}'" if node_id else f"#{position}"
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'item'}: {err['msg']}"
        for err in error.errors()
    )
    return GraphIssue(
        category=IssueCategory.SCHEMA,
        node_id=node_id,
        message=f"Definition {label} is malformed: {details}",
    )

"""
Highlight Session - hover-driven dependency highlighting.

`compute_highlight` is a pure function of (hovered node, graph, current
completion state). The session only remembers the last result so it can
tell the renderer which classes to add and remove.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

from .graph import TechGraph
from .resolver import DependencyResolver
from .types import ClassChange, HighlightTag, RenderUpdate, Verdict


@dataclass(frozen=True)
class Highlight:
    """
    Tags for one hover.

    Attributes:
        hovered_id: The node under the pointer (may be an unlock).
        tech_id: The technology the hover resolved to.
        tags: (node_id, tag) pairs to render.
    """
    hovered_id: Optional[str] = None
    tech_id: Optional[str] = None
    tags: FrozenSet[Tuple[str, HighlightTag]] = field(default_factory=frozenset)

    def tag_of(self, node_id: str) -> Optional[HighlightTag]:
        for tagged_id, tag in self.tags:
            if tagged_id == node_id:
                return tag
        return None

    def ids_with(self, tag: HighlightTag) -> FrozenSet[str]:
        return frozenset(node_id for node_id, t in self.tags if t == tag)


EMPTY_HIGHLIGHT = Highlight()


def compute_highlight(node_id: str, graph: TechGraph, resolver: DependencyResolver) -> Highlight:
    """
    Tag every ancestor `required`, and the hovered technology by its verdict.

    Unlock ids are resolved to their parent technology first.
    """
    tech_id = graph.resolve_tech(node_id)
    tags = {(ancestor, HighlightTag.REQUIRED) for ancestor in resolver.ancestors(tech_id)}

    own_tag = (
        HighlightTag.UNLOCKED
        if resolver.verdict(tech_id) == Verdict.UNLOCKED
        else HighlightTag.REQUIRED
    )
    tags.add((tech_id, own_tag))
    return Highlight(hovered_id=node_id, tech_id=tech_id, tags=frozenset(tags))


def diff_highlights(graph: TechGraph, before: Highlight, after: Highlight) -> List[ClassChange]:
    """Class removals then additions turning `before` into `after`."""
    def ordered(pairs):
        return sorted(pairs, key=lambda p: (graph.position(p[0]), p[1].value))

    removed = ordered(before.tags - after.tags)
    added = ordered(after.tags - before.tags)
    return (
        [ClassChange(node_id=n, css_class=t.value, added=False) for n, t in removed]
        + [ClassChange(node_id=n, css_class=t.value, added=True) for n, t in added]
    )


class HighlightSession:
    """
    The single active hover.

    Entering a node replaces any previous hover; nothing stacks.
    """

    def __init__(self, graph: TechGraph, resolver: DependencyResolver):
        self.graph = graph
        self.resolver = resolver
        self._current: Highlight = EMPTY_HIGHLIGHT

    @property
    def current(self) -> Highlight:
        return self._current

    @property
    def active(self) -> bool:
        return self._current.hovered_id is not None

    def enter(self, node_id: str) -> RenderUpdate:
        """
        Highlight the ancestors of `node_id`, replacing any previous hover.

        Raises:
            UnknownNodeError: if `node_id` is not a node of the graph.
        """
        return self._replace(compute_highlight(node_id, self.graph, self.resolver))

    def exit(self) -> RenderUpdate:
        return self._replace(EMPTY_HIGHLIGHT)

    def refresh(self) -> RenderUpdate:
        """Recompute the active hover against the current completion state."""
        if not self.active:
            return RenderUpdate()
        return self.enter(self._current.hovered_id)

    def _replace(self, highlight: Highlight) -> RenderUpdate:
        changes = diff_highlights(self.graph, self._current, highlight)
        self._current = highlight
        return RenderUpdate(changes=changes)

"""
Core modules for techtree.

This package contains the graph model and state engine:
- types: Node, edge and render-update data structures
- builder / graph: validated immutable tech graph
- store: persisted completion state
- resolver: ancestors and verdicts
- search: name index
- highlight / session: hover state and event routing
"""

from .builder import GraphBuilder, build_graph
from .errors import (
    ConfigError, DefinitionLoadError, GraphIssue, InvalidNodeKind,
    IssueCategory, StorageError, TechTreeError, UnknownNodeError, ValidationError,
)
from .graph import TechGraph
from .highlight import Highlight, HighlightSession, compute_highlight
from .resolver import DependencyResolver
from .search import SearchIndex
from .session import ViewerSession
from .store import DEFAULT_SLOT, CompletionStore, ToggleOutcome
from .types import (
    ClassChange, Edge, HighlightTag, NodeKind, RenderUpdate,
    TechNode, UnlockNode, Verdict,
)

__all__ = [
    # Types
    "NodeKind", "TechNode", "UnlockNode", "Edge", "Verdict", "HighlightTag",
    "ClassChange", "RenderUpdate",
    # Errors
    "TechTreeError", "ValidationError", "GraphIssue", "IssueCategory",
    "InvalidNodeKind", "UnknownNodeError", "StorageError",
    "DefinitionLoadError", "ConfigError",
    # Graph
    "GraphBuilder", "build_graph", "TechGraph",
    # State
    "CompletionStore", "ToggleOutcome", "DEFAULT_SLOT",
    "DependencyResolver", "SearchIndex",
    "Highlight", "HighlightSession", "compute_highlight", "ViewerSession",
]

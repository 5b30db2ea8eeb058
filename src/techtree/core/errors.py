"""
Exception hierarchy for techtree.

Build and wiring faults are raised; persistence faults are reported as
Result values by the completion store and never raised to the viewer.
"""

from enum import StrEnum
from typing import List, Optional

from pydantic import BaseModel


class IssueCategory(StrEnum):
    """Kinds of structural faults found while building a graph."""
    SCHEMA = "schema"
    DUPLICATE_ID = "duplicate_id"
    DANGLING_PREREQ = "dangling_prereq"
    DANGLING_PARENT = "dangling_parent"
    SELF_PREREQ = "self_prereq"
    CYCLE = "cycle"


class GraphIssue(BaseModel):
    """One violated invariant in a tree definition."""
    category: IssueCategory
    node_id: Optional[str] = None
    message: str

    def __str__(self) -> str:
        return f"[{self.category}] {self.message}"


class TechTreeError(Exception):
    """Base class for all techtree errors."""


class ValidationError(TechTreeError):
    """
    Raised when a tree definition violates graph invariants.

    Attributes:
        issues: Every fault found, in discovery order.
    """

    def __init__(self, issues: List[GraphIssue]):
        self.issues = list(issues)
        lines = "\n".join(f"  - {issue}" for issue in self.issues)
        super().__init__(f"Tech tree has {len(self.issues)} issue(s):\n{lines}")

    def categories(self) -> List[IssueCategory]:
        return [issue.category for issue in self.issues]


class InvalidNodeKind(TechTreeError):
    """
    Raised when an operation defined over technologies receives an unlock id.

    This is an integration bug: callers must redirect unlocks to their parent.
    """

    def __init__(self, node_id: str, operation: str):
        self.node_id = node_id
        self.operation = operation
        super().__init__(
            f"'{node_id}' is not a technology; {operation} accepts technology ids only"
        )


class UnknownNodeError(TechTreeError, KeyError):
    """Raised when a node id does not exist in the graph."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(node_id)

    def __str__(self) -> str:
        return f"Unknown node: '{self.node_id}'"


class StorageError(TechTreeError):
    """Raised by state backends when a slot cannot be read or written."""


class DefinitionLoadError(TechTreeError):
    """Raised when a tree definition file cannot be read or parsed."""


class ConfigError(TechTreeError):
    """Raised when configuration is malformed."""

"""
Core type definitions for techtree.

Two node categories live in one id namespace:
- TechNode: a technology, participating in dependency edges.
- UnlockNode: a building/unit/wonder/spaceship part contained by a TechNode.

Containment (unlock -> parent) and dependency (prereq -> tech) are kept as
separate relations.
"""

from enum import StrEnum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NodeKind(StrEnum):
    """Categories of nodes in the tech tree."""
    TECHNOLOGY = "technology"
    BUILDING = "building"
    WONDER = "wonder"
    UNIT = "unit"
    SPACESHIP_PART = "spaceshippart"


UNLOCK_KINDS = frozenset({
    NodeKind.BUILDING,
    NodeKind.WONDER,
    NodeKind.UNIT,
    NodeKind.SPACESHIP_PART,
})


class Verdict(StrEnum):
    """Whether every prerequisite of a technology is complete."""
    UNLOCKED = "unlocked"
    REQUIRED = "required"


class HighlightTag(StrEnum):
    """Transient hover tags handed to the renderer as classes."""
    REQUIRED = "required"
    UNLOCKED = "unlocked"


COMPLETED_CLASS = "completed"
HAS_UNLOCKS_CLASS = "has-unlocks"


# =============================================================================
# Raw input schema
# =============================================================================

class RawUnlock(BaseModel):
    """An unlock entry as it appears in a tree definition."""
    id: str = Field(min_length=1)
    name: str
    type: NodeKind

    model_config = ConfigDict(extra="ignore")

    @field_validator("type")
    @classmethod
    def _not_technology(cls, value: NodeKind) -> NodeKind:
        if value not in UNLOCK_KINDS:
            raise ValueError(f"unlock type must be one of {sorted(UNLOCK_KINDS)}")
        return value


class RawTech(BaseModel):
    """A technology entry as it appears in a tree definition."""
    id: str = Field(min_length=1)
    name: str
    prereqs: List[str] = Field(default_factory=list)
    unlocks: List[RawUnlock] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @field_validator("prereqs", "unlocks", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value


# =============================================================================
# Graph model
# =============================================================================

class UnlockNode(BaseModel):
    """
    A building, wonder, unit or spaceship part granted by a technology.

    Never carries completion state and never participates in edges.
    """
    id: str
    name: str
    kind: NodeKind
    parent_id: str

    model_config = ConfigDict(frozen=True)


class TechNode(BaseModel):
    """A technology with its prerequisites and the things it unlocks."""
    id: str
    name: str
    prereq_ids: Tuple[str, ...] = ()
    unlocks: Tuple[UnlockNode, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def kind(self) -> NodeKind:
        return NodeKind.TECHNOLOGY

    @property
    def has_unlocks(self) -> bool:
        return bool(self.unlocks)


class Edge(BaseModel):
    """Directed dependency: the source must be complete before the target."""
    source_id: str
    target_id: str

    model_config = ConfigDict(frozen=True)


class ClassChange(BaseModel):
    """A single class addition or removal for the renderer to apply."""
    node_id: str
    css_class: str
    added: bool

    model_config = ConfigDict(frozen=True)


class RenderUpdate(BaseModel):
    """
    Everything the renderer needs to apply after one event.

    `center_on` is set when the event asks the view to focus a node
    (search submit, search result selection).
    """
    changes: List[ClassChange] = Field(default_factory=list)
    center_on: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.changes and self.center_on is None

    def added(self, css_class: str) -> List[str]:
        """Node ids gaining `css_class` in this update."""
        return [c.node_id for c in self.changes if c.added and c.css_class == css_class]

    def removed(self, css_class: str) -> List[str]:
        """Node ids losing `css_class` in this update."""
        return [c.node_id for c in self.changes if not c.added and c.css_class == css_class]

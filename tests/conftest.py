"""Shared fixtures: small trees exercised across the test suite."""

import pytest

from techtree.core.builder import GraphBuilder
from techtree.loader import load_sample_graph
from techtree.storage import MemoryBackend


@pytest.fixture
def chain_definitions():
    """A <- B <- C, with one unlock on B."""
    return [
        {"id": "A", "name": "Alpha"},
        {"id": "B", "name": "Bravo", "prereqs": ["A"],
         "unlocks": [{"id": "b-hall", "name": "Bravo Hall", "type": "building"}]},
        {"id": "C", "name": "Charlie", "prereqs": ["B"]},
    ]


@pytest.fixture
def chain_graph(chain_definitions):
    return GraphBuilder().build(chain_definitions)


@pytest.fixture
def diamond_graph():
    """x needs a and b, both of which need c."""
    return GraphBuilder().build([
        {"id": "c", "name": "Root"},
        {"id": "a", "name": "Left", "prereqs": ["c"]},
        {"id": "b", "name": "Right", "prereqs": ["c"]},
        {"id": "x", "name": "Top", "prereqs": ["a", "b"],
         "unlocks": [{"id": "x-wonder", "name": "Top Wonder", "type": "wonder"}]},
    ])


@pytest.fixture
def sample_graph():
    return load_sample_graph()


@pytest.fixture
def memory_backend():
    return MemoryBackend()

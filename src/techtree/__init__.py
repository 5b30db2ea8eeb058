"""
techtree: dependency graph and completion tracker for technology trees.

The core turns raw tech definitions into a validated graph, tracks which
technologies are complete, resolves missing prerequisites, and indexes
node names for search. Rendering is left to an external collaborator.
"""

__version__ = "0.3.0"

"""
Toggle Command - mark a technology complete or incomplete.
"""

import sys

import click

from ..utils import (
    describe_node, echo_success, echo_warning, resolve_node, session_or_exit, tree_options,
)


@click.command()
@click.argument("node")
@tree_options
def toggle(node: str, tree_path, state_path, state_backend, verbose):
    """
    Flip the completion of a technology.

    Toggling an unlock toggles the technology that grants it.
    """
    session = session_or_exit(tree_path, state_path, state_backend, verbose)

    node_id = resolve_node(session, node)
    if node_id is None:
        sys.exit(1)

    session.click(node_id)
    outcome = session.last_toggle
    name = describe_node(session, outcome.tech_id)

    if outcome.completed:
        echo_success(f"{name} marked complete")
    else:
        echo_success(f"{name} marked incomplete")

    if not outcome.persisted:
        echo_warning(f"State was not saved: {outcome.flush.unwrap_err()}")
        sys.exit(1)

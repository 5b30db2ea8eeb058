"""
Export Command - write the renderer element payload.
"""

import json
from pathlib import Path

import click

from ...core.types import COMPLETED_CLASS
from ..utils import echo_success, session_or_exit, tree_options


@click.command()
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Output file (default: stdout)")
@click.option("--with-state", is_flag=True, help="Add the 'completed' class to completed technologies")
@tree_options
def export(output: str | None, with_state: bool, tree_path, state_path, state_backend, verbose):
    """
    Export nodes and edges for a graph renderer.

    Nodes carry their kind as a class and unlocks carry their parent;
    edges point from prerequisite to technology.
    """
    session = session_or_exit(tree_path, state_path, state_backend, verbose)
    elements = session.graph.to_elements()

    if with_state:
        completed = session.store.completed_ids()
        for element in elements:
            if element["group"] == "nodes" and element["data"]["id"] in completed:
                element["classes"].append(COMPLETED_CLASS)

    payload = json.dumps(elements, indent=2)
    if output is None:
        click.echo(payload)
        return

    Path(output).write_text(payload + "\n", encoding="utf-8")
    echo_success(f"Wrote {len(elements)} elements to {output}")

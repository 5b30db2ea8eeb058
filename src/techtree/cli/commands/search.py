"""
Search Command - find nodes by name.
"""

import json

import click

from ...core.types import TechNode
from ..utils import session_or_exit, tree_options


@click.command()
@click.argument("query")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@tree_options
def search(query: str, as_json: bool, tree_path, state_path, state_backend, verbose):
    """Find technologies and unlocks whose name contains QUERY."""
    session = session_or_exit(tree_path, state_path, state_backend, verbose)
    results = session.search_query(query)

    if as_json:
        click.echo(json.dumps([
            {"id": node_id, "name": session.graph.get_node(node_id).name}
            for node_id in results
        ], indent=2))
        return

    if not results:
        click.echo(click.style("No matches", fg="yellow"))
        return

    click.echo(f"🔎 {len(results)} match(es) for '{query.strip()}':")
    for node_id in results:
        node = session.graph.get_node(node_id)
        if isinstance(node, TechNode):
            mark = "●" if session.store.is_complete(node_id) else "○"
            click.echo(f"   {mark} {node.name} ({node_id})")
        else:
            parent = session.graph.get_node(node.parent_id)
            click.echo(f"     {node.name} [{node.kind}] via {parent.name}")

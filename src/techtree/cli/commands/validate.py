"""
Validate Command - build a tree definition and report every issue.
"""

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from ...core.errors import TechTreeError, ValidationError
from ...loader import load_graph
from ..utils import echo_error, echo_success, resolve_config

console = Console()


@click.command()
@click.argument("tree_file", required=False, type=click.Path(dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def validate(tree_file: str | None, as_json: bool, verbose: bool):
    """
    Validate a tree definition.

    Reports every duplicate id, dangling reference and prerequisite cycle,
    not only the first one found.
    """
    config = resolve_config(tree_file, None, None, verbose)
    if config is None:
        sys.exit(1)
    if config.tree_path is None:
        echo_error("No tree definition given. Pass TREE_FILE or set TECHTREE_TREE.")
        sys.exit(1)

    try:
        graph = load_graph(config.tree_path)
    except ValidationError as e:
        if as_json:
            click.echo(json.dumps({
                "valid": False,
                "issues": [issue.model_dump(mode="json") for issue in e.issues],
            }, indent=2))
        else:
            echo_error(f"{config.tree_path}: {len(e.issues)} issue(s)")
            table = Table(show_header=True, header_style="bold")
            table.add_column("Category")
            table.add_column("Node")
            table.add_column("Problem")
            for issue in e.issues:
                table.add_row(issue.category.value, issue.node_id or "-", issue.message)
            console.print(table)
        sys.exit(1)
    except TechTreeError as e:
        echo_error(str(e))
        sys.exit(1)

    stats = graph.stats()
    if as_json:
        click.echo(json.dumps({"valid": True, "stats": stats}, indent=2))
        return

    echo_success(f"{config.tree_path} is valid")
    click.echo(f"   Technologies: {stats['technologies']}")
    click.echo(f"   Unlocks:      {stats['unlocks']}")
    click.echo(f"   Edges:        {stats['edges']}")
    click.echo(f"   Longest chain: {stats['longest_chain']}")

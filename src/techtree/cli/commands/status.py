"""
Status Command - show what a technology still needs.
"""

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from ...core.types import Verdict
from ..utils import describe_node, resolve_node, session_or_exit, tree_options

console = Console()


@click.command()
@click.argument("node")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@tree_options
def status(node: str, as_json: bool, tree_path, state_path, state_backend, verbose):
    """
    Show the verdict and prerequisites of a technology.

    NODE may be an id or part of a name. Unlocks report on the technology
    that grants them.
    """
    session = session_or_exit(tree_path, state_path, state_backend, verbose)

    node_id = resolve_node(session, node)
    if node_id is None:
        sys.exit(1)

    tech_id = session.graph.resolve_tech(node_id)
    ancestors = session.graph.sort_techs(session.resolver.ancestors(tech_id))
    missing = session.resolver.missing(tech_id)
    verdict = session.resolver.verdict(tech_id)
    completed = session.store.is_complete(tech_id)

    if as_json:
        click.echo(json.dumps({
            "node": node_id,
            "technology": tech_id,
            "completed": completed,
            "verdict": verdict.value,
            "ancestors": ancestors,
            "missing": missing,
        }, indent=2))
        return

    color = "green" if verdict == Verdict.UNLOCKED else "red"
    click.echo()
    click.echo(f"🔬 {click.style(describe_node(session, tech_id), bold=True)} ({tech_id})")
    if node_id != tech_id:
        click.echo(f"   Unlocks {describe_node(session, node_id)}")
    click.echo(f"   Verdict:   {click.style(verdict.value, fg=color)}")
    click.echo(f"   Completed: {'yes' if completed else 'no'}")

    if not ancestors:
        click.echo("   No prerequisites.")
        return

    table = Table(title=f"Prerequisites ({len(missing)} missing)", header_style="bold")
    table.add_column("Technology")
    table.add_column("Id", style="dim")
    table.add_column("Done")
    for ancestor in ancestors:
        done = session.store.is_complete(ancestor)
        table.add_row(
            describe_node(session, ancestor),
            ancestor,
            "[green]✓[/green]" if done else "[red]✗[/red]",
        )
    console.print(table)

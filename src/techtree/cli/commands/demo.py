"""
Demo Command - walk through the bundled sample tree.

Runs against in-memory state, so nothing on disk is touched.
"""

import click
from rich.console import Console
from rich.panel import Panel

from ...core.session import ViewerSession
from ...loader import load_sample_graph
from ...storage import MemoryBackend
from ..utils import configure_logging

console = Console()

DEMO_TARGET = "steam-power"
DEMO_STEPS = ("pottery", "writing", "calendar", "philosophy")


def _show(session: ViewerSession, tech_id: str) -> None:
    missing = session.resolver.missing(tech_id)
    verdict = session.resolver.verdict(tech_id)
    names = ", ".join(session.graph.get_node(m).name for m in missing) or "nothing"
    click.echo(f"   {session.graph.get_node(tech_id).name}: {verdict.value} (missing: {names})")


@click.command()
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
def demo(verbose: bool):
    """Show dependency resolution on a small sample tree."""
    configure_logging("WARNING", verbose)

    graph = load_sample_graph()
    session = ViewerSession(graph, MemoryBackend())
    session.start()

    stats = graph.stats()
    console.print(Panel.fit(
        f"{stats['technologies']} technologies, {stats['unlocks']} unlocks, "
        f"{stats['edges']} prerequisite edges",
        title="Sample tech tree",
    ))

    click.echo(f"Ancestors of {graph.get_node(DEMO_TARGET).name}:")
    for ancestor in graph.sort_techs(session.resolver.ancestors(DEMO_TARGET)):
        click.echo(f"   - {graph.get_node(ancestor).name}")

    click.echo()
    _show(session, DEMO_TARGET)
    for step in DEMO_STEPS:
        session.click(step)
        click.echo(f"✔ completed {graph.get_node(step).name}")
        _show(session, "philosophy")

    click.echo()
    click.echo("Search 'eng':")
    for node_id in session.search_query("eng"):
        click.echo(f"   - {graph.get_node(node_id).name}")

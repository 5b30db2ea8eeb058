"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing, logging setup, shared options and the loading of a
configured tree plus its completion state into a ViewerSession.
"""

import logging
import sys
from typing import Callable, Optional

import click

from ..config import TechTreeConfig, load_config
from ..core.errors import TechTreeError, ValidationError
from ..core.session import ViewerSession
from ..loader import load_graph
from ..storage import create_backend


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross to stderr.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """
    Print a warning message with a yellow alert symbol.

    Args:
        message (str): The warning message to display.
    """
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """
    Print an informational message, dimmed.

    Args:
        message (str): The information to display.
    """
    click.echo(click.style(f"   {message}", dim=True))


def configure_logging(level: str, verbose: bool = False) -> None:
    """Route library logging to stderr at the configured level."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


TREE_OPTIONS = (
    click.option("-t", "--tree", "tree_path", type=click.Path(dir_okay=False),
                 help="Tree definition file (JSON or YAML)"),
    click.option("-s", "--state", "state_path", type=click.Path(dir_okay=False),
                 help="Completion state file"),
    click.option("--backend", "state_backend", type=click.Choice(["json", "sqlite", "memory"]),
                 help="Completion state backend"),
    click.option("-v", "--verbose", is_flag=True, help="Show debug logging"),
)


def tree_options(func: Callable) -> Callable:
    """Attach the options shared by every command that opens a tree."""
    for option in reversed(TREE_OPTIONS):
        func = option(func)
    return func


def resolve_config(
    tree_path: Optional[str],
    state_path: Optional[str],
    state_backend: Optional[str],
    verbose: bool,
) -> Optional[TechTreeConfig]:
    """Load configuration and set up logging; None if configuration is broken."""
    try:
        config = load_config({
            "tree_path": tree_path,
            "state_path": state_path,
            "state_backend": state_backend,
        })
    except TechTreeError as e:
        echo_error(str(e))
        return None

    configure_logging(config.log_level, verbose)
    return config


def open_session(config: TechTreeConfig) -> Optional[ViewerSession]:
    """
    Build the configured tree and load its completion state.

    Prints the failure and returns None when the tree is missing or invalid.
    """
    if config.tree_path is None:
        echo_error("No tree definition configured.")
        click.echo("Pass --tree FILE or set TECHTREE_TREE.", err=True)
        return None

    try:
        graph = load_graph(config.tree_path)
        backend = create_backend(config.state_backend, config.resolved_state_path)
    except ValidationError as e:
        echo_error(f"Invalid tree definition: {config.tree_path}")
        for issue in e.issues:
            click.echo(f"   - {issue}", err=True)
        return None
    except TechTreeError as e:
        echo_error(str(e))
        return None

    session = ViewerSession(graph, backend, slot=config.state_slot)
    session.start()
    return session


def describe_node(session: ViewerSession, node_id: str) -> str:
    node = session.graph.get_node(node_id)
    return node.name if node else node_id


def resolve_node(session: ViewerSession, name: str) -> Optional[str]:
    """
    Resolve user input to a node id.

    Exact ids win; otherwise the first name match is used.
    """
    if session.graph.has_node(name):
        return name

    matches = session.index.search(name)
    if not matches:
        echo_error(f"No node found matching: {name}")
        return None
    if len(matches) > 1:
        click.echo(f"Ambiguous '{name}'. Using first match: {matches[0]}", err=True)
    return matches[0]


def session_or_exit(
    tree_path: Optional[str],
    state_path: Optional[str],
    state_backend: Optional[str],
    verbose: bool,
) -> ViewerSession:
    """Resolve configuration and open a session, exiting with status 1 on failure."""
    config = resolve_config(tree_path, state_path, state_backend, verbose)
    session = open_session(config) if config else None
    if session is None:
        sys.exit(1)
    return session

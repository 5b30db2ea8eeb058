"""
Reset Command - clear every completed technology.
"""

import sys

import click

from ..utils import echo_info, echo_success, echo_warning, session_or_exit, tree_options


@click.command()
@click.option("-y", "--yes", is_flag=True, help="Skip the confirmation prompt")
@tree_options
def reset(yes: bool, tree_path, state_path, state_backend, verbose):
    """Reset all completed technologies."""
    session = session_or_exit(tree_path, state_path, state_backend, verbose)

    completed = session.store.completed_ids()
    if not completed:
        echo_info("Nothing to reset.")
        return

    if not yes and not click.confirm(
        f"Are you sure you want to reset all {len(completed)} completed technologies?"
    ):
        click.echo("Aborted.")
        return

    session.reset()
    if session.store.last_flush.is_err():
        echo_warning(f"State was not saved: {session.store.last_flush.unwrap_err()}")
        sys.exit(1)
    echo_success(f"Cleared {len(completed)} completed technologies")

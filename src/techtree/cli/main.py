"""
techtree CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import demo, export, reset, search, status, toggle, validate


@click.group()
@click.version_option(package_name="techtree")
def main():
    """techtree: technology tree dependency tracker.

    Marks technologies complete, shows which prerequisites are still
    missing, and searches the tree by name.

    \b
    Quick Start:
      techtree demo
      techtree validate tree.yaml
      techtree status "Steam Power" --tree tree.yaml
      techtree toggle pottery --tree tree.yaml
    """
    pass


# Register commands
main.add_command(validate.validate)
main.add_command(status.status)
main.add_command(toggle.toggle)
main.add_command(search.search)
main.add_command(reset.reset)
main.add_command(export.export)
main.add_command(demo.demo)

if __name__ == "__main__":
    main()

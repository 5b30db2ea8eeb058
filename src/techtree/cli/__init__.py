"""Command line interface for techtree."""

"""Command line interface commands."""

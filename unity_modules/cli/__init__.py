"""Typer command-line interface for unity-modules."""

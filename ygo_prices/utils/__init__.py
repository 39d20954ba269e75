"""Rendering helpers shared by the CLI."""

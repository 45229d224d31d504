"""Command-line interface for KaoCache."""

from .typer_app import app

__all__ = ["app"]

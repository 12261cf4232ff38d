"""Web API for rep-tally."""

from .app import create_app

__all__ = ["create_app"]

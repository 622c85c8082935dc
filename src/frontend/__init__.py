"""HTTP view of a linemux session: completion and history as JSON."""
from .web import app, main

__all__ = ["app", "main"]

"""REST surface for the lens controller."""

from .server import APIServer, create_app

__all__ = ["APIServer", "create_app"]

"""
HTTP surface for the episode pipeline.
"""

from .server import app, create_app

__all__ = ["app", "create_app"]

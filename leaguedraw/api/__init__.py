"""HTTP surface of the draw service."""

from .app import DrawRequest, create_app

__all__ = ["DrawRequest", "create_app"]

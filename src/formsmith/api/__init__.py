"""Web API for formsmith."""

from .app import create_app

__all__ = ["create_app"]

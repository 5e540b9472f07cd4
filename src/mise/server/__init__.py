"""ASGI application factory and dependencies for the Mise server."""

from mise.server.app import app, create_app

__all__ = ["app", "create_app"]

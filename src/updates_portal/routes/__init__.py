"""Blueprint registration for updates portal routes."""

from __future__ import annotations

from flask import Flask  # pylint: disable=import-error

from .holder import bp as holder_bp


def register_blueprints(app: Flask) -> None:
    """Register Flask blueprints for portal routes."""
    app.register_blueprint(holder_bp)

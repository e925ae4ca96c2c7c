"""
podman-exporter CLI package.

Exposes the top-level Typer `app` used by the `podman-exporter` console script.
"""

from .main import app

__all__ = ["app"]

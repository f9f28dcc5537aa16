"""Qt user interface for PickSort."""

from .app import run_app

__all__ = ["run_app"]

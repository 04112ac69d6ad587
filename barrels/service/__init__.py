"""HTTP service exposing the barrels studio API."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]

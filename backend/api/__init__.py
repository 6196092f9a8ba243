"""
SparkTasks API package.

Provides the FastAPI application serving tasks, habits and timers.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]

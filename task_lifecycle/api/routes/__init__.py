"""API routes."""

from task_lifecycle.api.routes import health, internal, tasks

__all__ = ["health", "internal", "tasks"]

"""
API Dependencies

This module provides FastAPI dependency injection functions for the API layer.

Pattern: Centralized dependency injection following FastAPI best practices.
All dependencies can be overridden in tests using FastAPI's
dependency_overrides mechanism.
"""

from fastapi import Request

from src.services.failover import FailoverController


def get_failover_controller(request: Request) -> FailoverController:
    """
    Get the FailoverController created during application startup.

    The controller owns the process-wide credential pool, so one instance is
    shared by every request.
    """
    return request.app.state.failover


__all__ = [
    "get_failover_controller",
]

"""API Package - FastAPI routes, middleware, and dependencies.

Components:
- routes: API endpoint routers (ai, health)
- middleware: Request logging with header redaction and correlation IDs
- deps: FastAPI dependency injection functions

Note: Import routers directly from src.api.routes to avoid circular imports.
"""

__all__ = ["routes", "middleware", "deps"]

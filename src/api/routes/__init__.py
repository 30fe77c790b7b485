"""Routes Package - API endpoint definitions.

Note: Import routers directly from individual modules to avoid circular imports.
Example: from src.api.routes.ai import router as ai_router
"""

__all__ = ["ai", "health"]

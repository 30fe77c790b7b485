"""LLM Relay - Source Package.

Note: Import `create_app` directly from `src.main` to avoid circular imports.
"""

__all__ = ["main", "api", "core", "models", "providers", "resilience", "services"]

"""
Providers Package - upstream chat completion adapters

This package contains the abstract upstream interface and its adapters.

Reference Documents:
- GUIDELINES pp. 793-795: Repository pattern and ABC patterns
"""

from src.providers.base import ChatCompletionClient
from src.providers.fake import FakeChatClient, make_completion
from src.providers.github_models import GitHubModelsClient

__all__ = [
    "ChatCompletionClient",
    "GitHubModelsClient",
    "FakeChatClient",
    "make_completion",
]

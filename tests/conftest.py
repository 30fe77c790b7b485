"""
Pytest configuration for the relay test suite.

Reference Documents:
- GUIDELINES pp. 155-157: "high and low gear" testing philosophy
- GUIDELINES pp. 157: FakeRepository pattern using duck typing

This configuration sets up:
- Test discovery paths
- A controllable clock for cooldown tests
- Credential pool, fake upstream and controller fixtures
- A FastAPI test client wired to the fake upstream
"""

import io
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

# Add project root to Python path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

TOKENS = ["tok-primary-aaaa", "tok-secondary-bbbb"]


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for service interactions")


# =============================================================================
# Clock
# =============================================================================


class FakeClock:
    """Manually advanced clock; call it to read the time."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """A FakeClock starting at t=1000s."""
    return FakeClock()


# =============================================================================
# Credentials and Pool
# =============================================================================


@pytest.fixture
def tokens():
    """Raw credential values used across the suite."""
    return list(TOKENS)


@pytest.fixture
def pool(tokens, clock):
    """Two-credential pool on the fake clock with a 30s cooldown."""
    from src.resilience.credential_pool import CredentialPool

    return CredentialPool([SecretStr(t) for t in tokens], cooldown_seconds=30.0, clock=clock)


@pytest.fixture
def three_pool(clock):
    """Three-credential pool on the fake clock."""
    from src.resilience.credential_pool import CredentialPool

    return CredentialPool(
        [SecretStr("tok-0"), SecretStr("tok-1"), SecretStr("tok-2")],
        cooldown_seconds=30.0,
        clock=clock,
    )


# =============================================================================
# Upstream and Controller
# =============================================================================


@pytest.fixture
def fake_client():
    """Scripted upstream with empty scripts (echo replies)."""
    from src.providers.fake import FakeChatClient

    return FakeChatClient()


@pytest.fixture
def executor(pool, fake_client):
    """Executor bound to the two-credential pool and fake upstream."""
    from src.services.executor import RequestExecutor

    return RequestExecutor(pool, fake_client, model="openai/gpt-4o-mini")


@pytest.fixture
def controller(pool, executor):
    """Controller with the English-only validator and one instruction block."""
    from src.resilience.selection import SelectionPolicy
    from src.services.failover import FailoverController
    from src.services.output_policy import EnglishOnlyValidator

    return FailoverController(
        pool=pool,
        policy=SelectionPolicy(pool),
        executor=executor,
        validator=EnglishOnlyValidator(),
        instructions=("You are a portfolio assistant.",),
    )


@pytest.fixture
def test_settings(tokens):
    """Settings with two credentials and no .env lookup."""
    from src.core.config import Settings

    return Settings(
        _env_file=None,
        github_token1=tokens[0],
        github_token2=tokens[1],
        environment="development",
        log_level="INFO",
    )


@pytest.fixture
def client(test_settings, controller):
    """TestClient for the full app, using the fixture controller."""
    from src.main import create_app

    app = create_app(settings=test_settings, controller=controller)
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture
def log_stream():
    """Redirect structured logs into a buffer for the duration of a test."""
    from src.observability.logging import configure_logging

    buffer = io.StringIO()
    configure_logging(level="DEBUG", stream=buffer, force=True)
    yield buffer
    configure_logging(force=True)

# =============================================================================
# Import API - Shared Test Fixtures
# =============================================================================
"""Fixtures shared by the Import API tests."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from import_api.api.dependencies import get_session
from import_api.config import get_settings
from import_api.engine import Session
from import_api.main import app
from import_api.services.engine import get_engine

from .fakes import EDITOR_SESSION, SAMPLE_RESULT, FakeEngine


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def engine():
    """Fake engine returning the sample result."""
    return FakeEngine(result=SAMPLE_RESULT)


@pytest.fixture
def use_session():
    """Set the session the authentication layer hands to the routes."""
    def _use(session: Session) -> None:
        app.dependency_overrides[get_session] = lambda: session

    yield _use
    app.dependency_overrides.pop(get_session, None)


@pytest.fixture
def client(engine, use_session):
    """Test client wired to the fake engine with an editor session."""
    use_session(EDITOR_SESSION)
    with patch("import_api.api.routes.get_engine", return_value=engine):
        yield TestClient(app)


@pytest.fixture
def clean_settings():
    """Drop cached settings and engine around tests that change the environment."""
    get_settings.cache_clear()
    get_engine.cache_clear()
    yield
    get_settings.cache_clear()
    get_engine.cache_clear()

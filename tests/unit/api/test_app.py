"""Unit tests for the FastAPI application wiring.

These go through the ASGI stack to check header names, routing and the
request-scoped client dependency.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi.testclient import TestClient

from app.api.main import app
from app.providers.schwab import SchwabClient, get_schwab_client
from tests.conftest import REFERENCE_TIME


@pytest.fixture
def mock_client(sample_raw_chain):
    client = MagicMock(spec=SchwabClient)
    client.get_option_chain = AsyncMock(return_value=sample_raw_chain)
    return client


@pytest.fixture
def api(mock_client):
    """TestClient with the Schwab client dependency overridden."""
    app.dependency_overrides[get_schwab_client] = lambda: mock_client
    with patch("app.api.routes.options.get_market_time", return_value=REFERENCE_TIME):
        yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.mark.unit
class TestAppRouting:
    """Test endpoints through the ASGI app."""

    def test_health(self, api):
        """✅ /health → healthy."""
        response = api.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_options_reads_access_token_header(self, api, mock_client):
        """✅ access_token header (underscore) is passed through."""
        response = api.get("/options/SPY", headers={"access_token": "token-123"})

        assert response.status_code == 200
        assert len(response.json()["calls"]) == 3
        mock_client.get_option_chain.assert_awaited_once_with("SPY", "token-123", REFERENCE_TIME)

    def test_options_without_token(self, api, mock_client):
        """✅ Missing header → 401, no outbound call."""
        response = api.get("/options/SPY")

        assert response.status_code == 401
        assert response.json() == {"error": "Access token required"}
        mock_client.get_option_chain.assert_not_called()

    def test_options_query_without_symbol(self, api):
        """✅ /options without symbol → 400."""
        response = api.get("/options", headers={"access_token": "token-123"})

        assert response.status_code == 400
        assert response.json() == {"error": "Symbol is required"}

    def test_auth_redirect(self, api):
        """✅ /auth → redirect to Schwab."""
        response = api.get("/auth", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"].startswith("https://api.schwabapi.com/v1/oauth/authorize")

    def test_token_missing_code(self, api):
        """✅ POST /token with empty body object → 400."""
        response = api.post("/token", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Authorization code is required"}

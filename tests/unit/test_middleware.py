"""Tests for CORS, security headers, and query timing middleware."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from housing_api.api.middleware import QUERY_TIME_HEADER, QueryTimingMiddleware, SecurityHeadersMiddleware, setup_cors
from housing_api.core.config import Settings


def _create_test_app() -> FastAPI:
    """Create a minimal FastAPI app for middleware testing."""
    app = FastAPI()

    @app.get("/test")
    async def test_route() -> dict:
        return {"ok": True}

    return app


class TestSecurityHeadersMiddleware:
    """Tests for SecurityHeadersMiddleware."""

    @pytest.fixture
    def client(self) -> TestClient:
        app = _create_test_app()
        app.add_middleware(SecurityHeadersMiddleware)
        return TestClient(app)

    def test_security_headers_present(self, client: TestClient) -> None:
        response = client.get("/test")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "max-age=31536000" in response.headers["Strict-Transport-Security"]


class TestQueryTimingMiddleware:
    """Tests for QueryTimingMiddleware."""

    def test_header_is_integer_milliseconds(self) -> None:
        app = _create_test_app()
        app.add_middleware(QueryTimingMiddleware)
        response = TestClient(app).get("/test")
        assert response.status_code == 200
        assert int(response.headers[QUERY_TIME_HEADER]) >= 0

    def test_header_on_404(self) -> None:
        app = _create_test_app()
        app.add_middleware(QueryTimingMiddleware)
        response = TestClient(app).get("/missing")
        assert response.status_code == 404
        assert QUERY_TIME_HEADER in response.headers


class TestCors:
    """Tests for setup_cors."""

    @pytest.fixture
    def client(self) -> TestClient:
        app = _create_test_app()
        settings = Settings(
            database_url="sqlite+aiosqlite:///:memory:",
            cors_origins="http://dashboard.test",
            _env_file=None,  # type: ignore[call-arg]
        )
        setup_cors(app, settings)
        return TestClient(app)

    def test_allowed_origin(self, client: TestClient) -> None:
        response = client.get("/test", headers={"Origin": "http://dashboard.test"})
        assert response.headers["access-control-allow-origin"] == "http://dashboard.test"

    def test_disallowed_origin(self, client: TestClient) -> None:
        response = client.get("/test", headers={"Origin": "http://evil.test"})
        assert "access-control-allow-origin" not in response.headers

    def test_preflight_rejects_delete(self, client: TestClient) -> None:
        response = client.options(
            "/test",
            headers={"Origin": "http://dashboard.test", "Access-Control-Request-Method": "DELETE"},
        )
        assert response.status_code == 400

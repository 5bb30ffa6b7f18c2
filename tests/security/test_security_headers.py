"""
Test suite for security headers middleware
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from equiptrack.config import settings
from equiptrack.middleware.security_headers import SecurityHeadersMiddleware


def _client():
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware)

    @app.get("/ping")
    def ping():
        return {"status": "ok"}

    return TestClient(app)


def test_security_headers_applied():
    response = _client().get("/ping")

    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert response.headers["Cache-Control"] == "no-store"
    assert "Strict-Transport-Security" not in response.headers


def test_production_csp_is_strict(monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")

    response = _client().get("/ping")

    csp = response.headers["Content-Security-Policy"]
    assert "default-src 'none'" in csp
    assert "unsafe-inline" not in csp
    assert "Strict-Transport-Security" in response.headers


def test_api_responses_carry_headers(client):
    response = client.get("/health/live")
    assert "Content-Security-Policy" in response.headers

"""
Test suite for rate limiting enforcement
"""

import asyncio
import json

from slowapi.util import get_remote_address


def test_limiter_uses_ip_based_key():
    """Limiter should use IP-based key function for rate limiting"""
    from equiptrack.middleware.rate_limiter import limiter

    assert limiter._key_func == get_remote_address


def test_rate_limit_error_format():
    """Rate limit errors should follow the EQT-xxx error format"""
    from equiptrack.middleware.rate_limiter import rate_limit_handler

    class MockClient:
        host = "127.0.0.1"

    class MockURL:
        path = "/api/generate-certificate-number"

    class MockRequest:
        client = MockClient()
        url = MockURL()

    response = asyncio.run(rate_limit_handler(MockRequest(), Exception("30 per 1 minute")))

    assert response.status_code == 429
    body = json.loads(response.body.decode())
    assert body["error_code"] == "EQT-429"
    assert body["retryable"] is True
    assert "transaction_id" in body
    assert response.headers["Retry-After"] == "60"


def test_certificate_number_endpoint_is_limited(client):
    """The 31st certificate number request inside a minute is rejected"""
    for _ in range(30):
        assert client.get("/api/generate-certificate-number").status_code == 200

    response = client.get("/api/generate-certificate-number")

    assert response.status_code == 429
    assert response.json()["error_code"] == "EQT-429"

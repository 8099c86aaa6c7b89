"""
Tests for the application shell: root, health, CORS and error handling.
"""

import pytest
from fastapi import Request, status
from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError

from app.exceptions import APIError
from app.main import create_app
from app.models import User
from app.services.rate_limiter import get_client_ip, limiter

FRONTEND_ORIGIN = "http://localhost:5173"


class TestRoot:
    """Tests for GET /"""

    def test_root_welcome(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "message": "Welcome to Book Review App",
            "data": None,
            "isSuccess": True,
        }


class TestHealth:
    """Tests for GET /health"""

    def test_health_check(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["app"] == "Book Review App"
        assert data["version"] == "1.0.0"
        assert data["database"] == "connected"


class TestCors:
    """The frontend origins may call the API with credentials."""

    def test_preflight_allowed_origin(self, client: TestClient):
        response = client.options(
            "/api/books",
            headers={
                "Origin": FRONTEND_ORIGIN,
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["access-control-allow-origin"] == FRONTEND_ORIGIN
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_simple_request_allowed_origin(self, client: TestClient):
        response = client.get("/api/books", headers={"Origin": FRONTEND_ORIGIN})

        assert response.headers["access-control-allow-origin"] == FRONTEND_ORIGIN

    def test_unknown_origin_not_allowed(self, client: TestClient):
        response = client.get("/api/books", headers={"Origin": "https://evil.example.com"})

        assert "access-control-allow-origin" not in response.headers


class TestErrorEnvelope:
    """Every failure is answered with {message, data: null, isSuccess: false}."""

    def test_unknown_route(self, client: TestClient):
        response = client.get("/api/nothing-here")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        body = response.json()
        assert body["isSuccess"] is False
        assert body["data"] is None
        assert body["message"] == "Not Found"

    def test_method_not_allowed(self, client: TestClient):
        response = client.patch("/api/books")

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.json()["isSuccess"] is False


class TestUnexpectedErrors:
    """Handlers for errors that escape the services."""

    @pytest.fixture
    def failing_client(self, db):
        app = create_app()

        @app.get("/boom")
        async def boom():
            raise RuntimeError("secret internal detail")

        @app.get("/db-boom")
        async def db_boom():
            raise PyMongoError("connection string with password")

        @app.get("/conflict")
        async def conflict():
            raise APIError.conflict("Already there")

        @app.get("/bad-request")
        async def bad_request():
            raise APIError.bad_request("Malformed filter")

        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client

    def test_unhandled_exception_is_generic_500(self, failing_client: TestClient):
        response = failing_client.get("/boom")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {
            "message": "Internal server error",
            "data": None,
            "isSuccess": False,
        }
        assert "secret" not in response.text

    def test_database_error_is_500(self, failing_client: TestClient):
        response = failing_client.get("/db-boom")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["isSuccess"] is False
        assert "password" not in response.text

    def test_api_error_uses_its_status(self, failing_client: TestClient):
        response = failing_client.get("/conflict")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {
            "message": "Already there",
            "data": None,
            "isSuccess": False,
        }

    def test_bad_request_uses_400(self, failing_client: TestClient):
        response = failing_client.get("/bad-request")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            "message": "Malformed filter",
            "data": None,
            "isSuccess": False,
        }


class TestRateLimiting:
    """Per-client limits on the auth and write endpoints."""

    @pytest.fixture
    def limited_client(self, client: TestClient):
        limiter.enabled = True
        limiter.reset()
        try:
            yield client
        finally:
            limiter.enabled = False
            limiter.reset()

    @staticmethod
    def login(client: TestClient, ip: str):
        return client.post(
            "/api/auth/login",
            json={"email": "testuser@example.com", "password": "SecurePass123"},
            headers={"X-Forwarded-For": ip},
        )

    def test_login_throttled_after_limit(self, limited_client: TestClient, sample_user: User):
        codes = [self.login(limited_client, "203.0.113.1").status_code for _ in range(10)]
        assert codes == [status.HTTP_200_OK] * 10

        response = self.login(limited_client, "203.0.113.1")

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.json() == {
            "message": "Too many requests. Please slow down.",
            "data": None,
            "isSuccess": False,
        }
        assert response.headers["Retry-After"] == "60"

    def test_forwarded_clients_counted_separately(
        self, limited_client: TestClient, sample_user: User
    ):
        for _ in range(11):
            self.login(limited_client, "203.0.113.1")

        response = self.login(limited_client, "203.0.113.2")

        assert response.status_code == status.HTTP_200_OK

    def test_client_ip_from_proxy_headers(self):
        def make_request(headers):
            return Request({
                "type": "http",
                "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
                "client": ("10.0.0.1", 4000),
            })

        assert get_client_ip(make_request({"X-Forwarded-For": "198.51.100.7, 10.0.0.2"})) == "198.51.100.7"
        assert get_client_ip(make_request({"X-Real-IP": "198.51.100.8"})) == "198.51.100.8"
        assert get_client_ip(make_request({})) == "10.0.0.1"

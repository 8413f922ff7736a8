import os
import sys
import uuid

from fastapi import HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy.exc import OperationalError

# Ensure we can import "route_errors.*" and "backend.*" both locally and from an installed package
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
CANDIDATE_PATHS = [
    os.path.join(REPO_ROOT, "backend"),  # host repo layout
    REPO_ROOT,
]
for p in CANDIDATE_PATHS:
    if os.path.isdir(p) and p not in sys.path:
        sys.path.insert(0, p)

from backend.main import create_app  # noqa: E402
from route_errors.core.errors import RouteError, RouteInternalError  # noqa: E402
from route_errors.db.models import Base  # noqa: E402
from route_errors.db.session import engine as app_engine  # noqa: E402
from route_errors.schemas import ErrorResponse  # noqa: E402


def _app():
    Base.metadata.create_all(bind=app_engine)
    return create_app()


def _username() -> str:
    return f"user_{uuid.uuid4().hex[:12]}"


def test_404_from_domain_error_carries_username():
    client = TestClient(_app())
    name = _username()

    resp = client.get(f"/api/v1/users/{name}")
    assert resp.status_code == 404, resp.text
    assert resp.json() == {"error": "The resource was not found", "username": name}
    ErrorResponse.model_validate(resp.json())


def test_409_on_duplicate_username():
    client = TestClient(_app())
    name = _username()

    resp = client.post("/api/v1/users/", json={"username": name})
    assert resp.status_code == 201, resp.text

    resp = client.post("/api/v1/users/", json={"username": name})
    assert resp.status_code == 409, resp.text
    assert resp.json() == {"error": "A conflict occurred", "username": name}


def test_create_read_delete_user():
    client = TestClient(_app())
    name = _username()

    resp = client.post("/api/v1/users/", json={"username": name, "display_name": "Alice"})
    assert resp.status_code == 201, resp.text
    created = resp.json()
    assert created["username"] == name

    resp = client.get(f"/api/v1/users/{name}")
    assert resp.status_code == 200, resp.text
    assert resp.json()["id"] == created["id"]

    resp = client.delete(f"/api/v1/users/{name}")
    assert resp.status_code == 204, resp.text

    # Explicit RouteError with a message override
    resp = client.delete(f"/api/v1/users/{name}")
    assert resp.status_code == 404, resp.text
    assert resp.json() == {"error": f"No user named {name}"}


def test_unknown_route_uses_default_404_message():
    client = TestClient(_app())
    resp = client.get("/api/v1/nowhere")
    assert resp.status_code == 404, resp.text
    assert resp.json() == {"error": "The resource was not found"}


def test_method_not_allowed_is_rendered_canonically():
    client = TestClient(_app())
    resp = client.put(f"/api/v1/users/{_username()}")
    assert resp.status_code == 405, resp.text
    # No table entry for 405; generic fallback message
    assert resp.json() == {"error": "An unexpected error occurred"}
    # Starlette's Allow header survives the conversion
    assert "GET" in resp.headers["allow"]


def test_500_internal_error_from_unhandled_exception_route():
    app = _app()

    # Add a test-only route that raises Exception
    def boom():
        raise Exception("synthetic boom")

    app.add_api_route("/api/v1/test/boom", boom, methods=["GET"])

    client = TestClient(app, raise_server_exceptions=False)
    resp = client.get("/api/v1/test/boom")
    assert resp.status_code == 500, resp.text

    body = resp.json()
    assert body == {"error": "An unexpected error occurred"}
    # Do not leak internal details
    assert "synthetic" not in resp.text


def test_500_from_storage_failure():
    app = _app()

    def broken_query():
        raise OperationalError("SELECT * FROM users", {}, Exception("database is locked"))

    app.add_api_route("/api/v1/test/storage", broken_query, methods=["GET"])

    client = TestClient(app, raise_server_exceptions=False)
    resp = client.get("/api/v1/test/storage")
    assert resp.status_code == 500, resp.text
    assert resp.json() == {"error": "An unexpected error occurred"}
    assert "locked" not in resp.text


def test_raised_route_error_with_custom_status_and_payload():
    app = _app()

    class RateLimit(BaseModel):
        retry_after: int

    def limited():
        raise RouteError.for_status(429).with_message("Slow down").with_data(RateLimit(retry_after=30))

    app.add_api_route("/api/v1/test/limited", limited, methods=["GET"])

    client = TestClient(app)
    resp = client.get("/api/v1/test/limited")
    assert resp.status_code == 429, resp.text
    assert resp.json() == {"error": "Slow down", "retry_after": 30}


def test_malformed_payload_degrades_to_plain_500():
    app = _app()

    def bad_payload():
        raise RouteError.bad_request().with_data(["not", "an", "object"])

    app.add_api_route("/api/v1/test/bad-payload", bad_payload, methods=["GET"])

    client = TestClient(app)
    resp = client.get("/api/v1/test/bad-payload")
    assert resp.status_code == 500, resp.text
    assert resp.json() == {"error": "An unexpected error occurred"}


def test_internal_error_raised_from_route_exposes_source():
    app = _app()

    def foxes():
        try:
            raise RuntimeError("Too many foxes in the DB")
        except RuntimeError as exc:
            raise RouteInternalError.internal_server().with_source(exc) from exc

    app.add_api_route("/api/v1/test/foxes", foxes, methods=["GET"])

    client = TestClient(app)
    resp = client.get("/api/v1/test/foxes")
    assert resp.status_code == 500, resp.text
    body = resp.json()
    assert body["error"] == "An unexpected error occurred"
    assert body["internal_error"]["name"] == "Too many foxes in the DB"
    assert "RuntimeError" in body["internal_error"]["debug"]


def test_non_json_payload_value_degrades_to_plain_500():
    app = _app()

    def nan_payload():
        raise RouteError.bad_request().with_data({"ratio": float("nan")})

    app.add_api_route("/api/v1/test/nan-payload", nan_payload, methods=["GET"])

    # Server exceptions are re-raised here, so the fault must be handled before the server error middleware
    client = TestClient(app)
    resp = client.get("/api/v1/test/nan-payload")
    assert resp.status_code == 500, resp.text
    assert resp.json() == {"error": "An unexpected error occurred"}


def test_unauthorized_http_exception_keeps_challenge_header():
    app = _app()

    def login_required():
        raise HTTPException(status_code=401, headers={"WWW-Authenticate": "Bearer"})

    app.add_api_route("/api/v1/test/login", login_required, methods=["GET"])

    client = TestClient(app)
    resp = client.get("/api/v1/test/login")
    assert resp.status_code == 401, resp.text
    assert resp.json() == {"error": "Authentication is required"}
    assert resp.headers["www-authenticate"] == "Bearer"

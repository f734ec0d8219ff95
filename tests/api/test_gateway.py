import json
import logging
from io import StringIO

import pytest
from fastapi import HTTPException, Query
from fastapi.testclient import TestClient

from apps.api.app.main import UNCLASSIFIED_MESSAGE, create_app
from apps.api.app.status_mapping import HTTP_STATUS_BY_CODE
from rpcerrors import Code, CodedError, errorf, new
from rpcerrors.config import GatewayConfig
from rpcerrors.logging_utils import JsonFormatter


# ---------------------------------------------------------------------------
# Fake layers behind the gateway
# ---------------------------------------------------------------------------

class FakeStorage:
    """Directory store that refuses to remove non-empty directories."""

    def __init__(self, entries):
        self._entries = entries

    def rmdir(self, name):
        if name not in self._entries:
            raise errorf(Code.NOT_FOUND, "directory %r not found", name)
        if self._entries[name]:
            raise new(Code.FAILED_PRECONDITION, "directory not empty")
        del self._entries[name]


class CachingLayer:
    """Pass-through cache; failures from storage propagate unchanged."""

    def __init__(self, storage):
        self._storage = storage
        self.invalidated = []

    def rmdir(self, name):
        self._storage.rmdir(name)
        self.invalidated.append(name)


class LegacyQuotaError(Exception):
    @property
    def code(self):
        return Code.RESOURCE_EXHAUSTED


CodedError.register(LegacyQuotaError)


@pytest.fixture
def storage():
    return FakeStorage({"full": ["a.txt"], "empty": []})


@pytest.fixture
def app(storage):
    app = create_app(GatewayConfig(service_name="test-gateway"))
    cache = CachingLayer(storage)
    app.state.cache = cache

    @app.delete("/v1/dirs/{name}", status_code=204)
    def delete_dir(name: str):
        cache.rmdir(name)

    @app.get("/v1/raise/{code}")
    def raise_code(code: int):
        raise new(Code(code), f"raised {Code(code).name}")

    @app.get("/v1/foreign")
    def foreign():
        raise RuntimeError("db password is hunter2")

    @app.get("/v1/legacy")
    def legacy():
        raise LegacyQuotaError("quota for project p1 exhausted")

    @app.get("/v1/teapot")
    def teapot():
        raise HTTPException(status_code=418, detail="short and stout")

    @app.get("/v1/limited")
    def limited(limit: int = Query(..., gt=0)):
        return {"limit": limit}

    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def gateway_logs():
    logger = logging.getLogger("apps.api.app.main")
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    try:
        yield lambda: [json.loads(line) for line in stream.getvalue().splitlines()]
    finally:
        logger.removeHandler(handler)


# ---------------------------------------------------------------------------
# End-to-end propagation
# ---------------------------------------------------------------------------

def test_failed_precondition_reaches_caller_unmodified(client, app):
    resp = client.delete("/v1/dirs/full", headers={"X-Request-ID": "req-1"})

    assert resp.status_code == 400
    assert resp.headers["X-Request-ID"] == "req-1"
    assert resp.json() == {
        "error": {
            "code": "FAILED_PRECONDITION",
            "status": 9,
            "message": "directory not empty",
            "request_id": "req-1",
            "details": None,
        }
    }
    assert app.state.cache.invalidated == []


def test_successful_call_passes_through(client, app, storage):
    resp = client.delete("/v1/dirs/empty")

    assert resp.status_code == 204
    assert app.state.cache.invalidated == ["empty"]
    assert "empty" not in storage._entries


def test_formatted_message_reaches_caller(client):
    resp = client.delete("/v1/dirs/missing")

    assert resp.status_code == 404
    body = resp.json()["error"]
    assert body["code"] == "NOT_FOUND"
    assert body["message"] == "directory 'missing' not found"


@pytest.mark.parametrize("code", [c for c in Code if c is not Code.OK])
def test_every_code_maps_to_its_http_status(client, code):
    resp = client.get(f"/v1/raise/{int(code)}")

    assert resp.status_code == HTTP_STATUS_BY_CODE[code]
    assert resp.json()["error"]["code"] == code.name
    assert resp.json()["error"]["status"] == int(code)
    assert resp.json()["error"]["message"] == f"raised {code.name}"


# ---------------------------------------------------------------------------
# Unclassified and framework errors
# ---------------------------------------------------------------------------

def test_foreign_exception_is_unknown_and_text_is_withheld(client, gateway_logs):
    resp = client.get("/v1/foreign", headers={"X-Request-ID": "req-2"})

    assert resp.status_code == 500
    body = resp.json()["error"]
    assert body["code"] == "UNKNOWN"
    assert body["status"] == 2
    assert body["message"] == UNCLASSIFIED_MESSAGE
    assert "hunter2" not in resp.text

    records = [r for r in gateway_logs() if r.get("event") == "error.unclassified"]
    assert len(records) == 1
    assert records[0]["exception_type"] == "RuntimeError"
    assert records[0]["request_id"] == "req-2"
    assert "RuntimeError" in records[0]["exc_info"]


def test_registered_capability_is_classified(client):
    resp = client.get("/v1/legacy")

    assert resp.status_code == 429
    assert resp.json()["error"]["code"] == "RESOURCE_EXHAUSTED"
    assert resp.json()["error"]["message"] == "quota for project p1 exhausted"


def test_failures_without_a_handler_do_not_escape_the_gateway(app):
    # Default client: any exception reaching the server fails the call.
    client = TestClient(app, raise_server_exceptions=True)

    assert client.get("/v1/legacy").status_code == 429
    assert client.get("/v1/foreign").status_code == 500


def test_classified_error_is_logged_without_traceback(client, gateway_logs):
    client.delete("/v1/dirs/full")

    records = [r for r in gateway_logs() if r.get("event") == "error.classified"]
    assert len(records) == 1
    assert records[0]["code"] == "FAILED_PRECONDITION"
    assert records[0]["status_code"] == 400
    assert "exc_info" not in records[0]


def test_unmatched_route_is_not_found(client):
    resp = client.get("/v1/nowhere")

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


def test_unmapped_http_status_keeps_status_and_is_unknown(client):
    resp = client.get("/v1/teapot")

    assert resp.status_code == 418
    assert resp.json()["error"]["code"] == "UNKNOWN"
    assert resp.json()["error"]["message"] == "short and stout"


def test_validation_error_is_invalid_argument(client):
    resp = client.get("/v1/limited", params={"limit": 0})

    assert resp.status_code == 400
    body = resp.json()["error"]
    assert body["code"] == "INVALID_ARGUMENT"
    assert body["status"] == 3
    assert body["details"]["errors"][0]["loc"] == ["query", "limit"]


def test_request_id_is_generated_when_missing(client):
    resp = client.delete("/v1/dirs/full")

    rid = resp.headers["X-Request-ID"]
    assert rid
    assert resp.json()["error"]["request_id"] == rid


def test_custom_request_id_header():
    app = create_app(GatewayConfig(request_id_header="X-Correlation-ID"))

    @app.get("/v1/fail")
    def fail():
        raise new(Code.UNAVAILABLE, "backend warming up")

    client = TestClient(app)
    resp = client.get("/v1/fail", headers={"X-Correlation-ID": "corr-9"})

    assert resp.status_code == 503
    assert resp.headers["X-Correlation-ID"] == "corr-9"
    assert resp.json()["error"]["request_id"] == "corr-9"

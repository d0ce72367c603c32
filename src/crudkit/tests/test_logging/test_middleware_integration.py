import json
import logging
import uuid

from fastapi import FastAPI
from starlette.testclient import TestClient

from crudkit.config.settings import Settings
from crudkit.core.logging.builder import setup_logging
from crudkit.core.logging.middleware import RequestIDMiddleware, resolve_request_id


def build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/hello")
    def hello():
        logging.getLogger("crudkit.test").info("hello.handled")
        return {"ok": True}

    return app


def test_request_id_in_response_and_logs(capsys, test_settings):
    setup_logging(Settings(_env_file=None, LOG_FORMAT="json", LOG_LEVEL="INFO", LOG_TO_STDOUT=True))
    try:
        resp = TestClient(build_app()).get("/hello")
    finally:
        setup_logging(test_settings)

    assert resp.status_code == 200
    rid = resp.headers["X-Request-ID"]

    lines = capsys.readouterr().out.splitlines()
    records = [json.loads(line) for line in lines if line.startswith("{")]
    handled = [r for r in records if r["message"] == "hello.handled"]
    assert handled and handled[0]["request_id"] == rid

    access = [r for r in records if r["message"] == "http.request"]
    assert access and access[0]["status_code"] == 200 and access[0]["path"] == "/hello"


def test_valid_incoming_id_is_echoed():
    rid = str(uuid.uuid4())

    resp = TestClient(build_app()).get("/hello", headers={"X-Request-ID": rid})

    assert resp.headers["X-Request-ID"] == rid


def test_invalid_incoming_id_is_replaced():
    resp = TestClient(build_app()).get("/hello", headers={"X-Request-ID": "not-a-uuid"})

    replaced = resp.headers["X-Request-ID"]
    assert replaced != "not-a-uuid"
    assert uuid.UUID(replaced)


def test_resolve_request_id():
    rid = str(uuid.uuid4())

    assert resolve_request_id(rid) == rid
    assert resolve_request_id(None) != resolve_request_id(None)

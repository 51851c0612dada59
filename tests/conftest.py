from __future__ import annotations

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from app.main import create_app


def make_request(query_string: str = "", path: str = "/") -> Request:
    """Build a bare Starlette request as seen by a controller on testserver."""
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("testserver", 80),
            "root_path": "",
            "path": path,
            "headers": [(b"host", b"testserver")],
            "query_string": query_string.encode("ascii"),
        }
    )


@pytest.fixture
def app() -> FastAPI:
    """Fresh application instance."""
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client."""
    return TestClient(app)

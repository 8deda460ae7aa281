# tests/services/conftest.py
from __future__ import annotations
import pytest
from starlette.testclient import TestClient


@pytest.fixture()
def api_client():
    """
    A TestClient whose `get_inspector_dep` dependency can be pointed at any
    Inspector (or stand-in) by the test via `api_client.app.dependency_overrides`.
    """
    from vidinspect.services.api.app import create_app

    app = create_app()
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()

# tests/api/conftest.py
"""
Shared fixtures for API tests.
Uses FastAPI's TestClient with a collector backed by a fake engine.
"""

import pytest
from fastapi.testclient import TestClient

from podman_exporter.api.app import create_app


@pytest.fixture
def client(collector, registry):
    """Creates a TestClient serving the scenario collector with the default error policy."""
    app = create_app(collector, registry)
    with TestClient(app) as c:
        yield c

# tests/conftest.py

from typing import List, Optional

import pytest

from podman_exporter.core.collector import Collector
from podman_exporter.core.exceptions import EngineError
from podman_exporter.core.registry import MetricsRegistry
from podman_exporter.engine.base import BaseEngineClient
from podman_exporter.models.containers import ContainerState, InventoryEntry, StatSample, StatsReport


class FakeEngineClient(BaseEngineClient):
    """In-memory engine returning canned responses, counting calls."""

    def __init__(
        self,
        inventory: Optional[List[InventoryEntry]] = None,
        report: Optional[StatsReport] = None,
        inventory_error: Optional[Exception] = None,
        stats_error: Optional[Exception] = None,
    ):
        self.inventory = inventory or []
        self.report = report if report is not None else StatsReport(stats=[])
        self.inventory_error = inventory_error
        self.stats_error = stats_error
        self.inventory_calls = 0
        self.stats_calls = 0
        self.closed = False

    async def list_inventory(self) -> List[InventoryEntry]:
        self.inventory_calls += 1
        if self.inventory_error:
            raise self.inventory_error
        return list(self.inventory)

    async def fetch_stats(self) -> StatsReport:
        self.stats_calls += 1
        if self.stats_error:
            raise self.stats_error
        return self.report

    def describe(self) -> str:
        return "fake engine"

    async def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch):
    """
    Autouse fixture pinning the environment so a developer's .env or shell
    does not change metric names or the error policy under test.
    """
    monkeypatch.setenv("METRICS_NAMESPACE", "")
    monkeypatch.setenv("SCRAPE_ERROR_POLICY", "stale")
    monkeypatch.setenv("PODMAN_URI", "unix:///run/podman/podman.sock")


@pytest.fixture
def web_entry():
    return InventoryEntry(id="a1", name="web", pod="group1", state=ContainerState.RUNNING)


@pytest.fixture
def worker_entry():
    return InventoryEntry(id="a2", name="worker", pod=None, state=ContainerState.CREATED)


@pytest.fixture
def scenario_client(web_entry, worker_entry):
    """Two containers, one stat sample for the first only."""
    report = StatsReport(stats=[StatSample(container_id="a1", cpu=12.5, mem_usage=1048576)])
    return FakeEngineClient(inventory=[web_entry, worker_entry], report=report)


@pytest.fixture
def registry():
    """A fresh registry per test, independent of prometheus_client's global REGISTRY."""
    return MetricsRegistry()


@pytest.fixture
def collector(scenario_client, registry):
    return Collector(scenario_client, registry)


@pytest.fixture
def engine_error():
    return EngineError("Containers request: connection refused")


@pytest.fixture
def make_client():
    """Factory for FakeEngineClient instances with custom responses."""
    return FakeEngineClient

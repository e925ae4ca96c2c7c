# src/podman_exporter/core/registry.py
"""
Prometheus gauges exported by podman-exporter.

Every gauge lives in a CollectorRegistry owned by a MetricsRegistry instance,
created once at startup and passed to both the Collector and the HTTP app.
Label cells are overwritten on every scrape and never removed: a container
that disappears keeps its last series until ``reset()`` or a restart.
"""

from typing import Dict, Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Gauge, generate_latest

CONTAINER_LABELS = ["pod", "container"]


class MetricsRegistry:
    """Registry of all container gauges and the exporter's own scrape gauges."""

    def __init__(self, namespace: str = "", registry: Optional[CollectorRegistry] = None):
        self._registry = registry if registry is not None else CollectorRegistry()
        self.namespace = namespace

        self.container_total = self._gauge("container_total", "Total count of containers", [])
        self.container_count = self._gauge("container_count", "Count of containers", ["pod"])
        self.container_state = self._gauge(
            "container_state",
            "Container current state (-1=unknown,0=exited/stopped,1=running,2=created)",
        )

        self.container_uptime = self._gauge("container_uptime", "Container uptime")
        self.container_system_nano = self._gauge("container_system_nano", "Container system nano")
        self.container_pids = self._gauge("container_pids", "Count of running pids in container")
        self.container_avg_cpu = self._gauge("container_avg_cpu", "Container Avg CPU usage")
        self.container_cpu = self._gauge("container_cpu", "Container CPU usage")
        self.container_cpu_nano = self._gauge("container_cpu_nano", "Container CPU usage (nano)")
        self.container_cpu_system_nano = self._gauge(
            "container_cpu_system_nano", "Container CPU usage (system nano)"
        )
        self.container_mem_usage = self._gauge("container_mem_usage", "Container memory usage (bytes)")
        self.container_mem_limit = self._gauge("container_mem_limit", "Container memory limit")
        self.container_mem_perc = self._gauge("container_mem_perc", "Container memory usage (percentage)")
        self.container_network_input = self._gauge("container_network_input", "Container network input")
        self.container_network_output = self._gauge("container_network_output", "Container network output")
        self.container_block_input = self._gauge("container_block_input", "Container block input")
        self.container_block_output = self._gauge("container_block_output", "Container block output")

        # StatSample field -> gauge, in the order the fields are written.
        self.stat_gauges: Dict[str, Gauge] = {
            "uptime": self.container_uptime,
            "system_nanos": self.container_system_nano,
            "pid_count": self.container_pids,
            "avg_cpu": self.container_avg_cpu,
            "cpu": self.container_cpu,
            "cpu_nanos": self.container_cpu_nano,
            "cpu_system_nanos": self.container_cpu_system_nano,
            "mem_usage": self.container_mem_usage,
            "mem_limit": self.container_mem_limit,
            "mem_percent": self.container_mem_perc,
            "net_in": self.container_network_input,
            "net_out": self.container_network_output,
            "block_in": self.container_block_input,
            "block_out": self.container_block_output,
        }

        # Exporter health, written by the scrape handler only
        self.last_scrape_error = self._gauge(
            "exporter_last_scrape_error",
            "Whether the last collection from the container engine failed (1) or succeeded (0)",
            [],
        )
        self.scrape_duration_seconds = self._gauge(
            "exporter_scrape_duration_seconds",
            "Time taken by the last collection from the container engine",
            [],
        )

    def _gauge(self, name: str, documentation: str, labels=None) -> Gauge:
        return Gauge(
            name,
            documentation,
            CONTAINER_LABELS if labels is None else labels,
            namespace=self.namespace,
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def exposition(self) -> bytes:
        """Serialize every gauge in the text exposition format."""
        return generate_latest(self._registry)

    def get_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Return the current value of one series, or None if it was never written."""
        full_name = f"{self.namespace}_{name}" if self.namespace else name
        return self._registry.get_sample_value(full_name, labels or {})

    def reset(self):
        """
        Drop every labelled series. Nothing calls this during normal operation;
        stale series are expected to persist between scrapes.
        """
        self.container_count.clear()
        self.container_state.clear()
        for gauge in self.stat_gauges.values():
            gauge.clear()

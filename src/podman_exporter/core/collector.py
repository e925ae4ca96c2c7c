# src/podman_exporter/core/collector.py
import logging
from collections import Counter
from typing import Dict, Iterable

from ..engine.base import BaseEngineClient
from ..models.containers import STAT_FIELDS, InventoryEntry, ReconciledView, StatsReport
from .exceptions import CollectorError, EngineError
from .registry import MetricsRegistry

logger = logging.getLogger(__name__)


def build_inventory(entries: Iterable[InventoryEntry]) -> Dict[str, InventoryEntry]:
    """Key inventory entries by container id. A repeated id keeps the last entry."""
    inventory: Dict[str, InventoryEntry] = {}
    for entry in entries:
        if not entry.id or not entry.name:
            continue
        inventory[entry.id] = entry
    return inventory


def count_pods(inventory: Dict[str, InventoryEntry]) -> Dict[str, int]:
    """Number of containers per pod. Containers without a pod are not counted."""
    return dict(Counter(entry.pod for entry in inventory.values() if entry.pod))


def reconcile(inventory: Dict[str, InventoryEntry], report: StatsReport) -> ReconciledView:
    """
    Join a stats report onto the inventory.

    Samples whose container id is absent from the inventory (or missing) are
    orphans: they are counted and dropped. Inventory entries without a sample
    are kept in the view but get no per-container series.
    """
    view = ReconciledView(
        inventory=inventory,
        pod_counts=count_pods(inventory),
        stats_available=report.stats is not None,
    )
    for sample in report.stats or []:
        entry = inventory.get(sample.container_id) if sample.container_id else None
        if entry is None:
            view.orphans += 1
            continue
        view.samples[entry.id] = (entry, sample)
    return view


class Collector:
    """
    Runs one inventory + stats round-trip against the engine and writes the
    result into the metrics registry. Holds no state between calls.
    """

    def __init__(self, client: BaseEngineClient, registry: MetricsRegistry):
        self.client = client
        self.registry = registry

    async def update(self) -> ReconciledView:
        """
        Refresh every gauge from a fresh engine snapshot.

        Raises:
            CollectorError: If either engine call fails. Gauges already written by
                earlier scrapes keep their values; nothing is rolled back.
        """
        try:
            inventory = build_inventory(await self.client.list_inventory())
        except EngineError as e:
            raise CollectorError(f"Failed to list containers: {e}") from e

        # Inventory size is reported even when the stats call below fails.
        self.registry.container_total.set(len(inventory))

        try:
            report = await self.client.fetch_stats()
        except EngineError as e:
            raise CollectorError(f"Failed to fetch container stats: {e}") from e

        if report.error is not None:
            logger.warning("Podman API returned an error with the stats response: %s", report.error)

        if report.stats is None:
            logger.warning("Stats response carried no samples; only container_total is updated.")
            return ReconciledView(inventory=inventory, stats_available=False)

        view = reconcile(inventory, report)
        self._write(view)

        if view.orphans:
            logger.debug("Dropped %d stat sample(s) without a matching container.", view.orphans)
        logger.debug(
            "Updated metrics for %d container(s), %d pod(s), %d sample(s).",
            len(view.inventory),
            len(view.pod_counts),
            len(view.samples),
        )
        return view

    def _write(self, view: ReconciledView):
        registry = self.registry
        for pod, count in view.pod_counts.items():
            registry.container_count.labels(pod=pod).set(count)

        for entry, sample in view.samples.values():
            labels = {"pod": entry.pod or "", "container": entry.name}
            registry.container_state.labels(**labels).set(int(entry.state))
            for field in STAT_FIELDS:
                registry.stat_gauges[field].labels(**labels).set(getattr(sample, field))

# src/podman_exporter/cli/utils.py
import logging
from typing import Optional, Tuple

from ..core.collector import Collector
from ..core.config import config
from ..core.registry import MetricsRegistry
from ..engine.podman import PodmanClient

logger = logging.getLogger(__name__)


def build_collector(podman_uri: Optional[str] = None) -> Tuple[Collector, MetricsRegistry]:
    """
    Construct the registry, the engine client and the collector that share them.
    Called once per process.
    """
    registry = MetricsRegistry(namespace=config.METRICS_NAMESPACE)
    client = PodmanClient(uri=podman_uri or config.PODMAN_URI)
    return Collector(client, registry), registry


def set_log_level(level: Optional[str]):
    """Apply a --log-level override to the root logger."""
    if level:
        logging.getLogger().setLevel(level.upper())

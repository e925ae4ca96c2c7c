# src/podman_exporter/engine/base.py
"""
This module defines the abstract base class for container engine clients.
The Collector only depends on this interface, which keeps the reconciliation
logic independent of the transport and lets tests substitute a fake engine.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models.containers import InventoryEntry, StatsReport


class BaseEngineClient(ABC):
    """
    Abstract Base Class for container engine clients.
    """

    @abstractmethod
    async def list_inventory(self) -> List[InventoryEntry]:
        """
        Return every known container, stopped ones included.

        Raises:
            EngineError: On transport, authentication or protocol failure.
        """
        pass

    @abstractmethod
    async def fetch_stats(self) -> StatsReport:
        """
        Return one live statistics snapshot. An application-level error
        embedded in the response is carried on the report, not raised.

        Raises:
            EngineError: On transport, authentication or protocol failure.
        """
        pass

    @abstractmethod
    def describe(self) -> str:
        """Human-readable description of the engine endpoint."""
        pass

    async def close(self):
        """
        Clean up resources (e.g., close HTTP sessions).
        """
        pass

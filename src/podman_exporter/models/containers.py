# src/podman_exporter/models/containers.py
"""
Pydantic models for the two Podman API responses the exporter consumes:
the container inventory (``/libpod/containers/json``) and the live statistics
snapshot (``/libpod/containers/stats``). Field aliases follow the libpod JSON
names; the Python attribute names are what the rest of the exporter uses.
"""

from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContainerState(IntEnum):
    """Numeric code exported by the container_state gauge."""

    UNKNOWN = -1
    STOPPED = 0
    RUNNING = 1
    CREATED = 2

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "ContainerState":
        """Map the engine's state string to a code; anything unrecognised is UNKNOWN."""
        return _RAW_STATES.get(raw, cls.UNKNOWN)


_RAW_STATES = {
    "running": ContainerState.RUNNING,
    "created": ContainerState.CREATED,
    "stopped": ContainerState.STOPPED,
    "exited": ContainerState.STOPPED,
}


class InventoryEntry(BaseModel):
    """
    A container that can be addressed by the (pod, container) label pair.

    Attributes:
        id: Full container id, unique within one scrape.
        name: Display name (first entry of the engine's name list).
        pod: Pod name, None when the container is not part of a pod.
        state: Coarse state code.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., min_length=1, description="Container id")
    name: str = Field(..., min_length=1, description="Container display name")
    pod: Optional[str] = Field(None, description="Pod name")
    state: ContainerState = Field(ContainerState.UNKNOWN, description="Container state code")


class ContainerRecord(BaseModel):
    """One raw record of the container list response."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = Field(None, alias="Id")
    names: Optional[List[str]] = Field(None, alias="Names")
    pod_name: Optional[str] = Field(None, alias="PodName")
    state: Optional[str] = Field(None, alias="State")

    def to_entry(self) -> Optional[InventoryEntry]:
        """Build an InventoryEntry, or None when the id or the name is missing."""
        if not self.id:
            return None
        name = self.names[0] if self.names else None
        if not name:
            return None
        return InventoryEntry(
            id=self.id,
            name=name,
            pod=self.pod_name or None,
            state=ContainerState.from_raw(self.state),
        )


# StatSample fields exported as gauges, in export order.
STAT_FIELDS = (
    "uptime",
    "system_nanos",
    "pid_count",
    "avg_cpu",
    "cpu",
    "cpu_nanos",
    "cpu_system_nanos",
    "mem_usage",
    "mem_limit",
    "mem_percent",
    "net_in",
    "net_out",
    "block_in",
    "block_out",
)


class StatSample(BaseModel):
    """
    A live resource-usage sample for one container.

    Every numeric field is optional in the engine payload; missing or null
    values are normalised to zero so that each exported series always exists.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    container_id: Optional[str] = Field(None, alias="ContainerID")
    uptime: int = Field(0, alias="UpTime", description="Uptime in nanoseconds")
    system_nanos: int = Field(0, alias="SystemNano")
    pid_count: int = Field(0, alias="PIDs")
    avg_cpu: float = Field(0.0, alias="AvgCPU")
    cpu: float = Field(0.0, alias="CPU")
    cpu_nanos: int = Field(0, alias="CPUNano")
    cpu_system_nanos: int = Field(0, alias="CPUSystemNano")
    mem_usage: int = Field(0, alias="MemUsage", description="Memory usage in bytes")
    mem_limit: int = Field(0, alias="MemLimit", description="Memory limit in bytes")
    mem_percent: float = Field(0.0, alias="MemPerc")
    net_in: int = Field(0, alias="NetInput")
    net_out: int = Field(0, alias="NetOutput")
    block_in: int = Field(0, alias="BlockInput")
    block_out: int = Field(0, alias="BlockOutput")

    @field_validator(*STAT_FIELDS, mode="before")
    @classmethod
    def _none_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class StatsReport(BaseModel):
    """
    The stats response. ``error`` is an application-level error embedded in an
    otherwise successful response; ``stats`` is None when the engine sent no
    sample list at all.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    error: Optional[Any] = Field(None, alias="Error")
    stats: Optional[List[StatSample]] = Field(None, alias="Stats")


class ReconciledView(BaseModel):
    """
    The inventory joined with the stats snapshot of one scrape.

    Attributes:
        inventory: Valid inventory entries keyed by container id.
        pod_counts: Number of inventory entries per non-empty pod name.
        samples: Container id -> (entry, sample) for every sample that joined an entry.
        orphans: Number of samples dropped because their container id was not in the inventory.
        stats_available: False when the stats response carried no sample list at all.
    """

    inventory: Dict[str, InventoryEntry] = Field(default_factory=dict)
    pod_counts: Dict[str, int] = Field(default_factory=dict)
    samples: Dict[str, Tuple[InventoryEntry, StatSample]] = Field(default_factory=dict)
    orphans: int = 0
    stats_available: bool = True

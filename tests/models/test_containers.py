# tests/models/test_containers.py
"""Tests for parsing Podman API payloads into exporter models."""

import pytest
from pydantic import ValidationError

from podman_exporter.models.containers import ContainerRecord, ContainerState, InventoryEntry, StatSample, StatsReport


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("running", 1),
        ("stopped", 0),
        ("exited", 0),
        ("created", 2),
        ("unknown", -1),
        ("", -1),
        (None, -1),
        ("paused", -1),
    ],
)
def test_state_mapping(raw, expected):
    assert ContainerState.from_raw(raw) == expected


class TestContainerRecord:
    """Tests for ContainerRecord.to_entry."""

    def test_full_record(self):
        record = ContainerRecord.model_validate(
            {"Id": "abc", "Names": ["web", "alias"], "PodName": "group1", "State": "running", "Image": "nginx"}
        )
        entry = record.to_entry()

        assert entry == InventoryEntry(id="abc", name="web", pod="group1", state=ContainerState.RUNNING)

    def test_empty_pod_name_is_absent(self):
        entry = ContainerRecord.model_validate({"Id": "abc", "Names": ["web"], "PodName": ""}).to_entry()

        assert entry.pod is None
        assert entry.state == ContainerState.UNKNOWN

    @pytest.mark.parametrize(
        "payload",
        [
            {"Names": ["web"]},
            {"Id": "", "Names": ["web"]},
            {"Id": "abc"},
            {"Id": "abc", "Names": []},
            {"Id": "abc", "Names": [""]},
        ],
    )
    def test_unaddressable_records_are_dropped(self, payload):
        assert ContainerRecord.model_validate(payload).to_entry() is None


class TestStatSample:
    """Tests for StatSample normalisation."""

    def test_libpod_field_names(self):
        sample = StatSample.model_validate(
            {
                "ContainerID": "abc",
                "Name": "web",
                "UpTime": 1000,
                "SystemNano": 2000,
                "PIDs": 3,
                "AvgCPU": 1.5,
                "CPU": 2.5,
                "CPUNano": 4000,
                "CPUSystemNano": 5000,
                "MemUsage": 1048576,
                "MemLimit": 2097152,
                "MemPerc": 50.0,
                "NetInput": 10,
                "NetOutput": 20,
                "BlockInput": 30,
                "BlockOutput": 40,
                "PerCPU": [1, 2],
            }
        )

        assert sample.container_id == "abc"
        assert sample.uptime == 1000
        assert sample.pid_count == 3
        assert sample.cpu == 2.5
        assert sample.mem_percent == 50.0
        assert sample.block_out == 40

    def test_missing_and_null_fields_are_zero(self):
        sample = StatSample.model_validate({"ContainerID": "abc", "CPU": None})

        assert sample.cpu == 0.0
        assert sample.mem_usage == 0
        assert sample.net_in == 0

    def test_non_numeric_field_is_rejected(self):
        with pytest.raises(ValidationError):
            StatSample.model_validate({"ContainerID": "abc", "MemUsage": "lots"})


class TestStatsReport:
    """Tests for the stats response envelope."""

    def test_error_and_stats(self):
        report = StatsReport.model_validate({"Error": "boom", "Stats": [{"ContainerID": "abc"}]})

        assert report.error == "boom"
        assert len(report.stats) == 1

    def test_missing_stats_is_none(self):
        report = StatsReport.model_validate({"Error": None})

        assert report.error is None
        assert report.stats is None

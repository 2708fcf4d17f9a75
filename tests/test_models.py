"""Tests for cgroupinfo data models."""

import dataclasses

import pytest

from cgroupinfo.config import CgroupConfig
from cgroupinfo.models import (
    CANNOT_CALCULATE,
    NO_MEMORY_LIMIT,
    CgroupVersion,
    CpuLimit,
    CpuSection,
    CpuUsage,
    FailedReport,
    MemorySection,
    UnknownReport,
    V1Report,
    V2Report,
    bytes_to_mib,
)


def test_version_str():
    """Test CgroupVersion renders the way reports print it."""
    assert str(CgroupVersion.V1) == "cgroup v1"
    assert str(CgroupVersion.V2) == "cgroup v2"
    assert str(CgroupVersion.UNKNOWN) == "unknown cgroup version"


def test_bytes_to_mib():
    """Test byte counts convert to MiB."""
    assert bytes_to_mib(1024 * 1024) == 1.0
    assert bytes_to_mib(512 * 1024) == 0.5


def test_cpu_limit_is_frozen():
    """Test that CpuLimit is immutable (frozen)."""
    limit = CpuLimit(quota_us=50000, period_us=100000)

    with pytest.raises(dataclasses.FrozenInstanceError):
        limit.quota_us = 1  # type: ignore[misc]


def test_cpu_limit_uses_slots():
    """Test CpuLimit uses __slots__."""
    assert not hasattr(CpuLimit(quota_us=None, period_us=100000), "__dict__")


def test_cpu_usage_without_measurement():
    """Test a failed sample cannot compute utilization."""
    usage = CpuUsage(initial=None, unit="microseconds", interval=2.0, error="boom")

    assert usage.utilization_percent is None
    assert usage.utilization == CANNOT_CALCULATE


def test_memory_section_without_limit():
    """Test memory without a limit has no utilization."""
    memory = MemorySection(limit_bytes=None, usage_bytes=1024)

    assert memory.limit == NO_MEMORY_LIMIT
    assert memory.utilization_percent is None


def test_report_versions():
    """Test each report variant carries its version tag."""
    cpu = CpuSection(error="x")
    memory = MemorySection(error="y")

    assert V1Report(paths={}, membership=(), cpu=cpu, memory=memory).version is CgroupVersion.V1
    assert V2Report(paths={}, membership=(), cpu=cpu, memory=memory).version is CgroupVersion.V2
    assert UnknownReport().version is CgroupVersion.UNKNOWN
    assert FailedReport(detected=CgroupVersion.V2, error="e").version is CgroupVersion.V2


def test_config_rejects_non_positive_interval():
    """Test the sampling interval must be positive."""
    with pytest.raises(ValueError):
        CgroupConfig(sample_interval=0)


def test_config_markers(tmp_path):
    """Test marker paths derive from the mount root."""
    config = CgroupConfig(mount_root=tmp_path)

    assert config.v2_marker == tmp_path / "cgroup.controllers"
    assert config.v1_markers() == [tmp_path / "cpu", tmp_path / "cpu,cpuacct"]

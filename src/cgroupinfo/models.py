"""Data models for cgroupinfo."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

UNLIMITED_QUOTA = "unlimited (no quota)"
NA_UNLIMITED = "N/A (unlimited)"
NA_ZERO_PERIOD = "N/A (period is zero)"
NA_NO_LIMIT = "N/A (no limit)"
NO_MEMORY_LIMIT = "no explicit limit"
CANNOT_CALCULATE = "cannot calculate (CPU limit not found or is unlimited)"


class CgroupVersion(Enum):
    """Cgroup hierarchy governing the current process."""

    UNKNOWN = "unknown"
    V1 = "v1"
    V2 = "v2"

    def __str__(self) -> str:
        if self is CgroupVersion.UNKNOWN:
            return "unknown cgroup version"
        return f"cgroup {self.value}"


def bytes_to_mib(size: int) -> float:
    return size / 1024 / 1024


def format_percent(value: float) -> str:
    return f"{value:.2f}%"


def utilization_of_limit(usage_cores: float, limit_cores: float | None) -> float | None:
    """Usage as a percentage of the limit, or None without a finite limit."""
    if limit_cores is None or limit_cores <= 0:
        return None
    return usage_cores / limit_cores * 100


@dataclass(slots=True, frozen=True)
class CpuLimit:
    """CPU bandwidth limit as quota per period."""

    quota_us: int | None  # None when no quota is set
    period_us: int | None  # None only when an unlimited quota left it unread
    period_error: str | None = None

    @property
    def unlimited(self) -> bool:
        return self.quota_us is None

    @property
    def limit_cores(self) -> float | None:
        """Equivalent number of cores, or None when unbounded or undefined."""
        if self.quota_us is None or self.period_us is None or self.period_us <= 0:
            return None
        return self.quota_us / self.period_us

    @property
    def cpu_max(self) -> str:
        if self.quota_us is None:
            return UNLIMITED_QUOTA
        return f"{self.quota_us} microseconds"

    @property
    def cpu_period(self) -> str:
        if self.period_us is None:
            return self.period_error or "N/A"
        return f"{self.period_us} microseconds"

    @property
    def burstable_percent(self) -> str:
        if self.quota_us is None:
            return NA_UNLIMITED
        if self.period_us is None or self.period_us <= 0:
            return NA_ZERO_PERIOD
        return format_percent(self.quota_us / self.period_us * 100)


@dataclass(slots=True, frozen=True)
class CpuUsage:
    """Instantaneous CPU usage derived from two cumulative samples."""

    initial: int | None  # sample A, in ``unit``
    unit: str  # "nanoseconds" or "microseconds"
    interval: float  # seconds
    usage_cores: float | None = None
    limit_cores: float | None = None
    error: str | None = None

    @property
    def utilization_percent(self) -> float | None:
        if self.usage_cores is None:
            return None
        return utilization_of_limit(self.usage_cores, self.limit_cores)

    @property
    def utilization(self) -> str:
        percent = self.utilization_percent
        if percent is None:
            return CANNOT_CALCULATE
        return format_percent(percent)


@dataclass(slots=True, frozen=True)
class CpuSection:
    """
    CPU metric group.

    Either ``error`` is set (a required file failed) or ``limit`` is populated.
    ``priority`` and ``stat`` hold the file content or an inline error string.
    """

    limit: CpuLimit | None = None
    error: str | None = None
    priority: str | None = None  # cpu.shares (v1) or cpu.weight (v2)
    stat: str | None = None
    usage: CpuUsage | None = None


@dataclass(slots=True, frozen=True)
class MemorySection:
    """
    Memory metric group.

    ``limit_bytes`` is None when the cgroup has no explicit limit.
    """

    limit_bytes: int | None = None
    usage_bytes: int | None = None
    usage_error: str | None = None
    stat: str | None = None
    error: str | None = None

    @property
    def limit(self) -> str:
        if self.limit_bytes is None:
            return NO_MEMORY_LIMIT
        return f"{self.limit_bytes} bytes ({bytes_to_mib(self.limit_bytes):.2f} MiB)"

    @property
    def usage(self) -> str:
        if self.usage_error is not None:
            return self.usage_error
        if self.usage_bytes is None:
            return "N/A"
        return f"{self.usage_bytes} bytes ({bytes_to_mib(self.usage_bytes):.2f} MiB)"

    @property
    def utilization_percent(self) -> float | None:
        if self.limit_bytes is None or self.limit_bytes <= 0 or self.usage_bytes is None:
            return None
        return self.usage_bytes / self.limit_bytes * 100

    @property
    def utilization(self) -> str:
        percent = self.utilization_percent
        if percent is None:
            return NA_NO_LIMIT
        return format_percent(percent)


@dataclass(slots=True, frozen=True)
class HostInfo:
    """Resources of the host the cgroup carves its limits out of."""

    cpu_count: int
    memory_total: int


@dataclass(slots=True, frozen=True)
class V1Report:
    """Report for a process governed by cgroup v1."""

    version: ClassVar[CgroupVersion] = CgroupVersion.V1

    paths: dict[str, str]
    membership: tuple[str, ...]
    cpu: CpuSection
    memory: MemorySection
    host: HostInfo | None = None


@dataclass(slots=True, frozen=True)
class V2Report:
    """Report for a process governed by the unified cgroup v2 hierarchy."""

    version: ClassVar[CgroupVersion] = CgroupVersion.V2

    paths: dict[str, str]
    membership: tuple[str, ...]
    cpu: CpuSection
    memory: MemorySection
    host: HostInfo | None = None


@dataclass(slots=True, frozen=True)
class UnknownReport:
    """Neither v1 nor v2 markers were found."""

    version: ClassVar[CgroupVersion] = CgroupVersion.UNKNOWN

    error: str = "Cannot determine cgroup version."


@dataclass(slots=True, frozen=True)
class FailedReport:
    """The process cgroup membership could not be read at all."""

    detected: CgroupVersion
    error: str
    hints: tuple[str, ...] = field(default=())

    @property
    def version(self) -> CgroupVersion:
        return self.detected


Report = V1Report | V2Report | UnknownReport | FailedReport

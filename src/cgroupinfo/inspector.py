"""Builds a cgroup report for the current process."""

from collections.abc import Callable
from pathlib import Path

import psutil
from loguru import logger

from cgroupinfo.config import CgroupConfig
from cgroupinfo.detect import detect_version
from cgroupinfo.errors import CgroupError, CgroupReadError
from cgroupinfo.fs import FileReader
from cgroupinfo.models import (
    CgroupVersion,
    CpuSection,
    FailedReport,
    HostInfo,
    MemorySection,
    Report,
    UnknownReport,
    V1Report,
    V2Report,
)
from cgroupinfo.parsers import (
    parse_v1_memory,
    parse_v2_memory,
    read_optional,
    read_v1_cpu_limit,
    read_v1_cpu_usage,
    read_v2_cpu_limit,
    read_v2_cpu_usage,
)
from cgroupinfo.paths import CPU, MEMORY, UNIFIED, controller_dir, resolve_controller_paths, v1_cpu_root
from cgroupinfo.sampler import MICROSECONDS, NANOSECONDS, UsageSampler


def collect_host_info() -> HostInfo:
    """Host CPU count and total memory as seen through psutil."""
    return HostInfo(
        cpu_count=psutil.cpu_count() or 0,
        memory_total=psutil.virtual_memory().total,
    )


class CgroupInspector:
    """
    Detects the cgroup version and gathers CPU and memory limits and usage.

    Every call to :meth:`inspect` starts from scratch; nothing is cached.
    """

    def __init__(
        self,
        config: CgroupConfig | None = None,
        reader: FileReader | None = None,
        sleep: Callable[[float], None] | None = None,
        host_info: Callable[[], HostInfo | None] = collect_host_info,
    ) -> None:
        """
        Initialize the CgroupInspector.

        Args:
            config: Mount locations and sampling interval.
            reader: File access, substituted in tests.
            sleep: Blocking wait used between CPU usage samples.
            host_info: Provider for host CPU and memory totals.
        """
        self._config = config or CgroupConfig()
        self._reader = reader or FileReader()
        self._sleep = sleep
        self._host_info = host_info

    @property
    def config(self) -> CgroupConfig:
        return self._config

    def inspect(self) -> Report:
        """Produce a fresh report. Never raises for cgroup-level failures."""
        version = detect_version(self._config, self._reader)
        if version is CgroupVersion.UNKNOWN:
            return UnknownReport()

        try:
            membership = tuple(self._reader.read_lines(self._config.proc_cgroup))
        except CgroupError as e:
            cause = e.cause if isinstance(e, CgroupReadError) else e
            logger.error(f"Error opening {self._config.proc_cgroup}: {cause}")
            return FailedReport(
                detected=version,
                error=f"Error opening {self._config.proc_cgroup}: {cause}",
                hints=("This program needs to run in a Linux environment with cgroups enabled.",),
            )

        paths = resolve_controller_paths(membership, version)
        host = self._collect_host()

        if version is CgroupVersion.V1:
            return V1Report(
                paths=paths,
                membership=membership,
                cpu=self._v1_cpu(paths),
                memory=self._v1_memory(paths),
                host=host,
            )
        return V2Report(
            paths=paths,
            membership=membership,
            cpu=self._v2_cpu(paths, membership),
            memory=self._v2_memory(paths, membership),
            host=host,
        )

    def _collect_host(self) -> HostInfo | None:
        try:
            return self._host_info()
        except (psutil.Error, OSError) as e:
            logger.debug(f"Host information unavailable: {e}")
            return None

    def _sampler(self, read_counter: Callable[[], int], unit: str) -> UsageSampler:
        kwargs = {} if self._sleep is None else {"sleep": self._sleep}
        return UsageSampler(read_counter, unit, self._config.sample_interval, **kwargs)

    # --- cgroup v1 ---------------------------------------------------------

    def _v1_cpu(self, paths: dict[str, str]) -> CpuSection:
        if CPU not in paths:
            return CpuSection(error="CPU cgroup path not found for v1.")

        cpu_dir = controller_dir(v1_cpu_root(self._config, self._reader), paths[CPU], self._reader)
        priority = read_optional(self._reader, cpu_dir / "cpu.shares")

        try:
            limit = read_v1_cpu_limit(cpu_dir, self._reader)
        except CgroupError as e:
            logger.warning(f"CPU limit unavailable: {e}")
            limit = None
            error = str(e)
        else:
            error = None

        usage = self._sampler(lambda: read_v1_cpu_usage(cpu_dir, self._reader), NANOSECONDS).sample(
            limit.limit_cores if limit else None
        )
        return CpuSection(
            limit=limit,
            error=error,
            priority=priority,
            stat=read_optional(self._reader, cpu_dir / "cpu.stat"),
            usage=usage,
        )

    def _v1_memory(self, paths: dict[str, str]) -> MemorySection:
        if MEMORY not in paths:
            return MemorySection(error="Memory cgroup path not found for v1.")

        root = self._config.mount_root / self._config.v1_memory_dir
        memory_dir = controller_dir(root, paths[MEMORY], self._reader)
        try:
            return parse_v1_memory(memory_dir, self._reader)
        except CgroupError as e:
            logger.warning(f"Memory limit unavailable: {e}")
            return MemorySection(error=str(e))

    # --- cgroup v2 ---------------------------------------------------------

    def _unified_dir(self, paths: dict[str, str], membership: tuple[str, ...]) -> Path | None:
        if UNIFIED in paths:
            return controller_dir(self._config.mount_root, paths[UNIFIED], self._reader)
        # A namespaced container lists only "0::/", its own cgroup is the mount root.
        if any(line.strip() == "0::/" for line in membership):
            return self._config.mount_root
        return None

    def _v2_cpu(self, paths: dict[str, str], membership: tuple[str, ...]) -> CpuSection:
        unified_dir = self._unified_dir(paths, membership)
        if unified_dir is None:
            return CpuSection(error="Unified cgroup path not found for v2.")

        priority = read_optional(self._reader, unified_dir / "cpu.weight")

        try:
            limit = read_v2_cpu_limit(unified_dir, self._reader)
        except CgroupError as e:
            logger.warning(f"CPU limit unavailable: {e}")
            limit = None
            error = str(e)
        else:
            error = None

        usage = self._sampler(lambda: read_v2_cpu_usage(unified_dir, self._reader), MICROSECONDS).sample(
            limit.limit_cores if limit else None
        )
        return CpuSection(
            limit=limit,
            error=error,
            priority=priority,
            stat=read_optional(self._reader, unified_dir / "cpu.stat"),
            usage=usage,
        )

    def _v2_memory(self, paths: dict[str, str], membership: tuple[str, ...]) -> MemorySection:
        unified_dir = self._unified_dir(paths, membership)
        if unified_dir is None:
            return MemorySection(error="Unified cgroup path not found for v2.")
        try:
            return parse_v2_memory(unified_dir, self._reader)
        except CgroupError as e:
            logger.warning(f"Memory limit unavailable: {e}")
            return MemorySection(error=str(e))

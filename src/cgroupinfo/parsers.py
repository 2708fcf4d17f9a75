"""
Version-specific parsing of cgroup control files.

Required files raise :class:`CgroupReadError` or :class:`CgroupFormatError`;
auxiliary files degrade to an inline error string via :func:`read_optional`.
"""

from pathlib import Path

from loguru import logger

from cgroupinfo.errors import CgroupError, CgroupFormatError
from cgroupinfo.fs import FileReader
from cgroupinfo.models import CpuLimit, MemorySection

UNLIMITED_TOKEN = "max"
V1_NO_QUOTA = -1

# The kernel reports "no limit" as the largest page-aligned signed 64-bit
# value, which depends on the page size (9223372036854771712 with 4 KiB
# pages). Anything this close to the top of the range is not a real limit.
MEMORY_UNBOUNDED_THRESHOLD = 2**63 - 2**20


def _parse_int(text: str, path: Path) -> int:
    try:
        return int(text, 10)
    except ValueError:
        raise CgroupFormatError(path, text, "not a base-10 integer") from None


def _parse_uint(text: str, path: Path) -> int:
    value = _parse_int(text, path)
    if value < 0:
        raise CgroupFormatError(path, text, "negative value")
    return value


def read_optional(reader: FileReader, path: Path) -> str:
    """Read an auxiliary file, returning an inline error string on failure."""
    try:
        return reader.read_file(path)
    except CgroupError as e:
        logger.debug(f"Optional cgroup file unavailable: {e}")
        return f"error reading {path.name}: {e}"


def is_unbounded_memory(value: int) -> bool:
    return value >= MEMORY_UNBOUNDED_THRESHOLD


# --- CPU -------------------------------------------------------------------


def _parse_v1_quota(text: str, path: Path) -> int:
    quota = _parse_int(text, path)
    if quota < V1_NO_QUOTA:
        raise CgroupFormatError(path, text, "quota below -1")
    return quota


def parse_quota_period(quota_text: str, period_text: str, quota_path: Path, period_path: Path) -> CpuLimit:
    """Interpret v1 ``cpu.cfs_quota_us`` / ``cpu.cfs_period_us`` contents."""
    quota = _parse_v1_quota(quota_text, quota_path)
    period = _parse_uint(period_text, period_path)
    return CpuLimit(quota_us=None if quota == V1_NO_QUOTA else quota, period_us=period)


def parse_cpu_max(content: str, path: Path) -> CpuLimit:
    """Interpret a v2 ``cpu.max`` line of the form ``<quota> <period>``."""
    tokens = content.split()
    if len(tokens) < 2:
        raise CgroupFormatError(path, content, "expected '<quota> <period>'")
    quota_token, period_token = tokens[0], tokens[1]
    period = _parse_uint(period_token, path)
    if quota_token == UNLIMITED_TOKEN:
        return CpuLimit(quota_us=None, period_us=period)
    return CpuLimit(quota_us=_parse_uint(quota_token, path), period_us=period)


def read_v1_cpu_limit(cpu_dir: Path, reader: FileReader) -> CpuLimit:
    """
    Read the CFS quota and period of a v1 cpu controller directory.

    The period is only required when a quota is set; with a quota of -1 a
    missing or malformed period is kept as an inline error.
    """
    quota_path = cpu_dir / "cpu.cfs_quota_us"
    period_path = cpu_dir / "cpu.cfs_period_us"
    quota_text = reader.read_file(quota_path)
    if _parse_v1_quota(quota_text, quota_path) != V1_NO_QUOTA:
        return parse_quota_period(quota_text, reader.read_file(period_path), quota_path, period_path)

    try:
        period = _parse_uint(reader.read_file(period_path), period_path)
    except CgroupError as e:
        logger.debug(f"CFS period unavailable without a quota: {e}")
        return CpuLimit(quota_us=None, period_us=None, period_error=f"error reading {period_path.name}: {e}")
    return CpuLimit(quota_us=None, period_us=period)


def read_v2_cpu_limit(unified_dir: Path, reader: FileReader) -> CpuLimit:
    path = unified_dir / "cpu.max"
    return parse_cpu_max(reader.read_file(path), path)


def parse_usage_usec(content: str, path: Path) -> int:
    """Extract the ``usage_usec`` counter from a v2 ``cpu.stat`` body."""
    for line in content.splitlines():
        fields = line.split()
        if len(fields) == 2 and fields[0] == "usage_usec":
            return _parse_uint(fields[1], path)
    raise CgroupFormatError(path, content, "usage_usec not found")


def read_v1_cpu_usage(cpu_dir: Path, reader: FileReader) -> int:
    """Cumulative CPU time in nanoseconds from ``cpuacct.usage``."""
    path = cpu_dir / "cpuacct.usage"
    return _parse_uint(reader.read_file(path), path)


def read_v2_cpu_usage(unified_dir: Path, reader: FileReader) -> int:
    """Cumulative CPU time in microseconds from ``cpu.stat``."""
    path = unified_dir / "cpu.stat"
    return parse_usage_usec(reader.read_file(path), path)


# --- Memory ----------------------------------------------------------------


def _read_usage(path: Path, reader: FileReader) -> tuple[int | None, str | None]:
    try:
        return _parse_uint(reader.read_file(path), path), None
    except CgroupError as e:
        logger.debug(f"Memory usage unavailable: {e}")
        return None, f"error reading {path.name}: {e}"


def parse_v1_memory(memory_dir: Path, reader: FileReader) -> MemorySection:
    """
    Read v1 memory limit and usage.

    Raises:
        CgroupError: If ``memory.limit_in_bytes`` is unreadable or malformed.
    """
    limit_path = memory_dir / "memory.limit_in_bytes"
    limit = _parse_uint(reader.read_file(limit_path), limit_path)
    usage, usage_error = _read_usage(memory_dir / "memory.usage_in_bytes", reader)
    return MemorySection(
        limit_bytes=None if is_unbounded_memory(limit) else limit,
        usage_bytes=usage,
        usage_error=usage_error,
        stat=read_optional(reader, memory_dir / "memory.stat"),
    )


def parse_v2_memory(unified_dir: Path, reader: FileReader) -> MemorySection:
    """
    Read v2 memory limit and usage.

    Raises:
        CgroupError: If ``memory.max`` is unreadable or malformed.
    """
    max_path = unified_dir / "memory.max"
    content = reader.read_file(max_path)
    if content == UNLIMITED_TOKEN:
        limit = None
    else:
        limit = _parse_uint(content, max_path)
        if is_unbounded_memory(limit):
            limit = None
    usage, usage_error = _read_usage(unified_dir / "memory.current", reader)
    return MemorySection(
        limit_bytes=limit,
        usage_bytes=usage,
        usage_error=usage_error,
        stat=read_optional(reader, unified_dir / "memory.stat"),
    )

"""CPU utilization sampling from cumulative cgroup counters."""

import time
from collections.abc import Callable

from loguru import logger

from cgroupinfo.errors import CgroupError
from cgroupinfo.models import CpuUsage

NANOSECONDS = "nanoseconds"
MICROSECONDS = "microseconds"

UNITS_PER_SECOND = {
    NANOSECONDS: 1_000_000_000,
    MICROSECONDS: 1_000_000,
}


def cores_from_samples(first: int, second: int, interval: float, units_per_second: int) -> float:
    """
    Average number of cores busy between two cumulative readings.

    ``interval`` is the nominal sampling interval in seconds; both readings are
    in units of ``1 / units_per_second`` seconds.
    """
    elapsed = interval * units_per_second
    return (second - first) / elapsed


class UsageSampler:
    """
    Two-sample CPU usage estimator.

    The calling thread is blocked for the whole interval; there is no
    cancellation once sampling has started.
    """

    def __init__(
        self,
        read_counter: Callable[[], int],
        unit: str,
        interval: float,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the UsageSampler.

        Args:
            read_counter: Returns the cumulative usage counter, raising
                CgroupError when it cannot be read.
            unit: NANOSECONDS (v1 cpuacct.usage) or MICROSECONDS (v2 usage_usec).
            interval: Sampling interval in seconds.
            sleep: Blocking wait, replaceable in tests.
        """
        if unit not in UNITS_PER_SECOND:
            raise ValueError(f"unsupported counter unit {unit!r}")
        self._read_counter = read_counter
        self._unit = unit
        self._interval = interval
        self._sleep = sleep

    @property
    def interval(self) -> float:
        return self._interval

    def sample(self, limit_cores: float | None = None) -> CpuUsage:
        """Take two readings ``interval`` seconds apart and derive usage in cores."""
        try:
            first = self._read_counter()
        except CgroupError as e:
            logger.warning(f"Error getting initial CPU usage: {e}")
            return self._failed(None, f"Error getting initial CPU usage: {e}")

        logger.debug(f"Sampling CPU utilization for {self._interval}s")
        self._sleep(self._interval)

        try:
            second = self._read_counter()
        except CgroupError as e:
            logger.warning(f"Error getting second CPU usage: {e}")
            return self._failed(first, f"Error getting second CPU usage: {e}")

        if second < first:
            return self._failed(first, f"CPU usage counter went backwards ({first} -> {second})")

        usage_cores = cores_from_samples(first, second, self._interval, UNITS_PER_SECOND[self._unit])
        return CpuUsage(
            initial=first,
            unit=self._unit,
            interval=self._interval,
            usage_cores=usage_cores,
            limit_cores=limit_cores,
        )

    def _failed(self, initial: int | None, error: str) -> CpuUsage:
        return CpuUsage(initial=initial, unit=self._unit, interval=self._interval, error=error)

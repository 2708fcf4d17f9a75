"""Runtime configuration for cgroupinfo."""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_MOUNT_ROOT = Path("/sys/fs/cgroup")
DEFAULT_PROC_CGROUP = Path("/proc/self/cgroup")
DEFAULT_SAMPLE_INTERVAL = 2.0


@dataclass(slots=True, frozen=True)
class CgroupConfig:
    """
    Filesystem locations and timing used by every component.

    Tests point ``mount_root`` and ``proc_cgroup`` at a synthetic tree.
    """

    mount_root: Path = DEFAULT_MOUNT_ROOT
    proc_cgroup: Path = DEFAULT_PROC_CGROUP
    v1_cpu_dirs: tuple[str, ...] = ("cpu", "cpu,cpuacct")
    v1_memory_dir: str = "memory"
    sample_interval: float = DEFAULT_SAMPLE_INTERVAL  # seconds

    def __post_init__(self) -> None:
        if self.sample_interval <= 0:
            raise ValueError(f"sample_interval must be positive, got {self.sample_interval}")

    @property
    def v2_marker(self) -> Path:
        """Path whose presence marks the unified (v2) hierarchy."""
        return self.mount_root / "cgroup.controllers"

    def v1_markers(self) -> list[Path]:
        return [self.mount_root / name for name in self.v1_cpu_dirs]

"""Synthetic cgroup trees for tests."""

from pathlib import Path

import pytest

from cgroupinfo.config import CgroupConfig
from cgroupinfo.inspector import CgroupInspector
from cgroupinfo.models import HostInfo

HOST = HostInfo(cpu_count=8, memory_total=16 * 1024**3)


class CgroupTree:
    """A fake /sys/fs/cgroup and /proc/self/cgroup rooted in a temp dir."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.mount = root / "sys" / "fs" / "cgroup"
        self.proc_cgroup = root / "proc" / "self" / "cgroup"
        self.mount.mkdir(parents=True)

    def write(self, relative: str, content: str) -> Path:
        path = self.mount / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content + "\n")
        return path

    def membership(self, *lines: str) -> None:
        self.proc_cgroup.parent.mkdir(parents=True, exist_ok=True)
        self.proc_cgroup.write_text("\n".join(lines) + "\n")

    def config(self, **kwargs) -> CgroupConfig:
        return CgroupConfig(mount_root=self.mount, proc_cgroup=self.proc_cgroup, **kwargs)

    def inspector(self, sleep=None, **kwargs) -> CgroupInspector:
        return CgroupInspector(
            self.config(**kwargs),
            sleep=sleep or (lambda seconds: None),
            host_info=lambda: HOST,
        )


@pytest.fixture
def tree(tmp_path: Path) -> CgroupTree:
    return CgroupTree(tmp_path)


@pytest.fixture
def v2_tree(tree: CgroupTree) -> CgroupTree:
    """cgroup v2 container limited to half a core and 512 MiB."""
    tree.write("cgroup.controllers", "cpuset cpu io memory pids")
    tree.membership("0::/kubepods/pod1")
    cgroup = "kubepods/pod1"
    tree.write(f"{cgroup}/cpu.max", "50000 100000")
    tree.write(f"{cgroup}/cpu.weight", "100")
    tree.write(f"{cgroup}/cpu.stat", "usage_usec 1000000\nuser_usec 600000\nsystem_usec 400000")
    tree.write(f"{cgroup}/memory.max", str(512 * 1024**2))
    tree.write(f"{cgroup}/memory.current", str(128 * 1024**2))
    tree.write(f"{cgroup}/memory.stat", "anon 1024\nfile 2048")
    return tree


@pytest.fixture
def v1_tree(tree: CgroupTree) -> CgroupTree:
    """cgroup v1 container without a CPU quota and with a 1 GiB memory limit."""
    tree.membership(
        "12:memory:/docker/abc",
        "4:cpu,cpuacct:/docker/abc",
        "1:name=systemd:/docker/abc",
    )
    tree.write("cpu/docker/abc/cpu.cfs_quota_us", "-1")
    tree.write("cpu/docker/abc/cpu.cfs_period_us", "100000")
    tree.write("cpu/docker/abc/cpu.shares", "1024")
    tree.write("cpu/docker/abc/cpu.stat", "nr_periods 0\nnr_throttled 0\nthrottled_time 0")
    tree.write("cpu/docker/abc/cpuacct.usage", "5000000000")
    tree.write("memory/docker/abc/memory.limit_in_bytes", str(1024**3))
    tree.write("memory/docker/abc/memory.usage_in_bytes", str(256 * 1024**2))
    tree.write("memory/docker/abc/memory.stat", "cache 0\nrss 268435456")
    return tree

"""cgroupinfo - inspect the cgroup limits of the running container."""

__version__ = "0.1.0"

"""Cgroup version detection."""

from loguru import logger

from cgroupinfo.config import CgroupConfig
from cgroupinfo.fs import FileReader
from cgroupinfo.models import CgroupVersion


def detect_version(config: CgroupConfig, reader: FileReader | None = None) -> CgroupVersion:
    """
    Decide which cgroup hierarchy governs this process.

    The unified marker is checked first: hybrid systems expose both, and the
    unified path is the one that carries v2 semantics.
    """
    reader = reader or FileReader()

    if reader.exists(config.v2_marker):
        version = CgroupVersion.V2
    elif any(reader.exists(marker) for marker in config.v1_markers()):
        version = CgroupVersion.V1
    else:
        version = CgroupVersion.UNKNOWN

    logger.debug(f"Detected {version} under {config.mount_root}")
    return version

"""Resolution of controller paths from the process cgroup membership."""

from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from cgroupinfo.config import CgroupConfig
from cgroupinfo.fs import FileReader
from cgroupinfo.models import CgroupVersion

CPU = "cpu"
MEMORY = "memory"
UNIFIED = "unified"


def parse_cgroup_line(line: str) -> tuple[str, str] | None:
    """
    Split a ``hierarchy-id:controller-list:path`` line.

    Returns (controllers, path), or None when the line has fewer than three
    fields. The path itself may contain colons.
    """
    parts = line.strip().split(":", 2)
    if len(parts) != 3:
        return None
    return parts[1], parts[2]


def resolve_controller_paths(lines: Iterable[str], version: CgroupVersion) -> dict[str, str]:
    """
    Build the controller -> relative path map for the detected version.

    v1: every line naming the ``cpu`` or ``memory`` controller is recorded,
    the last one winning. v2: the first non-root path is recorded under
    ``unified``.
    """
    paths: dict[str, str] = {}

    for line in lines:
        parsed = parse_cgroup_line(line)
        if parsed is None:
            logger.debug(f"Skipping malformed cgroup line {line!r}")
            continue
        controllers, path = parsed

        if version is CgroupVersion.V1:
            names = controllers.split(",")
            if CPU in names:
                paths[CPU] = path
            if MEMORY in names:
                paths[MEMORY] = path
        elif version is CgroupVersion.V2:
            if UNIFIED not in paths and path != "/":
                paths[UNIFIED] = path

    logger.debug(f"Resolved cgroup paths: {paths}")
    return paths


def controller_dir(
    root: Path,
    relative: str,
    reader: FileReader | None = None,
) -> Path:
    """
    Join a membership path onto a controller root.

    Inside a cgroup namespace the membership path names the cgroup as the
    host sees it while the mount only exposes the container's own subtree;
    in that case the controller root itself is the cgroup directory.
    """
    reader = reader or FileReader()
    candidate = root / relative.lstrip("/")
    if reader.is_dir(candidate):
        return candidate
    logger.debug(f"{candidate} does not exist, falling back to {root}")
    return root


def v1_cpu_root(config: CgroupConfig, reader: FileReader | None = None) -> Path:
    """First existing v1 CPU controller mount, defaulting to the first candidate."""
    reader = reader or FileReader()
    for marker in config.v1_markers():
        if reader.exists(marker):
            return marker
    return config.v1_markers()[0]

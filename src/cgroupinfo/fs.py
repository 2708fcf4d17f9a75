"""Read-only access to cgroup pseudo-files."""

from pathlib import Path

from cgroupinfo.errors import CgroupFormatError, CgroupReadError


class FileReader:
    """
    Minimal read capability over the filesystem.

    Cgroup pseudo-files are either present and instantly readable or
    structurally absent, so reads are never retried.
    """

    def read_file(self, path: Path | str) -> str:
        """
        Read a file and strip surrounding whitespace.

        Raises:
            CgroupReadError: If the file cannot be opened or read.
            CgroupFormatError: If the content is not valid UTF-8.
        """
        try:
            with open(path, "rb") as f:
                raw = f.read()
        except OSError as e:
            raise CgroupReadError(path, e) from e
        try:
            return raw.decode("utf-8").strip()
        except UnicodeDecodeError as e:
            content = raw.decode("utf-8", errors="replace").strip()
            raise CgroupFormatError(path, content, "not valid UTF-8") from e

    def read_lines(self, path: Path | str) -> list[str]:
        """Read a file and return its non-empty lines."""
        return [line for line in self.read_file(path).splitlines() if line.strip()]

    def exists(self, path: Path | str) -> bool:
        """Check for a path; any stat failure counts as absent."""
        try:
            return Path(path).exists()
        except OSError:
            return False

    def is_dir(self, path: Path | str) -> bool:
        try:
            return Path(path).is_dir()
        except OSError:
            return False

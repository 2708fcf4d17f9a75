from pathlib import Path


class CgroupError(Exception):
    pass


class CgroupReadError(CgroupError):
    """A cgroup pseudo-file could not be read."""

    def __init__(self, path: Path | str, cause: OSError) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"failed to read cgroup file {self.path}: {cause}")


class CgroupFormatError(CgroupError):
    """A cgroup pseudo-file was readable but its content did not parse."""

    def __init__(self, path: Path | str, content: str, reason: str) -> None:
        self.path = Path(path)
        self.content = content
        self.reason = reason
        super().__init__(f"unexpected content in {self.path} ({reason}): {content!r}")

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileSystemStore:
    """Animal photos and other uploads, kept under one root directory.

    Every path is relative to the root; anything resolving outside it is
    rejected with ValueError.
    """

    def __init__(self, base_path: str):
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _resolve(self, relative: str) -> Path:
        target = (self.base_path / relative).resolve()
        if not target.is_relative_to(self.base_path):
            raise ValueError(f"Path escapes upload root: {relative}")
        return target

    def save(self, name: str, data: bytes) -> str:
        target = self._resolve(name)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug("Stored %d bytes at %s", len(data), name)
        return target.relative_to(self.base_path).as_posix()

    def get(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.is_file():
            raise FileNotFoundError(f"No stored file at {path}")
        return target.read_bytes()

    def delete(self, path: str) -> None:
        """Remove a stored file; a missing file is not an error."""
        target = self._resolve(path)
        if target.is_file():
            target.unlink()
            logger.debug("Deleted stored file %s", path)

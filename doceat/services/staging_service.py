import logging
from pathlib import Path

from doceat.core.errors import StagingFileMissing

logger = logging.getLogger(__name__)


class LocalStaging:
    """Uploaded files waiting for ingestion, addressed by their base name."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def path(self, filename: str) -> Path:
        # Only the base name is honoured; "../x.pdf" lands in the root as "x.pdf".
        name = Path((filename or "").replace("\\", "/")).name
        if not name:
            raise StagingFileMissing(f"empty staging file name: {filename!r}")
        return self.root / name

    def write(self, filename: str, data: bytes) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        p = self.path(filename)
        p.write_bytes(data)
        logger.debug("staged %s (%d bytes)", p, len(data))
        return p

    def exists(self, filename: str) -> bool:
        return self.path(filename).is_file()

    def read(self, filename: str) -> bytes:
        p = self.path(filename)
        if not p.is_file():
            raise StagingFileMissing(f"staged file not found: {p}")
        return p.read_bytes()

    def delete(self, filename: str) -> None:
        self.path(filename).unlink(missing_ok=True)

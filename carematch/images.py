"""File-backed image storage for profile photos."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from uuid import uuid4

logger = logging.getLogger(__name__)


class FileImageStore:
    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def save(self, data: bytes) -> Optional[str]:
        """Write image bytes to a fresh ``<uuid>.jpg`` file and return its name."""
        if not data:
            return None
        filename = f"{uuid4()}.jpg"
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / filename).write_bytes(data)
        except OSError as exc:
            logger.warning("Failed to save image %s: %s", filename, exc)
            return None
        return filename

    def load(self, ref: str) -> Optional[bytes]:
        path = self.directory / Path(ref).name
        if not path.is_file():
            return None
        return path.read_bytes()

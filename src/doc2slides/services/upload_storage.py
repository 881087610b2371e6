"""
Upload storage: keeps uploaded bytes and hands back a stable path
"""

import logging
import re
import time
import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from ..utils.thread_pool import run_blocking_io

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^\w.\-]+")


class UploadStorage(ABC):

    @abstractmethod
    async def save(self, data: bytes, filename: str) -> str:
        """Store data and return its path"""
        pass

    @abstractmethod
    async def read(self, path: str) -> bytes:
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        pass


class LocalUploadStorage(UploadStorage):
    """Files under a local directory, named "<epoch-ms>-<random>-<filename>" """

    def __init__(self, upload_dir: str = "uploads"):
        self.upload_dir = Path(upload_dir)

    @staticmethod
    def safe_name(filename: str) -> str:
        name = _UNSAFE_CHARS.sub("_", Path(filename).name).strip("._")
        return name or "upload"

    async def save(self, data: bytes, filename: str) -> str:
        path = self.upload_dir / f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{self.safe_name(filename)}"

        def _write():
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "xb") as f:
                f.write(data)

        await run_blocking_io(_write)
        logger.info(f"Stored upload {filename} at {path} ({len(data)} bytes)")
        return str(path)

    async def read(self, path: str) -> bytes:
        return await run_blocking_io(Path(path).read_bytes)

    async def delete(self, path: str) -> bool:
        target = Path(path)

        def _remove() -> bool:
            if target.is_file():
                target.unlink()
                return True
            return False

        return await run_blocking_io(_remove)

"""
Output storage for finished documents and texture files.
"""

import io
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, IO, Union

from .utils.common import ensure_dir

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Opens writable streams at a path."""

    @abstractmethod
    def open(self, path: str, mode: str = "w") -> IO:
        """Open a writable stream; mode is "w" for text or "wb" for bytes.

        The returned stream is a context manager and is closed by the caller.
        """

    def write(self, path: str, data: Union[str, bytes]) -> None:
        mode = "wb" if isinstance(data, bytes) else "w"
        with self.open(path, mode) as stream:
            stream.write(data)


class FileStorage(Storage):
    """Writes to the local file system, creating parent directories."""

    def open(self, path: str, mode: str = "w") -> IO:
        target = Path(path)
        ensure_dir(target.parent)
        logger.debug("Opening %s (%s)", target, mode)
        if "b" in mode:
            return open(target, mode)
        return open(target, mode, encoding="utf-8", newline="")


class MemoryStorage(Storage):
    """Keeps written files in a dict, keyed by path."""

    def __init__(self):
        self.files: Dict[str, Union[str, bytes]] = {}

    @contextmanager
    def open(self, path: str, mode: str = "w") -> Iterator[IO]:
        stream = io.BytesIO() if "b" in mode else io.StringIO()
        yield stream
        self.files[path] = stream.getvalue()

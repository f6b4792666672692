# backend/app/services/images/blobs.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Callable

from app.errors import MediaRejectedError, StorageFault

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
MAX_NAME_ATTEMPTS = 5
MIB = 1024 * 1024


def size_limit_message(max_bytes: int) -> str:
    limit = f"{max_bytes // MIB} MB" if max_bytes % MIB == 0 else f"{max_bytes} bytes"
    return f"Image must be at most {limit}"


class BlobStore:
    """Flat directory of uploaded files addressed by generated filename."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def path(self, filename: str) -> Path:
        p = (self.root / filename).resolve()
        if p.parent != self.root.resolve() or not filename:
            raise ValueError(f"invalid blob name: {filename!r}")
        return p

    def exists(self, filename: str) -> bool:
        try:
            return self.path(filename).is_file()
        except ValueError:
            return False

    def listing(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_file())

    def write(self, name_factory: Callable[[], str], stream: BinaryIO, max_bytes: int | None = None) -> str:
        """
        Copy ``stream`` into a new file and return its name.

        Files are created exclusively, so a clash with a concurrent writer
        just draws another name. A failed or oversized write leaves nothing
        behind.
        """
        self.root.mkdir(parents=True, exist_ok=True)

        for _ in range(MAX_NAME_ATTEMPTS):
            filename = name_factory()
            target = self.path(filename)
            try:
                fh = open(target, "xb")
            except FileExistsError:
                continue
            except OSError as e:
                raise StorageFault("Error saving image", detail=str(e)) from e
            break
        else:
            raise StorageFault("Error saving image", detail="could not allocate a unique filename")

        written = 0
        try:
            with fh:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if max_bytes is not None and written > max_bytes:
                        raise MediaRejectedError(size_limit_message(max_bytes))
                    fh.write(chunk)
        except MediaRejectedError:
            self._discard(target)
            raise
        except OSError as e:
            self._discard(target)
            raise StorageFault("Error saving image", detail=str(e)) from e

        logger.debug("Stored %s (%d bytes)", filename, written)
        return filename

    def delete(self, filename: str) -> bool:
        """Remove a blob; False when it was already gone."""
        try:
            self.path(filename).unlink()
        except FileNotFoundError:
            return False
        except (OSError, ValueError) as e:
            raise StorageFault("Error deleting image", detail=str(e)) from e
        return True

    def _discard(self, target: Path) -> None:
        try:
            target.unlink(missing_ok=True)
        except OSError:
            logger.exception("Could not remove partial upload %s", target)

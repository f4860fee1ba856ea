"""Content checksum primitive."""

from __future__ import annotations

import asyncio
import hashlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_CHUNK_SIZE = 1024 * 1024


def hash_file(file_path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Compute SHA-256 hash of a file."""
    sha = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            sha.update(chunk)
    return sha.hexdigest()


async def file_checksum(file_path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Hash a file in a worker thread.

    Raises OSError if the file cannot be opened or read.
    """
    return await asyncio.to_thread(hash_file, file_path, chunk_size)

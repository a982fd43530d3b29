"""Utility functions for CLI operations."""

import hashlib
from dataclasses import dataclass
from pathlib import Path

from common.merkle import compute_merkle_root, iter_chunk_hashes


@dataclass(frozen=True)
class LocalFileDigest:
    """Everything the registry needs to know about a local file."""

    filename: str
    size: int
    file_hash: str
    leaf_hashes: tuple[str, ...]
    merkle_root: str


def digest_file(path: str, chunk_size: int) -> LocalFileDigest:
    """
    Hash a local file and build its Merkle tree over fixed-size chunks.

    The file hash is the sha256 of the whole content; each leaf is the
    sha256 of one chunk.

    Raises:
        OSError: If the file cannot be read
    """
    file_path = Path(path)
    content_hash = hashlib.sha256()
    leaf_hashes = []

    with open(file_path, 'rb') as f:
        for leaf in iter_chunk_hashes(_TeeReader(f, content_hash), chunk_size):
            leaf_hashes.append(leaf)

    return LocalFileDigest(
        filename=file_path.name,
        size=file_path.stat().st_size,
        file_hash=content_hash.hexdigest(),
        leaf_hashes=tuple(leaf_hashes),
        merkle_root=compute_merkle_root(leaf_hashes),
    )


class _TeeReader:
    """Feeds everything read from a stream into a running hash."""

    def __init__(self, stream, running_hash):
        self._stream = stream
        self._hash = running_hash

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        self._hash.update(data)
        return data


def short_hash(file_hash: str) -> str:
    """Abbreviate a hex digest for tabular output."""
    return f"{file_hash[:12]}..." if len(file_hash) > 15 else file_hash


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"

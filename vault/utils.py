"""Utility helper functions for the vault."""

import re
from datetime import datetime, timezone
from typing import Optional

from common.constants import HASH_HEX_LENGTH
from vault.exceptions import InvalidParameterError

_HEX_RE = re.compile(r'^[0-9a-f]+$')


def utc_now() -> datetime:
    """
    Current time as an aware UTC datetime.
    """
    return datetime.now(timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO timestamp column, passing NULL through.
    """
    return datetime.fromisoformat(value) if value else None


def normalize_hash(value: str, field_name: str = "hash") -> str:
    """
    Canonical form of a sha256 hex digest: lower-case, no 0x prefix.

    Args:
        value: Hex digest, optionally 0x-prefixed
        field_name: Name used in the error message

    Returns:
        Normalized digest

    Raises:
        InvalidParameterError: If value is not a 32-byte hex digest
    """
    if not isinstance(value, str):
        raise InvalidParameterError(f"{field_name} must be a hex string")

    digest = value.strip().lower()
    if digest.startswith("0x"):
        digest = digest[2:]

    if len(digest) != HASH_HEX_LENGTH or not _HEX_RE.match(digest):
        raise InvalidParameterError(f"{field_name} must be a {HASH_HEX_LENGTH}-character hex digest")

    return digest

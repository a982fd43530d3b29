"""Project-wide constants (hash sizes, chunking, API key prefix, default ports)."""

HASH_HEX_LENGTH: int = 64  # sha256 digest as hex

PROOF_CHUNK_SIZE_BYTES: int = 256 * 1024  # 256 KiB leaves for client-side trees

API_KEY_PREFIX: str = "pv_"

DEFAULT_SERVER_PORT: int = 8000

"""Client settings and stored credentials for the ProofVault CLI.

Settings live in a JSON file (``~/.proofvault/config.json`` by default).
Keys missing from the file fall back to built-in defaults; ``PV_SERVER_HOST``
and ``PV_SERVER_PORT`` take precedence over both so one shell can point the
client at another server without touching the file.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from common.constants import DEFAULT_SERVER_PORT, PROOF_CHUNK_SIZE_BYTES
from common.logging_config import get_logger

logger = get_logger(__name__)

DEFAULTS: Dict[str, Any] = {
    "server_host": "localhost",
    "server_port": DEFAULT_SERVER_PORT,
    "timeout": 30,
    "max_retries": 3,
    "retry_backoff_multiplier": 2,
    "chunk_size": PROOF_CHUNK_SIZE_BYTES,
}

_ENV_OVERRIDES = {
    "server_host": ("PV_SERVER_HOST", str),
    "server_port": ("PV_SERVER_PORT", int),
}

# The file holds an API key.
_FILE_MODE = 0o600


class Config:
    def __init__(self, config_path: Path):
        self.config_path = self._usable_path(config_path)
        self.data: Dict[str, Any] = {**DEFAULTS, **self._read()}

        if not self.config_path.exists():
            self.save()

    @staticmethod
    def _usable_path(config_path: Path) -> Path:
        """Fall back to the temp directory when the home directory is read-only."""
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            return config_path
        except PermissionError:
            fallback = Path(tempfile.gettempdir()) / '.proofvault' / config_path.name
            logger.warning(f"Cannot create {config_path.parent}; using {fallback}")
            fallback.parent.mkdir(parents=True, exist_ok=True)
            return fallback

    def _read(self) -> Dict[str, Any]:
        """
        Stored settings, or an empty dict when there are none.

        An unparseable file is moved aside to ``config.json.bak`` so the next
        save does not destroy whatever the user had in it.
        """
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r') as f:
                stored = json.load(f)
            if not isinstance(stored, dict):
                raise ValueError("top level is not an object")
            return stored
        except (ValueError, OSError) as e:
            logger.warning(f"Unreadable config {self.config_path}: {e}; using defaults")
            try:
                shutil.copy(self.config_path, self.config_path.with_suffix('.json.bak'))
            except OSError as copy_error:
                logger.warning(f"Could not back up config: {copy_error}")
            return {}

    def save(self) -> None:
        """Write settings atomically, readable by the owner only."""
        tmp_path = self.config_path.with_suffix('.json.tmp')
        try:
            with open(tmp_path, 'w') as f:
                json.dump(self.data, f, indent=2)
            os.chmod(tmp_path, _FILE_MODE)
            os.replace(tmp_path, self.config_path)
        except OSError as e:
            logger.warning(f"Could not save config {self.config_path}: {e}")

    def _get(self, key: str) -> Any:
        if key in _ENV_OVERRIDES:
            env_var, cast = _ENV_OVERRIDES[key]
            if os.environ.get(env_var):
                return cast(os.environ[env_var])
        return self.data.get(key, DEFAULTS.get(key))

    def get_api_key(self) -> Optional[str]:
        return self.data.get('api_key')

    def get_identity(self) -> Optional[str]:
        return self.data.get('identity')

    def set_api_key(self, key: str, identity: Optional[str] = None) -> None:
        """
        Remember the API key returned by signup or login.

        Args:
            key: API key ("pv_<uuid>")
            identity: Identity the key acts as; kept so commands such as
                ``files`` can default to the caller
        """
        self.data['api_key'] = key
        if identity is not None:
            self.data['identity'] = identity
        self.save()

    def get_base_url(self) -> str:
        return f"http://{self._get('server_host')}:{self._get('server_port')}"

    def get_timeout(self) -> int:
        return self._get('timeout')

    def get_chunk_size(self) -> int:
        """Leaf size in bytes used when building a file's Merkle tree."""
        return self._get('chunk_size')

    def get_retry_config(self) -> dict:
        return {
            'max_retries': self._get('max_retries'),
            'retry_backoff_multiplier': self._get('retry_backoff_multiplier'),
        }

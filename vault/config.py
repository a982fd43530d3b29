"""Configuration settings for the vault server."""

import os

from common.constants import DEFAULT_SERVER_PORT


DATABASE_PATH = os.environ.get("PV_DATABASE_PATH", "/app/data/vault.db")

SERVER_HOST = os.environ.get("PV_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("PV_PORT", str(DEFAULT_SERVER_PORT)))

# The single privileged principal. Its account is provisioned at startup from
# PV_ADMIN_PASSWORD and can never be claimed through signup.
ADMIN_IDENTITY = os.environ.get("PV_ADMIN_IDENTITY", "admin")

ADMIN_PASSWORD = os.environ.get("PV_ADMIN_PASSWORD")

# Seed values for the settings row; persisted settings win after first start.
DEFAULT_STORAGE_FEE = int(os.environ.get("PV_STORAGE_FEE", "1000"))

DEFAULT_VERIFICATION_THRESHOLD = int(os.environ.get("PV_VERIFICATION_THRESHOLD", "3"))

DEFAULT_USER_QUOTA = int(os.environ.get("PV_DEFAULT_QUOTA", str(1024 ** 3)))

DEFAULT_MAX_QUOTA = int(os.environ.get("PV_MAX_QUOTA", str(100 * 1024 ** 3)))

SQLITE_BUSY_TIMEOUT = float(os.environ.get("PV_SQLITE_TIMEOUT", "5.0"))

MIN_NAME_LENGTH = 3

"""Shared pytest fixtures for all tests."""

from pathlib import Path

import pytest

from cli.config import Config
from vault.database import init_database
from vault.services.gateway import Gateway

ADMIN = "admin"


@pytest.fixture
def db_path(tmp_path) -> str:
    """
    Create and initialize a temporary database.

    Returns:
        Path to the database file as a string
    """
    path = tmp_path / "vault.db"
    init_database(str(path))
    return str(path)


@pytest.fixture
def gateway(db_path) -> Gateway:
    return Gateway(ADMIN, db_path)


@pytest.fixture
def alice(gateway):
    """Registered identity 'alice-id' with profile name 'alice'."""
    gateway.register_user("alice-id", "alice")
    return "alice-id"


@pytest.fixture
def bob(gateway):
    gateway.register_user("bob-id", "bob")
    return "bob-id"


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Returns:
        Path to temporary .proofvault directory
    """
    config_dir = tmp_path / '.proofvault'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path) -> Path:
    """
    Create a sample file for upload and proof tests.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path


@pytest.fixture
def multi_chunk_file(tmp_path) -> Path:
    """File spanning three 16-byte chunks (the last one partial)."""
    file_path = tmp_path / 'chunks.bin'
    file_path.write_bytes(b'A' * 16 + b'B' * 16 + b'C' * 5)
    return file_path

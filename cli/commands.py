"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.config import Config
from cli.models import (
    AdminCommand,
    AuthorizeCommand,
    DownloadCommand,
    FilesCommand,
    InfoCommand,
    LoginCommand,
    ProfileCommand,
    ProveCommand,
    RegisterCommand,
    RevokeCommand,
    SettingsCommand,
    SignupCommand,
    StatsCommand,
    UploadCommand,
)
from cli.vault_client import VaultClient

logger = get_logger(__name__)


_client: Optional[VaultClient] = None


def get_client() -> VaultClient:
    """
    Get or create global VaultClient instance.
    """
    global _client
    if _client is None:
        logger.debug("Creating new VaultClient instance")
        config = Config(Path.home() / '.proofvault' / 'config.json')
        _client = VaultClient(config)
    return _client


def handle_signup(cmd: SignupCommand, client: Optional[VaultClient] = None) -> str:
    """
    Handle 'signup' command.

    Args:
        cmd: SignupCommand with identity and password
        client: Optional VaultClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    if client is None:
        client = get_client()
    return client.signup(cmd.identity, cmd.password)


def handle_login(cmd: LoginCommand, client: Optional[VaultClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.login(cmd.identity, cmd.password)


def handle_register(cmd: RegisterCommand, client: Optional[VaultClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.register(cmd.name)


def handle_upload(cmd: UploadCommand, client: Optional[VaultClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with local path and optional fee
        client: Optional VaultClient for dependency injection (testing)

    Returns:
        Upload receipt or error message
    """
    logger.info(f"Executing upload command: path={cmd.path} fee={cmd.fee}")
    if client is None:
        client = get_client()
    result = client.upload(cmd.path, cmd.fee)
    logger.debug("Upload command completed")
    return result


def handle_download(cmd: DownloadCommand, client: Optional[VaultClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.download(cmd.file_hash)


def handle_authorize(cmd: AuthorizeCommand, client: Optional[VaultClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.authorize(cmd.file_hash, cmd.grantee)


def handle_revoke(cmd: RevokeCommand, client: Optional[VaultClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.revoke(cmd.file_hash, cmd.grantee)


def handle_prove(cmd: ProveCommand, client: Optional[VaultClient] = None) -> str:
    """
    Handle 'prove' command.

    Args:
        cmd: ProveCommand with local path and chunk index
        client: Optional VaultClient for dependency injection (testing)

    Returns:
        Verification outcome or error message
    """
    logger.info(f"Executing prove command: path={cmd.path} chunk_index={cmd.chunk_index}")
    if client is None:
        client = get_client()
    return client.prove(cmd.path, cmd.chunk_index)


def handle_info(cmd: InfoCommand, client: Optional[VaultClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.file_info(cmd.file_hash)


def handle_profile(cmd: ProfileCommand, client: Optional[VaultClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.profile(cmd.identity)


def handle_files(cmd: FilesCommand, client: Optional[VaultClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.list_files(cmd.identity)


def handle_stats(cmd: StatsCommand, client: Optional[VaultClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.stats()


def handle_settings(cmd: SettingsCommand, client: Optional[VaultClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.settings()


def handle_admin(cmd: AdminCommand, client: Optional[VaultClient] = None) -> str:
    logger.info(f"Executing admin command: action={cmd.action}")
    if client is None:
        client = get_client()
    return client.admin(cmd.action, cmd.identity, cmd.value)


def close_client() -> None:
    """Close the global VaultClient session, if one was created."""
    global _client
    if _client is not None:
        _client.close()
        _client = None

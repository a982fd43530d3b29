"""Tests for CLI command handlers."""

from unittest.mock import Mock

from cli.commands import (
    handle_admin,
    handle_authorize,
    handle_download,
    handle_files,
    handle_login,
    handle_profile,
    handle_prove,
    handle_register,
    handle_revoke,
    handle_signup,
    handle_stats,
    handle_upload,
)
from cli.models import (
    AdminCommand,
    AuthorizeCommand,
    DownloadCommand,
    FilesCommand,
    LoginCommand,
    ProfileCommand,
    ProveCommand,
    RegisterCommand,
    RevokeCommand,
    SignupCommand,
    StatsCommand,
    UploadCommand,
)
from cli.repl import dispatch_command
from cli.vault_client import VaultClient


def test_handle_signup():
    mock_client = Mock(spec=VaultClient)
    mock_client.signup.return_value = "Signup successful!"

    result = handle_signup(SignupCommand(identity='alice', password='password123'), client=mock_client)

    assert 'Signup successful' in result
    mock_client.signup.assert_called_once_with('alice', 'password123')


def test_handle_login():
    mock_client = Mock(spec=VaultClient)
    mock_client.login.return_value = "Login successful!"

    result = handle_login(LoginCommand(identity='alice', password='password123'), client=mock_client)

    assert 'Login successful' in result
    mock_client.login.assert_called_once_with('alice', 'password123')


def test_handle_register():
    mock_client = Mock(spec=VaultClient)
    mock_client.register.return_value = "Registered!"

    handle_register(RegisterCommand(name='alice'), client=mock_client)

    mock_client.register.assert_called_once_with('alice')


def test_handle_upload_passes_fee():
    mock_client = Mock(spec=VaultClient)
    mock_client.upload.return_value = "Uploaded: a.pdf"

    result = handle_upload(UploadCommand(path='a.pdf', fee=1200), client=mock_client)

    assert 'Uploaded' in result
    mock_client.upload.assert_called_once_with('a.pdf', 1200)


def test_handle_download():
    mock_client = Mock(spec=VaultClient)
    mock_client.download.return_value = "Download recorded"

    handle_download(DownloadCommand(file_hash='ab' * 32), client=mock_client)

    mock_client.download.assert_called_once_with('ab' * 32)


def test_handle_authorize_and_revoke():
    mock_client = Mock(spec=VaultClient)

    handle_authorize(AuthorizeCommand(file_hash='h', grantee='bob'), client=mock_client)
    handle_revoke(RevokeCommand(file_hash='h', grantee='bob'), client=mock_client)

    mock_client.authorize.assert_called_once_with('h', 'bob')
    mock_client.revoke.assert_called_once_with('h', 'bob')


def test_handle_prove():
    mock_client = Mock(spec=VaultClient)
    mock_client.prove.return_value = "Proof accepted"

    handle_prove(ProveCommand(path='a.bin', chunk_index=2), client=mock_client)

    mock_client.prove.assert_called_once_with('a.bin', 2)


def test_handle_reads():
    mock_client = Mock(spec=VaultClient)

    handle_profile(ProfileCommand(identity=None), client=mock_client)
    handle_files(FilesCommand(identity='bob'), client=mock_client)
    handle_stats(StatsCommand(), client=mock_client)

    mock_client.profile.assert_called_once_with(None)
    mock_client.list_files.assert_called_once_with('bob')
    mock_client.stats.assert_called_once_with()


def test_handle_admin():
    mock_client = Mock(spec=VaultClient)
    mock_client.admin.return_value = "OK: set-quota bob = 10"

    handle_admin(AdminCommand(action='set-quota', identity='bob', value=10), client=mock_client)

    mock_client.admin.assert_called_once_with('set-quota', 'bob', 10)


def test_dispatch_routes_to_handler():
    mock_client = Mock(spec=VaultClient)
    mock_client.stats.return_value = "  total_users: 1"

    assert dispatch_command(StatsCommand(), client=mock_client) == "  total_users: 1"

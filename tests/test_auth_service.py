"""Tests for account credentials, API keys and log masking."""

import logging

import pytest

from common.logging_config import SensitiveDataFilter
from vault.auth import generate_api_key, hash_password, verify_password
from vault.exceptions import (
    AccountAlreadyExistsError,
    InvalidCredentialsError,
    InvalidParameterError,
    ReservedIdentityError,
)
from vault.services.auth_service import AuthService


@pytest.fixture
def auth(db_path):
    return AuthService(db_path, admin_identity="admin")


def test_password_hash_roundtrip():
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_api_key_format():
    assert generate_api_key().startswith("pv_")
    assert generate_api_key() != generate_api_key()


def test_signup_issues_valid_key(auth):
    api_key = auth.signup("alice-id", "password123")

    assert auth.validate_api_key(api_key) == "alice-id"


def test_signup_twice(auth):
    auth.signup("alice-id", "password123")

    with pytest.raises(AccountAlreadyExistsError):
        auth.signup("alice-id", "another-password")


def test_signup_validates_input(auth):
    with pytest.raises(InvalidParameterError):
        auth.signup("alice-id", "short")
    with pytest.raises(InvalidParameterError):
        auth.signup("  ", "password123")


def test_login_rotates_key(auth):
    first = auth.signup("alice-id", "password123")

    second = auth.login("alice-id", "password123")

    assert second != first
    assert auth.validate_api_key(first) is None
    assert auth.validate_api_key(second) == "alice-id"


@pytest.mark.parametrize("identity,password", [
    ("alice-id", "wrong-password"),
    ("ghost", "password123"),
])
def test_login_rejects_bad_credentials(auth, identity, password):
    auth.signup("alice-id", "password123")

    with pytest.raises(InvalidCredentialsError):
        auth.login(identity, password)


def test_signup_cannot_claim_admin_identity(auth):
    with pytest.raises(ReservedIdentityError):
        auth.signup("admin", "attacker123")

    with pytest.raises(InvalidCredentialsError):
        auth.login("admin", "attacker123")


def test_provisioned_admin_logs_in(auth):
    auth.provision_admin("admin-secret")

    api_key = auth.login("admin", "admin-secret")

    assert auth.validate_api_key(api_key) == "admin"


def test_reprovisioning_resets_admin_password(auth):
    auth.provision_admin("first-secret")
    api_key = auth.login("admin", "first-secret")

    auth.provision_admin("second-secret")

    assert auth.validate_api_key(api_key) == "admin"
    with pytest.raises(InvalidCredentialsError):
        auth.login("admin", "first-secret")
    assert auth.login("admin", "second-secret")


def test_provision_admin_requires_configured_identity(db_path):
    with pytest.raises(InvalidParameterError):
        AuthService(db_path).provision_admin("admin-secret")


def test_log_filter_masks_api_keys():
    record = logging.LogRecord(
        "vault", logging.INFO, __file__, 1,
        "Validated key pv_123e4567-e89b-12d3-a456-426614174000 for alice", None, None
    )

    SensitiveDataFilter().filter(record)

    assert "pv_123e4567" not in record.getMessage()

"""Tests for the gateway: pause switch, statistics and atomic operations."""

import hashlib
import sqlite3

import pytest

from common.merkle import compute_merkle_proof, compute_merkle_root
from vault.exceptions import (
    AlreadyRegisteredError,
    NotAdminError,
    NotAuthorizedError,
    NotEligibleError,
    QuotaExceededError,
    StorageUnavailableError,
    SystemPausedError,
)
from vault.repositories.file_repository import FileRepository
from vault.services.gateway import Gateway
from vault.types import SystemStats

ADMIN = "admin"


def make_hash(label: str) -> str:
    return hashlib.sha256(label.encode()).hexdigest()


LEAF_A = make_hash("leaf-a")
LEAF_B = make_hash("leaf-b")
ROOT = compute_merkle_root([LEAF_A, LEAF_B])


def upload(gateway, owner, label="report", size=100, root=ROOT):
    fee = gateway.get_settings().storage_fee
    return gateway.upload_file(owner, make_hash(label), f"{label}.pdf", size, root, fee)


def prove(gateway, file_hash, index=0):
    steps = compute_merkle_proof([LEAF_A, LEAF_B], index)
    leaf = [LEAF_A, LEAF_B][index]
    return gateway.verify_file_proof(
        file_hash, ROOT, [s.sibling for s in steps], [s.direction for s in steps], leaf
    )


class TestStatistics:
    def test_fresh_system(self, gateway):
        assert gateway.get_system_stats() == SystemStats()
        assert gateway.is_paused() is False

    def test_counters_follow_operations(self, gateway, alice, bob):
        file_hash = upload(gateway, alice).record.file_hash
        gateway.authorize_user(alice, file_hash, bob)
        gateway.download_file(bob, file_hash)
        gateway.download_file(alice, file_hash)

        stats = gateway.get_system_stats()
        assert stats.total_users == 2
        assert stats.total_files == 1
        assert stats.total_uploads == 1
        assert stats.total_downloads == 2
        assert stats.total_verified_files == 0

    def test_failed_operations_do_not_count(self, gateway, alice, bob):
        file_hash = upload(gateway, alice).record.file_hash

        with pytest.raises(NotAuthorizedError):
            gateway.download_file(bob, file_hash)
        with pytest.raises(AlreadyRegisteredError):
            gateway.register_user(alice, "alice-again")

        stats = gateway.get_system_stats()
        assert stats.total_downloads == 0
        assert stats.total_users == 2


class TestProofThreshold:
    def test_verified_file_counted_once(self, gateway, alice):
        gateway.set_verification_threshold(ADMIN, 3)
        file_hash = upload(gateway, alice).record.file_hash

        outcomes = [prove(gateway, file_hash, i % 2) for i in range(5)]

        assert [o.verified_proof_count for o in outcomes] == [1, 2, 3, 4, 5]
        assert [o.newly_verified for o in outcomes] == [False, False, True, False, False]
        assert gateway.get_system_stats().total_verified_files == 1
        assert gateway.is_verified(file_hash)

    def test_same_proof_is_deterministic(self, gateway, alice):
        file_hash = upload(gateway, alice).record.file_hash

        first = prove(gateway, file_hash, 1)
        second = prove(gateway, file_hash, 1)

        assert second.verified_proof_count == first.verified_proof_count + 1

    def test_raising_threshold_does_not_recount(self, gateway, alice):
        gateway.set_verification_threshold(ADMIN, 1)
        file_hash = upload(gateway, alice).record.file_hash
        prove(gateway, file_hash)

        gateway.set_verification_threshold(ADMIN, 3)
        prove(gateway, file_hash)
        prove(gateway, file_hash)

        assert gateway.get_system_stats().total_verified_files == 1


class TestPause:
    def test_pause_blocks_mutations(self, gateway, alice):
        file_hash = upload(gateway, alice).record.file_hash
        gateway.pause(ADMIN)

        with pytest.raises(SystemPausedError):
            gateway.register_user("carol-id", "carol")
        with pytest.raises(SystemPausedError):
            upload(gateway, alice, label="second")
        with pytest.raises(SystemPausedError):
            gateway.download_file(alice, file_hash)
        with pytest.raises(SystemPausedError):
            gateway.authorize_user(alice, file_hash, "carol-id")
        with pytest.raises(SystemPausedError):
            gateway.revoke_user(alice, file_hash, "carol-id")
        with pytest.raises(SystemPausedError):
            prove(gateway, file_hash)

        stats = gateway.get_system_stats()
        assert stats.total_users == 1
        assert stats.total_files == 1
        assert stats.total_downloads == 0

    def test_reads_allowed_while_paused(self, gateway, alice):
        file_hash = upload(gateway, alice).record.file_hash
        gateway.pause(ADMIN)

        assert gateway.get_file(file_hash).record.owner == alice
        assert gateway.get_profile(alice).name == "alice"
        assert len(gateway.list_user_files(alice)) == 1
        assert gateway.get_settings().paused is True

    def test_pause_and_unpause_are_idempotent(self, gateway):
        gateway.pause(ADMIN)
        gateway.pause(ADMIN)
        assert gateway.is_paused() is True

        gateway.unpause(ADMIN)
        gateway.unpause(ADMIN)
        assert gateway.is_paused() is False

    def test_unpause_restores_service(self, gateway):
        gateway.pause(ADMIN)
        gateway.unpause(ADMIN)

        gateway.register_user("carol-id", "carol")

        assert gateway.get_system_stats().total_users == 1

    def test_admin_configuration_allowed_while_paused(self, gateway):
        gateway.pause(ADMIN)

        gateway.set_storage_fee(ADMIN, 5)

        assert gateway.get_settings().storage_fee == 5

    def test_pause_requires_admin(self, gateway, alice):
        with pytest.raises(NotAdminError):
            gateway.pause(alice)
        assert gateway.is_paused() is False


class TestAdminGating:
    @pytest.mark.parametrize("call", [
        lambda g: g.unpause("mallory"),
        lambda g: g.set_storage_fee("mallory", 1),
        lambda g: g.set_verification_threshold("mallory", 1),
        lambda g: g.set_default_quota("mallory", 1),
        lambda g: g.set_max_quota("mallory", 1),
        lambda g: g.set_user_quota("mallory", "alice-id", 1),
        lambda g: g.suspend_user("mallory", "alice-id"),
        lambda g: g.unsuspend_user("mallory", "alice-id"),
    ])
    def test_non_admin_rejected(self, gateway, alice, call):
        with pytest.raises(NotAdminError):
            call(gateway)

    def test_suspended_user_cannot_upload(self, gateway, alice):
        gateway.suspend_user(ADMIN, alice)

        with pytest.raises(NotEligibleError):
            upload(gateway, alice)

        assert gateway.get_system_stats().total_files == 0


class TestAtomicity:
    def test_quota_rejection_changes_nothing(self, gateway, alice):
        gateway.set_user_quota(ADMIN, alice, 150)
        upload(gateway, alice, label="first", size=100)
        fees_before = gateway.get_settings().fees_collected

        with pytest.raises(QuotaExceededError):
            upload(gateway, alice, label="second", size=51)

        assert gateway.get_profile(alice).storage_used == 100
        assert gateway.get_system_stats().total_files == 1
        assert gateway.get_settings().fees_collected == fees_before

    def test_storage_failure_mid_upload_rolls_back(self, gateway, alice, monkeypatch):
        def broken_create(*args, **kwargs):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(FileRepository, "create_file", staticmethod(broken_create))

        with pytest.raises(StorageUnavailableError):
            upload(gateway, alice, size=100)

        assert gateway.get_profile(alice).storage_used == 0
        assert gateway.get_system_stats().total_files == 0
        assert gateway.get_settings().fees_collected == 0

    def test_unreachable_database_is_storage_unavailable(self, tmp_path):
        gateway = Gateway(ADMIN, str(tmp_path / "missing-dir" / "vault.db"))

        with pytest.raises(StorageUnavailableError):
            gateway.get_system_stats()


class TestFileViews:
    def test_upload_receipt_carries_threshold(self, gateway, alice):
        gateway.set_verification_threshold(ADMIN, 4)

        receipt = upload(gateway, alice)

        assert receipt.threshold == 4

    def test_views_use_threshold_read_with_the_record(self, gateway, alice, bob):
        file_hash = upload(gateway, alice).record.file_hash
        gateway.set_verification_threshold(ADMIN, 1)
        prove(gateway, file_hash)

        view = gateway.authorize_user(alice, file_hash, bob)
        assert view.threshold == 1
        assert view.verified is True

        gateway.set_verification_threshold(ADMIN, 5)

        view = gateway.download_file(bob, file_hash)
        assert view.threshold == 5
        assert view.verified is False
        assert view.record.download_count == 1
        assert [v.threshold for v in gateway.list_user_files(alice)] == [5]

"""Tests for Merkle proof verification against stored file roots."""

import pytest

from common.merkle import compute_merkle_proof, compute_merkle_root, hash_bytes
from common.types import Direction
from vault.exceptions import (
    FileNotFoundError,
    MalformedProofError,
    NotAdminError,
    InvalidParameterError,
    RootMismatchError,
)
from vault.services.access_registry import AccessRegistry
from vault.services.file_registry import FileRegistry
from vault.services.proof_verifier import ProofVerifier

ADMIN = "admin"

LEAVES = [hash_bytes(f"chunk-{i}".encode()) for i in range(4)]
ROOT = compute_merkle_root(LEAVES)
FILE_HASH = hash_bytes(b"whole file")


@pytest.fixture
def verifier(db_path):
    access = AccessRegistry(ADMIN, db_path)
    access.register("alice-id", "alice")
    files = FileRegistry(ADMIN, access, db_path)
    files.upload("alice-id", FILE_HASH, "data.bin", 4096, ROOT, 10_000)

    proofs = ProofVerifier(ADMIN, db_path)
    proofs.set_verification_threshold(ADMIN, 2)
    return proofs


def proof_for(index):
    steps = compute_merkle_proof(LEAVES, index)
    return [s.sibling for s in steps], [s.direction for s in steps]


def submit(verifier, index=0, root=ROOT, leaf=None):
    path, directions = proof_for(index)
    return verifier.verify(FILE_HASH, root, leaf or LEAVES[index], path, directions)


def test_valid_proof_counts(verifier):
    outcome = submit(verifier)

    assert outcome.verified_proof_count == 1
    assert outcome.threshold == 2
    assert outcome.verified is False
    assert outcome.newly_verified is False


def test_threshold_reached_once(verifier):
    submit(verifier, 0)
    second = submit(verifier, 1)
    third = submit(verifier, 2)

    assert second.verified and second.newly_verified
    assert third.verified and not third.newly_verified
    assert verifier.is_verified(FILE_HASH)


def test_string_directions_accepted(verifier):
    path, directions = proof_for(3)

    outcome = verifier.verify(FILE_HASH, ROOT, LEAVES[3], path, [d.value.upper() for d in directions])

    assert outcome.verified_proof_count == 1


def test_wrong_leaf_is_root_mismatch(verifier):
    with pytest.raises(RootMismatchError):
        submit(verifier, 0, leaf=LEAVES[1])

    assert verifier.is_verified(FILE_HASH) is False


def test_claimed_root_must_match_stored_root(verifier):
    other_leaves = [hash_bytes(b"x"), hash_bytes(b"y")]
    other_root = compute_merkle_root(other_leaves)
    steps = compute_merkle_proof(other_leaves, 0)

    with pytest.raises(RootMismatchError):
        verifier.verify(FILE_HASH, other_root, other_leaves[0], [s.sibling for s in steps], [s.direction for s in steps])


def test_claimed_root_must_match_candidate(verifier):
    with pytest.raises(RootMismatchError):
        submit(verifier, 0, root=hash_bytes(b"something else"))


def test_length_mismatch_is_malformed(verifier):
    path, directions = proof_for(0)

    with pytest.raises(MalformedProofError):
        verifier.verify(FILE_HASH, ROOT, LEAVES[0], path, directions[:-1])


def test_unknown_direction_is_malformed(verifier):
    path, directions = proof_for(0)

    with pytest.raises(MalformedProofError):
        verifier.verify(FILE_HASH, ROOT, LEAVES[0], path, ["up"] * len(path))


def test_bad_sibling_hex_is_malformed(verifier):
    path, directions = proof_for(0)

    with pytest.raises(MalformedProofError):
        verifier.verify(FILE_HASH, ROOT, LEAVES[0], ["zz"] + path[1:], directions)


def test_unknown_file(verifier):
    path, directions = proof_for(0)

    with pytest.raises(FileNotFoundError):
        verifier.verify(hash_bytes(b"nope"), ROOT, LEAVES[0], path, directions)


def test_flipped_direction_rejected(verifier):
    path, directions = proof_for(0)
    flipped = [Direction.LEFT if d is Direction.RIGHT else Direction.RIGHT for d in directions]

    with pytest.raises(RootMismatchError):
        verifier.verify(FILE_HASH, ROOT, LEAVES[0], path, flipped)


def test_threshold_requires_admin_and_positive(verifier):
    with pytest.raises(NotAdminError):
        verifier.set_verification_threshold("alice-id", 1)
    with pytest.raises(InvalidParameterError):
        verifier.set_verification_threshold(ADMIN, 0)


def test_verified_follows_current_threshold(verifier):
    submit(verifier)
    assert verifier.is_verified(FILE_HASH) is False

    verifier.set_verification_threshold(ADMIN, 1)

    assert verifier.is_verified(FILE_HASH) is True

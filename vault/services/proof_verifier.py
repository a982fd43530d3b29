"""Proof verifier: Merkle inclusion proofs and per-file verification thresholds."""

import sqlite3
from typing import Optional, Sequence, Union

from common.logging_config import get_logger
from common.merkle import fold_proof
from common.types import Direction, ProofStep
from vault.exceptions import (
    FileNotFoundError,
    InvalidParameterError,
    MalformedProofError,
    RootMismatchError,
)
from vault.repositories.file_repository import FileRepository
from vault.repositories.state_repository import StateRepository
from vault.services.base import Registry, require_int
from vault.types import VerificationOutcome
from vault.utils import normalize_hash, utc_now

logger = get_logger(__name__)


def _parse_direction(value: Union[Direction, str]) -> Direction:
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        try:
            return Direction(value.strip().lower())
        except ValueError:
            pass
    raise MalformedProofError(f"Unknown proof direction: {value!r}")


def _proof_hash(value: str, field_name: str) -> str:
    try:
        return normalize_hash(value, field_name)
    except InvalidParameterError as e:
        raise MalformedProofError(str(e)) from e


class ProofVerifier(Registry):
    def __init__(self, admin: str, db_path: Optional[str] = None):
        super().__init__(admin, db_path)
        self.file_repo = FileRepository()
        self.state_repo = StateRepository()

    def verify(
        self,
        file_hash: str,
        claimed_root: str,
        leaf_hash: str,
        proof_path: Sequence[str],
        directions: Sequence[Union[Direction, str]],
        conn: Optional[sqlite3.Connection] = None,
    ) -> VerificationOutcome:
        """
        Check an inclusion proof against the file's stored Merkle root.

        The leaf is folded with each sibling in order; the matching direction
        says which side the sibling sits on. The candidate root must equal
        both claimed_root and the stored root.

        Raises:
            FileNotFoundError: no record for file_hash
            MalformedProofError: proof_path and directions differ in length,
                or a hash or direction cannot be parsed
            RootMismatchError: the recomputed root does not match
        """
        file_hash = normalize_hash(file_hash, "file_hash")

        with self._unit_of_work(conn) as conn:
            record = self.file_repo.get_by_hash(file_hash, conn)
            if record is None:
                raise FileNotFoundError(f"File {file_hash} not found")

            if len(proof_path) != len(directions):
                raise MalformedProofError(
                    f"Proof has {len(proof_path)} siblings but {len(directions)} directions"
                )

            leaf = _proof_hash(leaf_hash, "leaf_hash")
            claimed = _proof_hash(claimed_root, "claimed_root")
            steps = [
                ProofStep(sibling=_proof_hash(sibling, "proof sibling"), direction=_parse_direction(direction))
                for sibling, direction in zip(proof_path, directions)
            ]

            candidate = fold_proof(leaf, steps)
            if candidate != claimed or candidate != record.merkle_root:
                logger.warning(
                    f"Proof rejected [file_hash={file_hash}] candidate={candidate} "
                    f"claimed={claimed} stored={record.merkle_root}"
                )
                raise RootMismatchError(f"Proof does not reproduce the root of {file_hash}")

            count = self.file_repo.increment_verified_count(file_hash, conn)
            threshold = self.state_repo.get_settings(conn).verification_threshold
            verified = count >= threshold
            newly_verified = verified and record.first_verified_at is None
            if newly_verified:
                self.file_repo.mark_first_verified(file_hash, utc_now(), conn)

        logger.info(
            f"Proof accepted [file_hash={file_hash}] count={count}/{threshold}"
            + (" (verified)" if newly_verified else "")
        )
        return VerificationOutcome(
            file_hash=file_hash,
            verified_proof_count=count,
            threshold=threshold,
            verified=verified,
            newly_verified=newly_verified,
        )

    def set_verification_threshold(self, caller: str, threshold: int, conn: Optional[sqlite3.Connection] = None) -> None:
        self._require_admin(caller, "set the verification threshold")
        require_int(threshold, "verification_threshold", minimum=1)
        with self._unit_of_work(conn) as conn:
            self.state_repo.update_setting("verification_threshold", threshold, conn)
        logger.info(f"Verification threshold set to {threshold}")

    def is_verified(self, file_hash: str, conn: Optional[sqlite3.Connection] = None) -> bool:
        file_hash = normalize_hash(file_hash, "file_hash")
        with self._unit_of_work(conn) as conn:
            record = self.file_repo.get_by_hash(file_hash, conn)
            if record is None:
                raise FileNotFoundError(f"File {file_hash} not found")
            threshold = self.state_repo.get_settings(conn).verification_threshold
        return record.is_verified(threshold)

"""
Merkle tree helpers over sha256 digests.

Leaves are hex digests. A parent is sha256(left || right) over the raw
digest bytes; a level with an odd node count pairs its last node with
itself. Proofs are lists of ProofStep where the direction names the side
the sibling sits on.
"""

import hashlib
from typing import BinaryIO, Iterator, List, Sequence

from common.constants import PROOF_CHUNK_SIZE_BYTES
from common.types import Direction, ProofStep


def hash_bytes(data: bytes) -> str:
    """Return the sha256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def hash_pair(left: bytes, right: bytes) -> bytes:
    """Parent digest of two child digests."""
    return hashlib.sha256(left + right).digest()


def fold_proof(leaf_hash: str, steps: Sequence[ProofStep]) -> str:
    """
    Climb from a leaf to a candidate root.

    Args:
        leaf_hash: Hex digest of the leaf
        steps: Sibling hashes with their side, ordered leaf to root

    Returns:
        Candidate root as lower-case hex

    Raises:
        ValueError: If a hash is not valid hex or a direction is unknown
    """
    current = bytes.fromhex(leaf_hash)
    for step in steps:
        sibling = bytes.fromhex(step.sibling)
        direction = Direction(step.direction)
        if direction is Direction.LEFT:
            current = hash_pair(sibling, current)
        else:
            current = hash_pair(current, sibling)
    return current.hex()


def compute_merkle_root(leaf_hashes: List[str]) -> str:
    """
    Compute the root of a tree built over hex leaf digests.

    An empty tree has an all-zero root.
    """
    if not leaf_hashes:
        return "0" * 64

    current_level = [bytes.fromhex(leaf) for leaf in leaf_hashes]

    while len(current_level) > 1:
        next_level = []
        for i in range(0, len(current_level), 2):
            left = current_level[i]
            right = current_level[i + 1] if i + 1 < len(current_level) else left
            next_level.append(hash_pair(left, right))
        current_level = next_level

    return current_level[0].hex()


def compute_merkle_proof(leaf_hashes: List[str], target_index: int) -> List[ProofStep]:
    """
    Build the inclusion proof for the leaf at target_index.

    Raises:
        IndexError: If target_index is out of bounds
    """
    if target_index < 0 or target_index >= len(leaf_hashes):
        raise IndexError(f"Leaf index {target_index} out of range for {len(leaf_hashes)} leaves")

    proof: List[ProofStep] = []
    current_level = [bytes.fromhex(leaf) for leaf in leaf_hashes]
    current_index = target_index

    while len(current_level) > 1:
        next_level = []
        for i in range(0, len(current_level), 2):
            left = current_level[i]
            right = current_level[i + 1] if i + 1 < len(current_level) else left

            if i == current_index:
                proof.append(ProofStep(sibling=right.hex(), direction=Direction.RIGHT))
            elif i + 1 == current_index:
                proof.append(ProofStep(sibling=left.hex(), direction=Direction.LEFT))

            next_level.append(hash_pair(left, right))

        current_index //= 2
        current_level = next_level

    return proof


def verify_merkle_proof(leaf_hash: str, steps: Sequence[ProofStep], root: str) -> bool:
    """True if folding the proof from leaf_hash reproduces root."""
    try:
        return fold_proof(leaf_hash, steps) == root.lower()
    except ValueError:
        return False


def iter_chunk_hashes(stream: BinaryIO, chunk_size: int = PROOF_CHUNK_SIZE_BYTES) -> Iterator[str]:
    """Yield the leaf digest of each fixed-size chunk read from stream."""
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield hash_bytes(chunk)

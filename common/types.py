"""Shared data type definitions (Direction, ProofStep)."""

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    """
    Side on which a sibling hash sits relative to the running hash.
    """
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class ProofStep:
    """
    One level of a Merkle inclusion proof.
    """
    sibling: str
    direction: Direction

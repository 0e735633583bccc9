"""
Identifier allocators for new articles.

Two strategies are available:
- IdGenerator hands out the smallest positive integer not already in use.
- RandomIdGenerator hands out random UUID4 strings without bookkeeping.
"""
import uuid
from typing import Iterable, Optional, Set

from website.errors import IdSpaceExhaustedError

# Identifiers must fit in an unsigned 64-bit integer.
MAX_SEQUENTIAL_ID = 2 ** 64 - 1


class IdGenerator:
    """Sequential allocator that never hands out the same integer twice."""

    def __init__(self, used_ids: Optional[Iterable[int]] = None):
        """
        Initialize the allocator.

        Args:
            used_ids: Identifiers already taken (default: none)
        """
        self.used_ids: Set[int] = set(used_ids or ())
        self.counter = 1

    @classmethod
    def with_used_ids(cls, used_ids: Iterable[int]) -> "IdGenerator":
        """Create an allocator seeded with identifiers already in use."""
        return cls(used_ids)

    def generate_unique_id(self) -> int:
        """
        Return the next free identifier and record it as used.

        Returns:
            Smallest integer >= the cursor that is not in the used set

        Raises:
            IdSpaceExhaustedError: If no 64-bit identifier is left
        """
        while self.counter in self.used_ids:
            self.counter += 1
        if self.counter > MAX_SEQUENTIAL_ID:
            raise IdSpaceExhaustedError("No 64-bit article identifier left to allocate")
        self.used_ids.add(self.counter)
        return self.counter


class RandomIdGenerator:
    """
    Allocator drawing random UUID4 identifiers.

    No collision check is made against existing keys: with 122 random bits a
    collision is negligible at the record counts a personal site sees, but it
    is not formally ruled out.
    """

    def generate_unique_id(self) -> str:
        """Return a new random identifier."""
        return str(uuid.uuid4())


def create_id_generator(strategy: str, used_ids: Iterable = ()):
    """
    Create an allocator for the given strategy.

    Args:
        strategy: 'sequential' or 'random'
        used_ids: Identifiers already in the store (ignored for 'random')

    Returns:
        IdGenerator or RandomIdGenerator

    Raises:
        ValueError: If the strategy is unknown
    """
    strategy = strategy.lower()
    if strategy == "sequential":
        return IdGenerator.with_used_ids(used_ids)
    if strategy == "random":
        return RandomIdGenerator()
    raise ValueError(f"Unknown ID strategy: {strategy}")

#!/usr/bin/env python3
"""
Entropy Module
==============
Random source shared by every sampling step in lexiforge.

Unseeded sources draw from ``secrets.SystemRandom()``; seeded sources use a
Mersenne Twister so tests and reproducible runs get the same words every time.
Determinism is a property of the source, never of the generator: seed the
process-wide source with ``seed_global()`` or inject a ``RandomSource(seed)``.
"""

import random
import secrets
from typing import Any, List, Optional, Sequence, Tuple


# =============================================================================
# Random Source
# =============================================================================

class RandomSource:
    """
    Random number source with weighted selection.

    Args:
        seed: Optional seed. ``None`` means non-reproducible system entropy.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        if seed is None:
            self._rng = secrets.SystemRandom()
        else:
            self._rng = random.Random(seed)

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        """Return random integer N such that a <= N <= b."""
        return self._rng.randint(a, b)

    def choice(self, seq: Sequence) -> Any:
        """Return a random element from non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from empty sequence")
        return self._rng.choice(seq)

    def shuffle(self, seq: list) -> None:
        """Shuffle list in place."""
        self._rng.shuffle(seq)

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        if probability <= 0.0:
            return False
        if probability >= 1.0:
            return True
        return self._rng.random() < probability

    def weighted_choice(self, items: List[Tuple[Any, float]]) -> Any:
        """
        Choose from items with weights (cumulative-weight draw).

        Args:
            items: List of (item, weight) tuples. Zero weights are never chosen.

        Returns:
            Randomly selected item based on weights
        """
        if not items:
            raise IndexError("Cannot choose from empty sequence")

        total = sum(w for _, w in items if w > 0)
        if total <= 0:
            raise ValueError("weighted_choice needs at least one positive weight")

        r = self.random() * total

        cumulative = 0.0
        for item, weight in items:
            if weight <= 0:
                continue
            cumulative += weight
            if r < cumulative:
                return item

        # Float rounding can leave r == total
        for item, weight in reversed(items):
            if weight > 0:
                return item


# Global instance
_global_rng = RandomSource()


def get_rng() -> RandomSource:
    """Get the process-wide random source."""
    return _global_rng


def seed_global(seed: Optional[int]) -> RandomSource:
    """Replace the process-wide source with a freshly seeded one."""
    global _global_rng
    _global_rng = RandomSource(seed)
    return _global_rng


__all__ = [
    "RandomSource",
    "get_rng",
    "seed_global",
]

from __future__ import annotations
from typing import Optional, Sequence

import numpy as np

from .cache_line import CacheLine
from .errors import EmptyCandidateSetError
from .types import ReplacementPolicy

POLICY_DESCRIPTIONS = {
    ReplacementPolicy.FIFO: "FIFO (First In First Out): Replaces the oldest block in the cache",
    ReplacementPolicy.LRU: "LRU (Least Recently Used): Replaces the block that hasn't been used for the longest time",
    ReplacementPolicy.RANDOM: "Random: Randomly selects a block to replace",
}


class ReplacementSelector:
    """Chooses which line of a full set to evict."""

    def __init__(self, policy: ReplacementPolicy | str, seed: Optional[int] = None):
        self.policy = ReplacementPolicy(policy)
        self.rng = np.random.default_rng(seed)

        self._select_policies = {
            ReplacementPolicy.FIFO: self._select_fifo,
            ReplacementPolicy.LRU: self._select_lru,
            ReplacementPolicy.RANDOM: self._select_random,
        }
        self._select_func = self._select_policies[self.policy]

    def select_victim(self, candidates: Sequence[CacheLine]) -> CacheLine:
        if not candidates:
            raise EmptyCandidateSetError("Lines array cannot be empty")
        return self._select_func(candidates)

    def _select_fifo(self, candidates: Sequence[CacheLine]) -> CacheLine:
        # min() keeps the first of equal keys, so ties go to the lowest way
        return min(candidates, key=lambda line: line.insertion_time)

    def _select_lru(self, candidates: Sequence[CacheLine]) -> CacheLine:
        return min(candidates, key=lambda line: line.last_access_time)

    def _select_random(self, candidates: Sequence[CacheLine]) -> CacheLine:
        return candidates[int(self.rng.integers(len(candidates)))]

    def describe(self) -> str:
        return POLICY_DESCRIPTIONS[self.policy]

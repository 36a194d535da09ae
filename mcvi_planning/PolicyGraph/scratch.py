"""Reusable per-solve buffer for Monte Carlo backups."""

from contextlib import contextmanager
from typing import Dict, Hashable, List, Optional

import numpy as np


class Scratch:
    """Observation buckets shared by every belief backup of one solve.

    Holds at most `num_obs` distinct observations per backed-up action.
    The buffer is not reentrant: acquire() raises if another backup is still
    using it.
    """

    def __init__(self, num_obs: int):
        if num_obs <= 0:
            raise ValueError(f"num_obs must be positive, got {num_obs}")
        self.num_obs = num_obs
        self.observations: List[Hashable] = []
        self.counts = np.zeros(num_obs, dtype=int)
        self.values = np.zeros(num_obs)
        self.buckets: List[List[Hashable]] = [[] for _ in range(num_obs)]
        self._slots: Dict[Hashable, int] = {}
        self._in_use = False

    @property
    def in_use(self) -> bool:
        return self._in_use

    @contextmanager
    def acquire(self):
        if self._in_use:
            raise RuntimeError("Scratch buffer is already held by another backup")
        self._in_use = True
        try:
            yield self
        finally:
            self._in_use = False

    def reset(self):
        """Empty all slots without reallocating."""
        self.observations.clear()
        self._slots.clear()
        self.counts[:] = 0
        self.values[:] = 0.0
        for bucket in self.buckets:
            bucket.clear()

    def slot(self, obs: Hashable) -> Optional[int]:
        """Slot index for `obs`, allocating one if free. None when full."""
        i = self._slots.get(obs)
        if i is None:
            if len(self.observations) >= self.num_obs:
                return None
            i = len(self.observations)
            self.observations.append(obs)
            self._slots[obs] = i
        return i

"""
Strong RNG for fixture generation.
Backed by the OS entropy source; not seedable, so generated schedules are not replayable.
"""
from __future__ import annotations

import random


class RandomSourceError(RuntimeError):
    """The OS entropy source is unavailable. Fatal at startup."""


class SecureRNG:
    """Wrapper around random.SystemRandom. Construct once per process and inject."""

    def __init__(self) -> None:
        self._rng = random.SystemRandom()
        try:
            # SystemRandom only touches os.urandom on first draw; probe now so a missing source fails here.
            self._rng.getrandbits(8)
        except (NotImplementedError, OSError) as e:
            raise RandomSourceError(f"Strong random source unavailable: {e}") from e

    def randrange(self, stop: int) -> int:
        """Uniform int in [0, stop)."""
        return self._rng.randrange(stop)

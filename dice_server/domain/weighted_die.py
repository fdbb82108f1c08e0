"""Weighted six-sided die.

Each face i gets a weight from its roll count; the more a face has been
rolled, the smaller its weight. Rolls are drawn proportionally to weight, so
short-term imbalance is corrected while every roll stays random.

Not thread-safe: one instance per die, owned by whoever rolls it.
"""

from typing import Optional, Protocol, Sequence

import numpy as np

FACE_COUNT = 6
DEFAULT_ALPHA = 0.3

# Index selected when floating point accumulation never exceeds the draw.
FALLBACK_FACE = FACE_COUNT - 1


class RandomSource(Protocol):
    def random(self) -> float: ...


class WeightPolicy:
    """Base policy: override .weights to turn roll counts into weights."""

    name = "base"

    def weights(self, counts: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def weight(self, count: int) -> float:
        """Weight of a face rolled count times, next to a face never rolled."""
        return float(self.weights(np.array([count, 0], dtype=np.float64))[0])


class ExponentialDecay(WeightPolicy):
    """w_i = exp(-alpha * (count_i - min(counts))). Higher alpha corrects more aggressively.

    Counts are taken relative to the least-rolled face so the weights never
    underflow to zero; the normalised probabilities equal exp(-alpha * count_i)
    normalised.
    """

    name = "exponential"

    def __init__(self, alpha: float = DEFAULT_ALPHA):
        alpha = float(alpha)
        if not np.isfinite(alpha):
            raise ValueError(f"alpha must be finite, got {alpha}")
        self.alpha = alpha

    def weights(self, counts: np.ndarray) -> np.ndarray:
        return np.exp(-self.alpha * (counts - counts.min()))

    def __eq__(self, other) -> bool:
        return isinstance(other, ExponentialDecay) and other.alpha == self.alpha

    def __repr__(self) -> str:
        return f"ExponentialDecay(alpha={self.alpha})"


class InverseCount(WeightPolicy):
    """w_i = 1 / (1 + count_i)."""

    name = "inverse"

    def weights(self, counts: np.ndarray) -> np.ndarray:
        return 1.0 / (1.0 + counts)

    def __eq__(self, other) -> bool:
        return isinstance(other, InverseCount)

    def __repr__(self) -> str:
        return "InverseCount()"


def build_policy(name: str, alpha: Optional[float] = None) -> WeightPolicy:
    """Return the policy registered under name ("exponential" or "inverse")."""
    if name == ExponentialDecay.name:
        return ExponentialDecay(DEFAULT_ALPHA if alpha is None else alpha)
    if name == InverseCount.name:
        return InverseCount()
    raise ValueError(f"Unsupported weight policy: {name}")


def select_face(weights: np.ndarray, r: float) -> int:
    """Return the index of the first face whose running weight sum exceeds r.

    Args:
        weights (np.ndarray): Per-face weights, in face order
        r (float): Draw in [0, total weight)

    Returns:
        int: Face index (0-based). FALLBACK_FACE if no running sum exceeds r.
    """
    cumulative = np.cumsum(weights)
    above = np.flatnonzero(cumulative > r)
    if above.size == 0:
        return FALLBACK_FACE
    return int(above[0])


class WeightedDie:
    def __init__(
        self,
        policy: WeightPolicy,
        rng: Optional[RandomSource] = None,
        counts: Optional[Sequence[int]] = None,
    ):
        if counts is None:
            counts = [0] * FACE_COUNT
        if len(counts) != FACE_COUNT:
            raise ValueError(f"counts must have {FACE_COUNT} entries, got {len(counts)}")
        if any(int(c) != c for c in counts):
            raise ValueError(f"counts must be whole numbers, got {list(counts)}")
        if any(int(c) < 0 for c in counts):
            raise ValueError("counts must be non-negative")
        self.policy = policy
        self.rng = rng if rng is not None else np.random.default_rng()
        self._counts = [int(c) for c in counts]

    @classmethod
    def new_exponential(cls, alpha: float = DEFAULT_ALPHA, rng: Optional[RandomSource] = None) -> "WeightedDie":
        """alpha ~0.3 smooths the distribution without making it deterministic.
        alpha <= 0 is accepted; alpha == 0 behaves like a fair die."""
        return cls(ExponentialDecay(alpha), rng=rng)

    @classmethod
    def new_inverse_count(cls, rng: Optional[RandomSource] = None) -> "WeightedDie":
        return cls(InverseCount(), rng=rng)

    @property
    def counts(self) -> tuple:
        return tuple(self._counts)

    @property
    def total_rolls(self) -> int:
        return sum(self._counts)

    def weights(self) -> np.ndarray:
        return self.policy.weights(np.array(self._counts, dtype=np.float64))

    def probabilities(self) -> np.ndarray:
        weights = self.weights()
        return weights / weights.sum()

    def roll(self) -> int:
        """Roll the die and record the result.

        Returns:
            int: Face value in [1, 6]
        """
        weights = self.weights()
        total = float(np.cumsum(weights)[-1])
        r = self.rng.random() * total
        face = select_face(weights, r)
        self._counts[face] += 1
        return face + 1

    def __repr__(self) -> str:
        return f"WeightedDie(policy={self.policy!r}, counts={self._counts})"

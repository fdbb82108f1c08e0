"""Turn roll rules that are independent from HTTP and the match registry.

Rule of thumb:
- OK: rolling the match dice, aggregating roll statistics.
- Not OK: locks, timestamps, logging configuration, FastAPI.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from dice_server.domain.weighted_die import FACE_COUNT, WeightedDie

# Two-dice sums are 2..12; bucket index is sum - 1.
SUM_BUCKET_COUNT = 2 * FACE_COUNT


@dataclass
class DieRollState:
    red_roll: int = 0
    white_roll: int = 0
    event_roll: int = 0  # 0 when the match has no event die
    is_init: bool = False

    @property
    def total(self) -> int:
        return self.red_roll + self.white_roll


@dataclass
class DiceStats:
    rolls: List[int] = field(default_factory=lambda: [0] * SUM_BUCKET_COUNT)
    event_rolls: List[int] = field(default_factory=lambda: [0] * FACE_COUNT)

    @property
    def total_rolls(self) -> int:
        return sum(self.rolls)


def initial_roll_state() -> DieRollState:
    """Placeholder state for a match that has not rolled yet."""
    return DieRollState(is_init=True)


def roll_turn(
    red: WeightedDie, white: WeightedDie, event: Optional[WeightedDie] = None
) -> DieRollState:
    """Roll red, white and (if present) event die, in that order."""
    red_roll = red.roll()
    white_roll = white.roll()
    event_roll = event.roll() if event is not None else 0
    return DieRollState(red_roll=red_roll, white_roll=white_roll, event_roll=event_roll)


def record_roll(stats: DiceStats, state: DieRollState) -> None:
    """Add a rolled state to the aggregate histogram.

    Initial placeholder states are ignored.
    """
    if state.is_init:
        return
    stats.rolls[state.total - 1] += 1
    if state.event_roll:
        stats.event_rolls[state.event_roll - 1] += 1

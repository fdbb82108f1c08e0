import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from uuid import UUID

import numpy as np

from dice_server.domain.dice_rules import (
    DiceStats,
    DieRollState,
    initial_roll_state,
    record_roll,
    roll_turn,
)
from dice_server.domain.weighted_die import RandomSource, WeightedDie, build_policy


@dataclass
class MatchDice:
    red: WeightedDie
    white: WeightedDie
    event: Optional[WeightedDie] = None
    stats: DiceStats = field(default_factory=DiceStats)
    last_roll: DieRollState = field(default_factory=initial_roll_state)
    last_used: datetime = field(default_factory=datetime.now)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class DiceManager:
    def __init__(self):
        self.match_dice: Dict[UUID, MatchDice] = {}  # dice per match_id
        self.lock = asyncio.Lock()  # guards match_dice

    async def create(
        self,
        match_id: UUID,
        policy_name: str,
        alpha: Optional[float] = None,
        use_event_die: bool = True,
        rng: Optional[RandomSource] = None,
    ) -> MatchDice:
        """Create fresh dice for the specified match_id. Existing dice are replaced,
        which resets their counts for a new game.

        Args:
            match_id (UUID): ID to identify this match
            policy_name (str): "exponential" or "inverse"
            alpha (float, optional): Decay rate of the exponential policy
            use_event_die (bool, optional): Roll a third (event) die each turn. Defaults to True.
            rng (RandomSource, optional): Random source shared by the match dice

        Returns:
            MatchDice: The dice owned by the match
        """
        rng = rng if rng is not None else np.random.default_rng()
        policy = build_policy(policy_name, alpha)
        event = WeightedDie(policy, rng=rng) if use_event_die else None
        match_dice = MatchDice(
            red=WeightedDie(policy, rng=rng),
            white=WeightedDie(policy, rng=rng),
            event=event,
        )
        async with self.lock:
            if match_id in self.match_dice:
                logging.info(f"Replacing dice for match_id: {match_id}")
            self.match_dice[match_id] = match_dice
        return match_dice

    async def restore(
        self,
        match_id: UUID,
        red: WeightedDie,
        white: WeightedDie,
        event: Optional[WeightedDie] = None,
        stats: Optional[DiceStats] = None,
    ) -> MatchDice:
        """Register previously exported dice for the specified match_id, replacing any existing dice.

        Args:
            match_id (UUID): ID to identify this match
            red (WeightedDie): Restored red die
            white (WeightedDie): Restored white die
            event (WeightedDie, optional): Restored event die
            stats (DiceStats, optional): Restored roll statistics. Defaults to empty stats.

        Returns:
            MatchDice: The dice owned by the match
        """
        match_dice = MatchDice(
            red=red,
            white=white,
            event=event,
            stats=stats if stats is not None else DiceStats(),
        )
        async with self.lock:
            self.match_dice[match_id] = match_dice
        logging.info(f"Restored dice for match_id: {match_id}")
        return match_dice

    async def get(self, match_id: UUID) -> MatchDice:
        """Get the dice of the specified match_id

        Raises:
            KeyError: No dice were created for the match
        """
        async with self.lock:
            return self.match_dice[match_id]

    async def discard(self, match_id: UUID) -> bool:
        """Delete the dice of the specified match_id

        Returns:
            bool: True if dice existed for the match
        """
        async with self.lock:
            return self.match_dice.pop(match_id, None) is not None

    async def roll(self, match_id: UUID) -> DieRollState:
        """Roll the dice of the specified match_id and record the result.

        Rolls of one match are serialised by the match lock.

        Raises:
            KeyError: No dice were created for the match
        """
        match_dice = await self.get(match_id)
        async with match_dice.lock:
            state = roll_turn(match_dice.red, match_dice.white, match_dice.event)
            record_roll(match_dice.stats, state)
            match_dice.last_roll = state
            match_dice.last_used = datetime.now()
        logging.debug(f"match_id: {match_id}, roll: {state}")
        return state

    async def evict_expired(self, max_age: timedelta, now: Optional[datetime] = None) -> List[UUID]:
        """Delete dice that have not been used for longer than max_age

        Args:
            max_age (timedelta): Idle time after which match dice are dropped
            now (datetime, optional): Reference time. Defaults to datetime.now().

        Returns:
            List[UUID]: The match_ids whose dice were dropped
        """
        now = now if now is not None else datetime.now()
        async with self.lock:
            expired = [
                match_id
                for match_id, match_dice in self.match_dice.items()
                if now - match_dice.last_used > max_age
            ]
            for match_id in expired:
                del self.match_dice[match_id]
        if expired:
            logging.info(f"Evicted dice of {len(expired)} expired matches")
        return expired

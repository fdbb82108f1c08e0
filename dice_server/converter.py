from typing import Optional
from uuid import UUID

from dice_server.domain.dice_rules import DiceStats, DieRollState
from dice_server.domain.weighted_die import (
    ExponentialDecay,
    RandomSource,
    WeightedDie,
    build_policy,
)
from dice_server.models.dc_models import (
    DiceStatsModel,
    DieRollStateModel,
    MatchDiceModel,
    WeightedDieModel,
    WeightPolicyNameModel,
)


class DataConverter:
    """This class is used to convert data between domain objects and transmission models."""

    def convert_weighteddie_to_weighteddiemodel(self, die: WeightedDie) -> WeightedDieModel:
        """Convert a WeightedDie to a read-only snapshot

        Args:
            die (WeightedDie): The die owned by a match

        Returns:
            WeightedDieModel: Policy name, alpha (exponential only) and face counts
        """
        alpha = die.policy.alpha if isinstance(die.policy, ExponentialDecay) else None
        return WeightedDieModel(
            policy=WeightPolicyNameModel(die.policy.name),
            alpha=alpha,
            counts=list(die.counts),
        )

    def convert_weighteddiemodel_to_weighteddie(
        self, die_model: WeightedDieModel, rng: Optional[RandomSource] = None
    ) -> WeightedDie:
        """Restore a WeightedDie from a snapshot

        Args:
            die_model (WeightedDieModel): Snapshot produced by convert_weighteddie_to_weighteddiemodel
            rng (RandomSource, optional): Random source for the restored die. Defaults to a fresh numpy generator.

        Returns:
            WeightedDie: Die with the same policy and counts
        """
        policy = build_policy(die_model.policy.value, die_model.alpha)
        return WeightedDie(policy, rng=rng, counts=die_model.counts)

    def convert_dicestats_to_dicestatsmodel(self, stats: DiceStats) -> DiceStatsModel:
        return DiceStatsModel(rolls=list(stats.rolls), event_rolls=list(stats.event_rolls))

    def convert_dicestatsmodel_to_dicestats(self, stats_model: DiceStatsModel) -> DiceStats:
        return DiceStats(rolls=list(stats_model.rolls), event_rolls=list(stats_model.event_rolls))

    def convert_rollstate_to_rollstatemodel(self, state: DieRollState) -> DieRollStateModel:
        return DieRollStateModel.model_validate(state)

    def convert_matchdice_to_matchdicemodel(self, match_id: UUID, match_dice) -> MatchDiceModel:
        """Convert the dice of one match to the model sent to the client

        Args:
            match_id (UUID): ID to identify this match
            match_dice (MatchDice): Dice, stats and last roll owned by the match

        Returns:
            MatchDiceModel: Snapshot of every die and the aggregate stats
        """
        event = None
        if match_dice.event is not None:
            event = self.convert_weighteddie_to_weighteddiemodel(match_dice.event)
        return MatchDiceModel(
            match_id=match_id,
            red=self.convert_weighteddie_to_weighteddiemodel(match_dice.red),
            white=self.convert_weighteddie_to_weighteddiemodel(match_dice.white),
            event=event,
            stats=self.convert_dicestats_to_dicestatsmodel(match_dice.stats),
            last_roll=self.convert_rollstate_to_rollstatemodel(match_dice.last_roll),
        )

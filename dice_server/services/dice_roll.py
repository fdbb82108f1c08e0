from typing import Optional
from uuid import UUID

from dice_server.domain.weighted_die import RandomSource
from dice_server.load_config import dice_alpha, dice_policy, use_event_die
from dice_server.manager import DiceManager, MatchDice
from dice_server.models.dc_models import DiceConfigModel


async def create_match_dice(
    *,
    match_id: UUID,
    config: DiceConfigModel,
    dice_manager: DiceManager,
    rng: Optional[RandomSource] = None,
) -> MatchDice:
    """Create the dice of one match, filling unset config fields from the environment.

    This is intentionally kept outside the HTTP router module.
    """
    policy_name = config.policy.value if config.policy is not None else dice_policy
    alpha = config.alpha if config.alpha is not None else dice_alpha
    event_die = config.use_event_die if config.use_event_die is not None else use_event_die
    return await dice_manager.create(
        match_id,
        policy_name,
        alpha=alpha,
        use_event_die=event_die,
        rng=rng,
    )

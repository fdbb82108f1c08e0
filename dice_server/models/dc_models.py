from pydantic import BaseModel, Field
from enum import Enum
from uuid import UUID
from typing import Annotated, Optional, List

FaceCount = Annotated[int, Field(ge=0)]


class WeightPolicyNameModel(str, Enum):
    exponential = "exponential"  # w_i = exp(-alpha * count_i)
    inverse = "inverse"  # w_i = 1 / (1 + count_i)


class DiceConfigModel(BaseModel):
    """Unset fields fall back to the server configuration."""

    policy: Optional[WeightPolicyNameModel] = None
    alpha: Optional[float] = Field(None, allow_inf_nan=False)
    use_event_die: Optional[bool] = None


class WeightedDieModel(BaseModel):
    policy: WeightPolicyNameModel
    alpha: Optional[float] = Field(None, allow_inf_nan=False)  # only used by the exponential policy
    counts: List[FaceCount] = Field(min_length=6, max_length=6)


class DieRollStateModel(BaseModel):
    red_roll: int
    white_roll: int
    event_roll: int
    is_init: bool = False

    class Config:
        from_attributes = True


class DiceStatsModel(BaseModel):
    rolls: List[FaceCount] = Field(min_length=12, max_length=12)
    event_rolls: List[FaceCount] = Field(min_length=6, max_length=6)

    class Config:
        from_attributes = True


class MatchDiceModel(BaseModel):
    match_id: UUID
    red: WeightedDieModel
    white: WeightedDieModel
    event: Optional[WeightedDieModel] = None
    stats: DiceStatsModel
    last_roll: DieRollStateModel


class MatchDiceRestoreModel(BaseModel):
    """Previously exported dice of a match, e.g. after a server restart."""

    red: WeightedDieModel
    white: WeightedDieModel
    event: Optional[WeightedDieModel] = None
    stats: Optional[DiceStatsModel] = None

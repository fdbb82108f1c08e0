import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Response, status

from dice_server.converter import DataConverter
from dice_server.manager import DiceManager
from dice_server.models.dc_models import (
    DiceConfigModel,
    DiceStatsModel,
    DieRollStateModel,
    MatchDiceModel,
    MatchDiceRestoreModel,
)
from dice_server.services.dice_roll import create_match_dice

dice_router = APIRouter()
dice_manager = DiceManager()
data_converter = DataConverter()


async def get_match_dice_or_404(match_id: UUID):
    try:
        return await dice_manager.get(match_id)
    except KeyError:
        logging.error(f"Dice not found for match_id: {match_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dice not found for this match",
        )


class DiceAPI:
    @staticmethod
    @dice_router.post("/dice/{match_id}", response_model=MatchDiceModel)
    async def create_dice(match_id: UUID, config: Optional[DiceConfigModel] = None):
        try:
            match_dice = await create_match_dice(
                match_id=match_id,
                config=config or DiceConfigModel(),
                dice_manager=dice_manager,
            )
        except ValueError as e:
            logging.error(f"Error in creating dice: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        logging.info(f"Created dice for match_id: {match_id}")
        return data_converter.convert_matchdice_to_matchdicemodel(match_id, match_dice)

    @staticmethod
    @dice_router.put("/dice/{match_id}", response_model=MatchDiceModel)
    async def restore_dice(match_id: UUID, snapshot: MatchDiceRestoreModel):
        try:
            red = data_converter.convert_weighteddiemodel_to_weighteddie(snapshot.red)
            white = data_converter.convert_weighteddiemodel_to_weighteddie(snapshot.white)
            event = None
            if snapshot.event is not None:
                event = data_converter.convert_weighteddiemodel_to_weighteddie(snapshot.event)
        except ValueError as e:
            logging.error(f"Error in restoring dice: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        stats = None
        if snapshot.stats is not None:
            stats = data_converter.convert_dicestatsmodel_to_dicestats(snapshot.stats)
        match_dice = await dice_manager.restore(match_id, red, white, event=event, stats=stats)
        return data_converter.convert_matchdice_to_matchdicemodel(match_id, match_dice)

    @staticmethod
    @dice_router.get("/dice/{match_id}", response_model=MatchDiceModel)
    async def get_dice(match_id: UUID):
        match_dice = await get_match_dice_or_404(match_id)
        return data_converter.convert_matchdice_to_matchdicemodel(match_id, match_dice)

    @staticmethod
    @dice_router.delete("/dice/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_dice(match_id: UUID):
        if not await dice_manager.discard(match_id):
            logging.error(f"Dice not found for match_id: {match_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Dice not found for this match",
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)


class RollAPI:
    @staticmethod
    @dice_router.post("/dice/{match_id}/roll", response_model=DieRollStateModel)
    async def roll_dice(match_id: UUID):
        try:
            state = await dice_manager.roll(match_id)
        except KeyError:
            logging.error(f"Dice not found for match_id: {match_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Dice not found for this match",
            )
        response = data_converter.convert_rollstate_to_rollstatemodel(state)
        logging.info(f"response: {response}")
        return response

    @staticmethod
    @dice_router.get("/dice/{match_id}/stats", response_model=DiceStatsModel)
    async def get_stats(match_id: UUID):
        match_dice = await get_match_dice_or_404(match_id)
        return data_converter.convert_dicestats_to_dicestatsmodel(match_dice.stats)

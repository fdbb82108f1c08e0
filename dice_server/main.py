from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging
from datetime import timedelta
from fastapi import FastAPI
from contextlib import asynccontextmanager

from dice_server.load_config import dice_expire_hours, log_level
from dice_server.routers import dice
from dice_server.routers.dice import dice_manager

scheduler = AsyncIOScheduler()
logging.basicConfig(level=log_level)


async def evict_expired_dice():
    await dice_manager.evict_expired(timedelta(hours=dice_expire_hours))


@asynccontextmanager
async def lifespan(app):
    """Start the job that drops dice of idle matches.
    This function is called to start the server.
    """
    scheduler.add_job(
        evict_expired_dice,
        "interval",
        hours=1,
    )
    scheduler.start()
    try:
        yield
    finally:
        scheduler.shutdown()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.include_router(dice.dice_router)

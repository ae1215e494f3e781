import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import certifi
from fastapi import FastAPI
from mongoengine import connect, disconnect

from tour_booking.utils.config import settings


logger = logging.getLogger(__name__)


def init_mongo() -> None:
    kwargs = {"tz_aware": True}
    if settings.mongo_uri.startswith("mongodb+srv://"):
        # Atlas clusters require TLS; use certifi's CA bundle
        kwargs["tlsCAFile"] = certifi.where()
    connect(host=settings.mongo_uri, alias="default", **kwargs)
    logger.info("Database connected")


def close_mongo() -> None:
    disconnect(alias="default")
    logger.info("Database connection closed")


@asynccontextmanager
async def mongo_lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_mongo()
    try:
        yield
    finally:
        close_mongo()

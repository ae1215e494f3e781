import logging
import time
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request

from tour_booking.connections import mongo_lifespan
from tour_booking.api.errors import register_exception_handlers
from tour_booking.api.tour import router as tour_router
from tour_booking.api.user import router as user_router
from tour_booking.utils.config import settings
from tour_booking.utils.errors import AppError
from tour_booking.utils.logging_config import configure_logging, get_logging_config


configure_logging(settings.log_level)
logger = logging.getLogger("tour_booking.main")

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def welcome() -> dict:
    return {
        "status": "success",
        "data": {
            "message": "Welcome to the Tour Booking API",
            "description": "A robust API for booking and managing nature tours.",
            "version": "1.0.0",
            "endpoints": {
                "tours": {
                    "all_tours": "/api/v1/tours",
                    "top_5_cheap": "/api/v1/tours/top-5-cheap",
                    "tour_stats": "/api/v1/tours/tour-stats",
                },
                "users": {
                    "login": "POST /api/v1/users/login",
                    "signup": "POST /api/v1/users/signup",
                },
            },
        },
    }


def not_found(request: Request, full_path: str) -> None:
    raise AppError(f"Can't find {request.url.path} on this server", 404)


def create_app(lifespan=mongo_lifespan) -> FastAPI:
    """Build the API. Tests pass their own lifespan (or None) and connection."""
    app = FastAPI(title="Tour Booking API", version="1.0.0", lifespan=lifespan)

    @app.middleware("http")
    async def request_time(request: Request, call_next):
        request.state.request_time = datetime.now(timezone.utc).isoformat()
        if settings.is_production:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s %d %.3f ms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    register_exception_handlers(app)

    app.add_api_route("/", welcome, methods=["GET"])
    app.include_router(tour_router, prefix="/api/v1/tours")
    app.include_router(user_router, prefix="/api/v1/users")
    app.add_api_route("/{full_path:path}", not_found, methods=ALL_METHODS, include_in_schema=False)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.debug and not settings.is_production,
        log_config=get_logging_config(settings.log_level),
    )

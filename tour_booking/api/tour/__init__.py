from datetime import datetime

from bson.objectid import ObjectId
from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from tour_booking.models.tour import Tour
from tour_booking.models.user import User
from tour_booking.services.auth import restrict_to
from tour_booking.services.query import QueryFeatures
from tour_booking.utils.base import Role
from tour_booking.utils.errors import AppError


router = APIRouter()

restrict_to_managers = restrict_to(Role.ADMIN.value, Role.LEAD_GUIDE.value)

TOP_CHEAP_PARAMS = {
    "limit": "5",
    "sort": "-ratings_average,price",
    "fields": "name,price,ratings_average,summary,difficulty",
}


class TourBody(BaseModel):
    name: str | None = None
    duration: int | None = None
    max_group_size: int | None = None
    difficulty: str | None = None
    ratings_average: float | None = None
    ratings_quantity: int | None = None
    price: float | None = None
    price_discount: float | None = None
    summary: str | None = None
    description: str | None = None
    image_cover: str | None = None
    images: list[str] | None = None
    start_dates: list[datetime] | None = None
    secret_tour: bool | None = None


def get_tour_or_404(tour_id: str) -> Tour:
    if not ObjectId.is_valid(tour_id):
        raise AppError(f"Invalid _id: {tour_id}.", 400)
    tour: Tour | None = Tour.objects(id=tour_id).first()
    if not tour:
        raise AppError("No tour found with that ID", 404)
    return tour


def _list_tours(params) -> dict:
    features = QueryFeatures(Tour.objects, params).apply()
    tours = [tour.to_output(fields=features.selected_fields) for tour in features.queryset]
    return {"status": "success", "results": len(tours), "data": {"tours": tours}}


@router.get("/top-5-cheap")
def top_five_cheap(request: Request) -> dict:
    """PUBLIC: Five best-rated, cheapest tours."""
    params = dict(request.query_params)
    params.update(TOP_CHEAP_PARAMS)
    return _list_tours(params)


@router.get("/tour-stats")
def tour_stats() -> dict:
    """PUBLIC: Per-difficulty statistics for well-rated tours."""
    pipeline = [
        {"$match": {"ratings_average": {"$gte": 4.5}}},
        {
            "$group": {
                "_id": "$difficulty",
                "num_tours": {"$sum": 1},
                "num_ratings": {"$sum": "$ratings_quantity"},
                "avg_rating": {"$avg": "$ratings_average"},
                "avg_price": {"$avg": "$price"},
                "min_price": {"$min": "$price"},
                "max_price": {"$max": "$price"},
            }
        },
        {"$sort": {"avg_price": 1}},
    ]
    stats = []
    for group in Tour.objects.aggregate(pipeline):
        difficulty = group.pop("_id")
        stats.append({"difficulty": difficulty, **group})
    return {"status": "success", "data": {"stats": stats}}


@router.get("")
def list_tours(request: Request) -> dict:
    """PUBLIC: List tours with filtering, sorting, projection and pagination."""
    return _list_tours(request.query_params)


@router.get("/{tour_id}")
def get_tour(tour_id: str) -> dict:
    """PUBLIC: Fetch one tour."""
    tour = get_tour_or_404(tour_id)
    return {"status": "success", "data": {"tour": tour.to_output()}}


@router.post("", status_code=201)
def create_tour(body: TourBody, current_user: User = Depends(restrict_to_managers)) -> dict:
    """PROTECTED (admin, lead-guide): Create a tour."""
    tour = Tour(**body.model_dump(exclude_none=True))
    tour.save()
    return {"status": "success", "data": {"tour": tour.to_output()}}


@router.patch("/{tour_id}")
def update_tour(tour_id: str, body: TourBody, current_user: User = Depends(restrict_to_managers)) -> dict:
    """PROTECTED (admin, lead-guide): Update a tour; model validators run again."""
    tour = get_tour_or_404(tour_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(tour, field, value)
    tour.save()
    return {"status": "success", "data": {"tour": tour.to_output()}}


@router.delete("/{tour_id}", status_code=204)
def delete_tour(tour_id: str, current_user: User = Depends(restrict_to_managers)) -> Response:
    """PROTECTED (admin, lead-guide): Delete a tour."""
    tour = get_tour_or_404(tour_id)
    tour.delete()
    return Response(status_code=204)

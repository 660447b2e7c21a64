"""Flights router: quality check and best-flight selection."""

from fastapi import APIRouter
from pydantic import BaseModel

from app.schemas.quote import FlightQuote
from app.services.flight_selector import pick_best
from app.services.package_generator import package_generator
from app.services.quality_filter import is_acceptable

router = APIRouter()


class BestFlightRequest(BaseModel):
    candidates: list[FlightQuote] = []


@router.post("/acceptable")
async def check_acceptable(flight: FlightQuote):
    return {"acceptable": is_acceptable(flight, package_generator.config)}


@router.post("/best")
async def best_flight(req: BestFlightRequest):
    best = pick_best(req.candidates, package_generator.config)
    return {"flight": best.model_dump(mode="json") if best else None}

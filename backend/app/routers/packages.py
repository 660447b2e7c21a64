"""Packages router: package generation, pricing and re-pricing."""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.data.featured_packages import featured_packages
from app.schemas.package import FeaturedPackage, Package, PackageQuery, PricedPackage
from app.schemas.quote import FlightQuote, LodgingQuote
from app.services.package_generator import package_generator
from app.services.price_calculator import compute_price, reprice_package

logger = logging.getLogger(__name__)

router = APIRouter()


class PriceRequest(BaseModel):
    flight: FlightQuote | None = None
    hotel: LodgingQuote | None = None
    transfers: float | None = None
    activities: float | None = None
    fees: float | None = None
    margin_pct: float | None = None


class RepriceRequest(BaseModel):
    package: Package
    hotel_index: int = Field(default=0, ge=0)


@router.post("/generate")
async def generate(query: PackageQuery):
    """Generate value / balanced / premium packages for a trip query.

    A return date on or before the departure date prices a single night.
    """
    result = await package_generator.generate(query)
    return result.to_dict()


@router.post("/price", response_model=PricedPackage, response_model_exclude_none=True)
async def price(req: PriceRequest):
    """Price an arbitrary flight + lodging pair."""
    return compute_price(
        req.flight,
        req.hotel,
        transfers=req.transfers,
        activities=req.activities,
        fees=req.fees,
        margin_pct=req.margin_pct,
        config=package_generator.config,
    )


@router.post("/reprice", response_model=PricedPackage, response_model_exclude_none=True)
async def reprice(req: RepriceRequest):
    """Re-price a generated package after switching its selected hotel."""
    try:
        return reprice_package(req.package, req.hotel_index, package_generator.config)
    except IndexError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/featured", response_model=list[FeaturedPackage], response_model_exclude_none=True)
async def featured():
    """Static showcase packages."""
    return featured_packages(package_generator.config)

from datetime import date, datetime

from pydantic import BaseModel, Field

from app.schemas.quote import QUOTE_MODEL_CONFIG, FlightQuote, LodgingQuote


class PriceBreakdown(BaseModel):
    flights: float
    hotel: int
    transfers: float | None = None
    activities: float | None = None
    fees: float | None = None

    @property
    def items_total(self) -> float:
        return sum(v for v in (self.flights, self.hotel, self.transfers, self.activities, self.fees) if v)


class PricedPackage(BaseModel):
    total_per_person: int = Field(..., ge=0)
    breakdown: PriceBreakdown
    margin: int = 0
    verified_at: datetime
    notes: list[str] = []


class PackageQuery(BaseModel):
    origin: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)
    depart_date: date
    return_date: date
    adults: int = Field(default=2, ge=1, le=9)

    model_config = {k: v for k, v in QUOTE_MODEL_CONFIG.items() if k != "frozen"}

    @property
    def nights(self) -> int:
        return max(1, (self.return_date - self.depart_date).days)


class PackageMeta(BaseModel):
    origin: str
    depart_date: date
    return_date: date
    adults: int


class Package(BaseModel):
    id: str
    title: str
    destination: str
    nights: int
    highlights: list[str]
    pricing: PricedPackage
    flight: FlightQuote
    hotels: list[LodgingQuote]
    meta: PackageMeta


class FeaturedPackage(BaseModel):
    id: str
    title: str
    destination: str
    nights: int
    pricing: PricedPackage
    rating: float
    agency: str

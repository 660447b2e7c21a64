from typing import Literal

from pydantic import AliasGenerator, BaseModel, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel

# Provider payloads are camelCase; our own API speaks snake_case. Accept both.
QUOTE_MODEL_CONFIG = {
    "alias_generator": AliasGenerator(validation_alias=to_camel),
    "populate_by_name": True,
    "frozen": True,
}


class FlightSegment(BaseModel):
    from_airport: str | None = None
    to_airport: str | None = None
    depart: str | None = None
    arrive: str | None = None
    carrier: str | None = None

    model_config = {
        **QUOTE_MODEL_CONFIG,
        # Segment payloads use the bare "from"/"to" keys
        "alias_generator": AliasGenerator(
            validation_alias=lambda name: {"from_airport": "from", "to_airport": "to"}.get(name, name)
        ),
    }


class Baggage(BaseModel):
    carry_on: bool = True
    checked_kg: int | None = None
    pieces: int | None = None

    model_config = QUOTE_MODEL_CONFIG


class FlightQuote(BaseModel):
    provider: str | None = None
    airline: str | None = None
    fare_brand: str | None = None
    price: StrictInt | StrictFloat | None = None
    currency: str = "EUR"
    segments: list[FlightSegment] = []
    stops: int | None = None
    duration_minutes: int | None = None
    layovers_minutes: list[int] = []
    baggage: Baggage | None = None
    extras: list[str] = []

    model_config = QUOTE_MODEL_CONFIG


class LodgingQuote(BaseModel):
    id: str | None = None
    name: str | None = None
    stars: float | None = None
    rating: float | None = None
    board: Literal["RO", "BB", "HB", "AI"] | None = None
    refundable: bool = False
    price_per_night: float | None = None
    nights: int | None = None
    area: str | None = None
    amenities: list[str] = []

    model_config = QUOTE_MODEL_CONFIG

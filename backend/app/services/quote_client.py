"""Quote provider client: adapter for flight and lodging quotes over HTTP."""

import hashlib
import logging
import random
from datetime import date, datetime, timedelta, timezone
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, ValidationError

from app.config import settings
from app.schemas.package import PackageQuery
from app.schemas.quote import FlightQuote, LodgingQuote
from app.services.errors import QuoteProviderError

logger = logging.getLogger(__name__)

# (IATA, name) pairs used by demo mode
MOCK_AIRLINES = [
    ("A3", "Aegean"), ("TK", "Turkish Airlines"), ("LH", "Lufthansa"),
    ("AF", "Air France"), ("KL", "KLM"), ("OS", "Austrian"),
    ("LX", "Swiss"), ("FR", "Ryanair"), ("U2", "easyJet"),
]

MOCK_HUBS = ["IST", "FRA", "MUC", "VIE", "ZRH", "AMS", "CDG", "FCO"]

MOCK_HOTEL_NAMES = [
    "Grand Central", "Harbour View", "Old Town Suites", "City Loft",
    "Park Residence", "Riverside Inn", "Plaza Boutique", "Garden House",
]

MOCK_AREAS = ["Old Town", "City Centre", "Waterfront", "Museum Quarter", "Station Area"]

MOCK_AMENITIES = ["wifi", "breakfast", "pool", "gym", "spa", "parking", "air_conditioning", "bar"]


class QuoteProvider(Protocol):
    """Anything the package generator can pull quotes from."""

    async def fetch_flights(self, query: PackageQuery) -> list[FlightQuote]: ...

    async def fetch_lodging(
        self, destination: str, check_in: date, check_out: date, adults: int
    ) -> list[LodgingQuote]: ...


def _seeded_rng(*parts: Any) -> random.Random:
    """Deterministic RNG so identical queries see identical mock quotes."""
    seed_str = "|".join(str(p) for p in parts)
    seed = int(hashlib.md5(seed_str.encode()).hexdigest()[:8], 16)
    return random.Random(seed)


class QuoteClient:
    """Adapter for the quote provider's /api/flights and /api/hotels endpoints."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self._base_url = settings.quote_api_base_url if base_url is None else base_url
        self._timeout = settings.quote_api_timeout if timeout is None else timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._use_mock = not self._base_url

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_flights(self, query: PackageQuery) -> list[FlightQuote]:
        """Flight quotes for a round trip. Raises QuoteProviderError on failure."""
        if self._use_mock:
            return self._generate_mock_flights(query)

        params = {
            "origin": query.origin,
            "destination": query.destination,
            "departDate": query.depart_date.isoformat(),
            "returnDate": query.return_date.isoformat(),
            "adults": query.adults,
        }
        records = await self._get_list("/api/flights", params, leg="flights")
        return self._parse_records(records, FlightQuote, leg="flights")

    async def fetch_lodging(
        self, destination: str, check_in: date, check_out: date, adults: int
    ) -> list[LodgingQuote]:
        """Lodging quotes for a stay. Raises QuoteProviderError on failure."""
        if self._use_mock:
            return self._generate_mock_lodging(destination, check_in, check_out, adults)

        params = {
            "destination": destination,
            "checkIn": check_in.isoformat(),
            "checkOut": check_out.isoformat(),
            "adults": adults,
        }
        records = await self._get_list("/api/hotels", params, leg="hotels")
        return self._parse_records(records, LodgingQuote, leg="hotels")

    async def _get_list(self, path: str, params: dict, leg: str) -> list:
        client = await self._get_client()
        try:
            resp = await client.get(path, params=params)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise QuoteProviderError(
                f"{leg.capitalize()} fetch failed ({e.response.status_code})"
            ) from e
        except httpx.RequestError as e:
            raise QuoteProviderError(f"{leg.capitalize()} request error: {e}") from e
        except ValueError as e:
            raise QuoteProviderError(f"{leg.capitalize()} response is not JSON") from e

        if not isinstance(data, list):
            raise QuoteProviderError(
                f"{leg.capitalize()} response is {type(data).__name__}, expected a list"
            )
        return data

    @staticmethod
    def _parse_records(records: list, model: type[BaseModel], leg: str) -> list:
        """Validate provider records, skipping the ones that do not fit the model."""
        parsed = []
        for i, raw in enumerate(records):
            try:
                parsed.append(model.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed {leg} record #{i}: {e.error_count()} errors")
        return parsed

    # --- Mock data generation for demo mode ---

    def _generate_mock_flights(self, query: PackageQuery) -> list[FlightQuote]:
        """Generate realistic mock flight quotes for demo/development."""
        rng = _seeded_rng(query.origin, query.destination, query.depart_date.isoformat(), query.return_date.isoformat())

        base_price = self._estimate_base_fare(query.origin, query.destination)
        flights = []

        for _ in range(rng.randint(4, 9)):
            code, airline = rng.choice(MOCK_AIRLINES)
            # Some quotes intentionally fall outside the quality rules
            stops = rng.choices([0, 1, 2], weights=[45, 40, 15])[0]
            layovers = [rng.choice([45, 90, 120, 150, 210, 330]) for _ in range(stops)]
            air_time = rng.randint(150, 780)
            duration = air_time + sum(layovers)

            dep_time = datetime(
                query.depart_date.year, query.depart_date.month, query.depart_date.day,
                rng.randint(6, 21), rng.choice([0, 15, 30, 45]), tzinfo=timezone.utc,
            )
            stop_points = rng.sample([h for h in MOCK_HUBS if h not in (query.origin, query.destination)], stops)
            points = [query.origin, *stop_points, query.destination]
            leg_minutes = air_time // (stops + 1)

            segments = []
            t = dep_time
            for i in range(stops + 1):
                arrive = t + timedelta(minutes=leg_minutes)
                segments.append({
                    "from": points[i],
                    "to": points[i + 1],
                    "depart": t.isoformat(),
                    "arrive": arrive.isoformat(),
                    "carrier": code,
                })
                if i < stops:
                    t = arrive + timedelta(minutes=layovers[i])

            price_factor = rng.uniform(0.75, 1.6) * (0.9 if stops else 1.0)
            checked = rng.choice([None, 20, 23])
            flights.append(FlightQuote.model_validate({
                "provider": rng.choice(["airline", "meta"]),
                "airline": airline,
                "fareBrand": "Economy Light" if checked is None else "Economy Classic",
                "price": round(base_price * price_factor, 2),
                "currency": "EUR",
                "segments": segments,
                "stops": stops,
                "durationMinutes": duration,
                "layoversMinutes": layovers,
                "baggage": {"carryOn": True, "checkedKg": checked, "pieces": 1 if checked else None},
            }))

        return flights

    def _generate_mock_lodging(
        self, destination: str, check_in: date, check_out: date, adults: int
    ) -> list[LodgingQuote]:
        """Generate realistic mock lodging quotes."""
        rng = _seeded_rng("hotel", destination, check_in.isoformat(), check_out.isoformat())
        nights = max(1, (check_out - check_in).days)

        hotels = []
        for i in range(rng.randint(3, 8)):
            stars = rng.choice([3, 3, 4, 4, 5])
            star_multiplier = {3: 0.75, 4: 1.0, 5: 1.6}[stars]
            hotels.append(LodgingQuote(
                id=f"{destination[:3].upper()}-{i + 1:03d}",
                name=f"{rng.choice(MOCK_HOTEL_NAMES)} {destination}",
                stars=stars,
                rating=round(rng.uniform(3.4, 4.9), 1),
                board=rng.choice(["RO", "BB", "BB", "HB"]),
                refundable=rng.random() < 0.6,
                price_per_night=round(95 * star_multiplier * rng.uniform(0.8, 1.3)),
                nights=nights,
                area=rng.choice(MOCK_AREAS),
                amenities=rng.sample(MOCK_AMENITIES, rng.randint(2, 5)),
            ))
        return hotels

    @staticmethod
    def _estimate_base_fare(origin: str, destination: str) -> float:
        """Rough round-trip fare estimate (EUR)."""
        long_haul = {"NRT", "HND", "KIX", "JFK", "LAX", "SFO", "SIN", "BKK", "DXB", "YYZ"}
        if origin.upper() in long_haul or destination.upper() in long_haul:
            return 650
        return 180


quote_client = QuoteClient()

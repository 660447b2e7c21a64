"""Package generator: builds value / balanced / premium packages for a trip query."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from pydantic import ValidationError

from app.schemas.package import Package, PackageMeta, PackageQuery
from app.schemas.quote import FlightQuote, LodgingQuote
from app.services.price_calculator import coerce_number, compute_price, round_half_away
from app.services.pricing_config import DEFAULT_PRICING, PricingConfig, PackageVariant
from app.services.quality_filter import filter_acceptable
from app.services.quote_client import QuoteProvider, quote_client

logger = logging.getLogger(__name__)


class LegStatus(str, Enum):
    """Outcome of one provider leg (flights or lodging)."""
    OK = "ok"
    EMPTY = "empty"          # provider answered, nothing usable
    FAILED = "failed"        # provider call raised
    SKIPPED = "skipped"      # not requested


@dataclass
class GenerationResult:
    packages: list[Package] = field(default_factory=list)
    flight_status: LegStatus = LegStatus.EMPTY
    lodging_status: LegStatus = LegStatus.SKIPPED
    flights_received: int = 0
    flights_accepted: int = 0

    def to_dict(self) -> dict:
        return {
            "packages": [p.model_dump(mode="json", exclude_none=True) for p in self.packages],
            "flight_status": self.flight_status.value,
            "lodging_status": self.lodging_status.value,
            "flights_received": self.flights_received,
            "flights_accepted": self.flights_accepted,
        }


class PackageGenerator:
    """Pairs quality-filtered flights with multiplier-adjusted lodging per variant."""

    def __init__(self, provider: QuoteProvider | None = None, config: PricingConfig = DEFAULT_PRICING):
        self.provider = provider if provider is not None else quote_client
        self.config = config

    async def generate(self, query: PackageQuery) -> GenerationResult:
        """
        Run the full pipeline for one query.

        Never raises on provider failure: a failed flight leg yields no
        packages, a failed lodging leg yields packages priced against the
        fallback lodging quote. Lodging is only requested once at least one
        flight passes the quality filter.
        """
        nights = query.nights
        result = GenerationResult()

        try:
            raw_flights = await self.provider.fetch_flights(query)
        except Exception as e:
            logger.warning(f"Flight quotes failed for {query.origin}->{query.destination}: {e}")
            result.flight_status = LegStatus.FAILED
            return result

        if not isinstance(raw_flights, list):
            if raw_flights is not None:
                logger.warning(f"Ignoring non-list flight payload: {type(raw_flights).__name__}")
            raw_flights = []
        flights = filter_acceptable(raw_flights, self.config)
        result.flights_received = len(raw_flights)
        result.flights_accepted = len(flights)

        if not flights:
            logger.info(
                f"No acceptable flights for {query.origin}->{query.destination} "
                f"({result.flights_received} received)"
            )
            result.flight_status = LegStatus.EMPTY
            return result
        result.flight_status = LegStatus.OK

        try:
            hotels = await self.provider.fetch_lodging(
                query.destination, query.depart_date, query.return_date, query.adults
            )
            hotels = self._usable_lodging(hotels)
            result.lodging_status = LegStatus.OK if hotels else LegStatus.EMPTY
        except Exception as e:
            logger.warning(f"Lodging quotes failed for {query.destination}: {e}")
            hotels = []
            result.lodging_status = LegStatus.FAILED

        # Flights keep provider order; the i-th variant takes the i-th flight, clamped
        for i, variant in enumerate(self.config.variants):
            flight = flights[min(i, len(flights) - 1)]
            result.packages.append(self._build_package(query, variant, flight, hotels, nights))

        logger.info(
            f"Generated {len(result.packages)} packages for {query.destination} "
            f"({result.flights_accepted}/{result.flights_received} flights, "
            f"{len(hotels)} hotels, lodging={result.lodging_status.value})"
        )
        return result

    def _build_package(
        self,
        query: PackageQuery,
        variant: PackageVariant,
        flight: FlightQuote,
        hotels: list[LodgingQuote],
        nights: int,
    ) -> Package:
        defaults = self.config.defaults
        hotel_options = [
            self._adjust_hotel(h, variant.multiplier, nights)
            for h in variant.pick_hotels(hotels)
        ]

        representative = hotel_options[0] if hotel_options else LodgingQuote(
            price_per_night=defaults.hotel_price_per_night,
            nights=nights,
            refundable=True,
            rating=defaults.fallback_hotel_rating,
        )
        pricing = compute_price(
            flight,
            representative,
            fees=defaults.package_fee,
            margin_pct=defaults.package_margin_pct,
            config=self.config,
        )

        return Package(
            id=package_id(query, variant),
            title=f"{query.destination}: {variant.title}",
            destination=query.destination,
            nights=nights,
            highlights=list(variant.highlights),
            pricing=pricing,
            flight=flight,
            hotels=hotel_options,
            meta=PackageMeta(
                origin=query.origin,
                depart_date=query.depart_date,
                return_date=query.return_date,
                adults=query.adults,
            ),
        )

    @staticmethod
    def _usable_lodging(raw) -> list[LodgingQuote | None]:
        """Validate provider lodging records, keeping their positions.

        A record that is missing or fails validation becomes None so the
        variants' index picks fall through to their next choice.
        """
        if not isinstance(raw, list):
            if raw is not None:
                logger.warning(f"Ignoring non-list lodging payload: {type(raw).__name__}")
            return []

        hotels: list[LodgingQuote | None] = []
        for i, record in enumerate(raw):
            if isinstance(record, LodgingQuote) or record is None:
                hotels.append(record)
                continue
            try:
                hotels.append(LodgingQuote.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed lodging record #{i}: {e.error_count()} errors")
                hotels.append(None)
        return hotels if any(h is not None for h in hotels) else []

    def _adjust_hotel(self, hotel: LodgingQuote, multiplier: float, nights: int) -> LodgingQuote:
        base = coerce_number(hotel.price_per_night, self.config.defaults.hotel_price_per_night)
        return hotel.model_copy(update={
            "price_per_night": round_half_away(base * multiplier),
            "nights": nights,
        })


def package_id(query: PackageQuery, variant: PackageVariant) -> str:
    """Stable id: same destination, variant and departure date give the same id."""
    return f"{query.destination}-{variant.key}-{query.depart_date.isoformat()}"


package_generator = PackageGenerator()


async def generate_packages(query: PackageQuery, generator: PackageGenerator | None = None) -> list[Package]:
    """Packages for ``query`` in variant order; empty when no flight qualifies."""
    result = await (generator or package_generator).generate(query)
    return result.packages

"""Featured packages: static showcase catalog, priced live on every request."""

from app.schemas.package import FeaturedPackage
from app.schemas.quote import FlightQuote, LodgingQuote
from app.services.price_calculator import compute_price
from app.services.pricing_config import DEFAULT_PRICING, PricingConfig

SAMPLE_FLIGHT = FlightQuote.model_validate({
    "provider": "airline",
    "price": 400,
    "currency": "EUR",
    "segments": [
        {"from": "ATH", "to": "NRT", "depart": "2025-09-20T08:00Z", "arrive": "2025-09-20T20:00Z", "carrier": "Aegean"},
    ],
    "stops": 1,
    "durationMinutes": 780,
    "layoversMinutes": [120],
})

SAMPLE_LODGING = LodgingQuote(
    price_per_night=80,
    nights=6,
    refundable=True,
    rating=4.2,
)

# id, title, destination, nights, rating, agency
FEATURED = [
    ("p1", "Tokyo Discovery", "Japan", 7, 4.7, "Travel Buddy AI"),
]


def featured_packages(config: PricingConfig = DEFAULT_PRICING) -> list[FeaturedPackage]:
    return [
        FeaturedPackage(
            id=pkg_id,
            title=title,
            destination=destination,
            nights=nights,
            pricing=compute_price(
                SAMPLE_FLIGHT,
                SAMPLE_LODGING.model_copy(update={"nights": nights}),
                config=config,
            ),
            rating=rating,
            agency=agency,
        )
        for pkg_id, title, destination, nights, rating, agency in FEATURED
    ]

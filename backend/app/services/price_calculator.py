"""Price calculator: turns one flight + one lodging quote into a priced package."""

import logging
import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from app.schemas.package import Package, PriceBreakdown, PricedPackage
from app.schemas.quote import FlightQuote, LodgingQuote
from app.services.pricing_config import DEFAULT_PRICING, PricingConfig

logger = logging.getLogger(__name__)


def coerce_number(value: Any, fallback: float) -> float:
    """Return ``value`` as a finite float, or ``fallback`` if it is missing or not numeric."""
    if value is None or isinstance(value, bool):
        return fallback
    try:
        n = float(value)
    except (TypeError, ValueError):
        return fallback
    return n if math.isfinite(n) else fallback


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_price(
    flight: FlightQuote | None,
    hotel: LodgingQuote | None,
    transfers: float | None = None,
    activities: float | None = None,
    fees: float | None = None,
    margin_pct: float | None = None,
    config: PricingConfig = DEFAULT_PRICING,
) -> PricedPackage:
    """
    Price one flight + one lodging quote per person.

    Never raises: missing or non-numeric inputs fall back to the configured
    defaults. ``hotelTotal`` and ``margin`` are each rounded before the final
    sum, so totals match a line-by-line receipt.
    """
    defaults = config.defaults

    transfers_v = coerce_number(transfers, 0)
    activities_v = coerce_number(activities, 0)
    fees_v = coerce_number(fees, 0)

    hotel_nights = coerce_number(hotel.nights if hotel is not None else None, defaults.hotel_nights)
    hotel_ppn = coerce_number(hotel.price_per_night if hotel is not None else None, defaults.hotel_price_per_night)
    hotel_total = round_half_away(hotel_ppn * hotel_nights)

    flight_price = coerce_number(flight.price if flight is not None else None, 0)

    subtotal = flight_price + hotel_total + transfers_v + activities_v + fees_v
    pct = coerce_number(margin_pct, defaults.margin_pct)
    margin = round_half_away(subtotal * pct)

    total_per_person = max(0, round_half_away(subtotal + margin))

    # Zero ancillaries are omitted so "not applicable" differs from "free"
    breakdown = PriceBreakdown(
        flights=flight_price,
        hotel=hotel_total,
        transfers=transfers_v or None,
        activities=activities_v or None,
        fees=fees_v or None,
    )

    return PricedPackage(
        total_per_person=total_per_person,
        breakdown=breakdown,
        margin=margin,
        verified_at=datetime.now(timezone.utc),
        notes=[defaults.note],
    )


def reprice_package(
    package: Package,
    hotel_index: int,
    config: PricingConfig = DEFAULT_PRICING,
) -> PricedPackage:
    """Re-price a generated package against another of its lodging options.

    Raises IndexError when ``hotel_index`` is outside the package's hotel list.
    """
    if not 0 <= hotel_index < len(package.hotels):
        raise IndexError(
            f"Hotel index {hotel_index} out of range for package {package.id} "
            f"({len(package.hotels)} options)"
        )

    hotel = package.hotels[hotel_index].model_copy(update={"nights": package.nights})
    pricing = compute_price(
        package.flight,
        hotel,
        fees=config.defaults.package_fee,
        margin_pct=config.defaults.package_margin_pct,
        config=config,
    )
    logger.debug(
        f"Repriced {package.id} with hotel #{hotel_index}: "
        f"{package.pricing.total_per_person} -> {pricing.total_per_person}"
    )
    return pricing

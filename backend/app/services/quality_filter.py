"""Quality filter: rejects marathon itineraries and unsafe connections."""

import logging
import math
from typing import Any

from pydantic import ValidationError

from app.schemas.quote import FlightQuote
from app.services.pricing_config import DEFAULT_PRICING, PricingConfig

logger = logging.getLogger(__name__)


def rejection_reason(flight: Any, config: PricingConfig = DEFAULT_PRICING) -> str | None:
    """Name of the first rule ``flight`` breaks, or None when it is acceptable."""
    if flight is None:
        return "missing"
    if isinstance(flight, dict):
        try:
            flight = FlightQuote.model_validate(flight)
        except ValidationError:
            return "malformed"
    if not isinstance(flight, FlightQuote):
        return "malformed"

    rules = config.quality
    if flight.price is None or not math.isfinite(flight.price):
        return "price"
    if flight.stops is not None and flight.stops > rules.max_stops:
        return "stops"
    if flight.duration_minutes is not None and flight.duration_minutes > rules.max_duration_minutes:
        return "duration"
    if not all(
        rules.min_layover_minutes <= m <= rules.max_layover_minutes
        for m in flight.layovers_minutes
    ):
        return "layover"
    return None


def is_acceptable(flight: FlightQuote | dict | None, config: PricingConfig = DEFAULT_PRICING) -> bool:
    """
    True when the flight has a finite numeric price and respects the stop,
    duration and layover limits in ``config.quality``.

    Missing stops or duration count as "no constraint"; missing layovers as
    "no layovers". Prices given as strings or booleans are rejected.
    """
    reason = rejection_reason(flight, config)
    if reason is not None:
        carrier = flight.get("airline") if isinstance(flight, dict) else getattr(flight, "airline", None)
        logger.debug(f"Rejected flight {carrier or '?'}: {reason}")
        return False
    return True


def filter_acceptable(flights: list[Any], config: PricingConfig = DEFAULT_PRICING) -> list[FlightQuote]:
    """Acceptable flights as FlightQuote models, input order preserved."""
    accepted = []
    for f in flights:
        if not is_acceptable(f, config):
            continue
        accepted.append(f if isinstance(f, FlightQuote) else FlightQuote.model_validate(f))
    return accepted

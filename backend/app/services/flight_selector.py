"""Flight selector: picks the single best acceptable flight."""

from typing import Any

from app.schemas.quote import FlightQuote
from app.services.pricing_config import DEFAULT_PRICING, PricingConfig
from app.services.quality_filter import filter_acceptable


def _rank_key(flight: FlightQuote) -> tuple[float, float]:
    # Unknown duration ranks after any known duration at the same price
    duration = flight.duration_minutes if flight.duration_minutes is not None else float("inf")
    return (flight.price, duration)


def pick_best(candidates: list[Any] | None, config: PricingConfig = DEFAULT_PRICING) -> FlightQuote | None:
    """
    Cheapest acceptable flight, shorter duration breaking price ties.

    Remaining ties keep input order (sorted() is stable).
    """
    acceptable = filter_acceptable(candidates or [], config)
    if not acceptable:
        return None
    return sorted(acceptable, key=_rank_key)[0]

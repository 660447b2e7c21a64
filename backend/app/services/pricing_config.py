"""Package pricing configuration: single source for all pricing constants."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class QualityRules:
    """Limits a flight quote must respect to be offered at all."""
    max_stops: int = 1
    max_duration_minutes: int = 16 * 60
    min_layover_minutes: int = 70
    max_layover_minutes: int = 300


@dataclass(frozen=True)
class PricingDefaults:
    """Fallbacks used when a quote or option is missing a number."""
    hotel_price_per_night: float = 70.0
    hotel_nights: int = 1
    margin_pct: float = 0.08
    package_fee: float = 15.0          # per person, added to every generated package
    package_margin_pct: float = 0.08
    fallback_hotel_rating: float = 4.2
    note: str = "AI package priced with quality flight constraints"


@dataclass(frozen=True)
class PackageVariant:
    """One package archetype.

    ``hotel_picks`` is a sequence of index choices into the lodging list; each
    choice resolves to the first index holding a quote, and choices with no
    such index are dropped.
    """
    key: str
    title: str
    multiplier: float
    hotel_picks: tuple[tuple[int, ...], ...]
    highlights: tuple[str, ...]

    def pick_hotels(self, hotels: list) -> list:
        picked = []
        for choice in self.hotel_picks:
            idx = next((i for i in choice if 0 <= i < len(hotels) and hotels[i] is not None), None)
            if idx is not None:
                picked.append(hotels[idx])
        return picked


VALUE = PackageVariant(
    key="value",
    title="Value Plan",
    multiplier=0.95,
    hotel_picks=((1, 0),),
    highlights=("Smart location", "Budget food tips", "Transit friendly"),
)

BALANCED = PackageVariant(
    key="balanced",
    title="Balanced Plan",
    multiplier=1.0,
    hotel_picks=((0,), (1,)),
    highlights=("Good location", "Must-see sights", "Free afternoon"),
)

PREMIUM = PackageVariant(
    key="premium",
    title="Premium Plan",
    multiplier=1.25,
    hotel_picks=((2, 0), (0,)),
    highlights=("Central hotel", "Top attractions", "Signature experience"),
)


@dataclass(frozen=True)
class PricingConfig:
    """Aggregate config passed explicitly through the pricing pipeline."""
    quality: QualityRules = field(default_factory=QualityRules)
    defaults: PricingDefaults = field(default_factory=PricingDefaults)
    variants: tuple[PackageVariant, ...] = (VALUE, BALANCED, PREMIUM)


DEFAULT_PRICING = PricingConfig()

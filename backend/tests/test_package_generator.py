from datetime import date

from app.schemas.package import PackageQuery
from app.services.errors import QuoteProviderError
from app.services.package_generator import LegStatus, PackageGenerator, generate_packages
from tests.factories import FakeProvider, make_flight, make_hotel


def _generator(**provider_kwargs) -> tuple[PackageGenerator, FakeProvider]:
    provider = FakeProvider(**provider_kwargs)
    return PackageGenerator(provider=provider), provider


async def test_no_flights_returns_empty_and_skips_lodging(query):
    generator, provider = _generator(flights=[], hotels=[make_hotel()])
    result = await generator.generate(query)
    assert result.packages == []
    assert result.flight_status is LegStatus.EMPTY
    assert result.lodging_status is LegStatus.SKIPPED
    assert provider.calls == ["flights"]


async def test_only_unacceptable_flights_returns_empty(query):
    flights = [make_flight(stops=2, layovers=[90, 90]), make_flight(duration=1000)]
    generator, provider = _generator(flights=flights, hotels=[make_hotel()])
    result = await generator.generate(query)
    assert result.packages == []
    assert result.flights_received == 2
    assert result.flights_accepted == 0
    assert "lodging" not in provider.calls


async def test_flight_provider_failure_is_reported_not_raised(query):
    generator, provider = _generator(flight_error=QuoteProviderError("Flights fetch failed (503)"))
    result = await generator.generate(query)
    assert result.packages == []
    assert result.flight_status is LegStatus.FAILED
    assert provider.calls == ["flights"]


async def test_unexpected_provider_error_is_contained(query):
    generator, _ = _generator(flight_error=TimeoutError("slow provider"))
    assert await generate_packages(query, generator) == []


async def test_three_variants_in_order(query):
    flights = [make_flight(price=300), make_flight(price=250), make_flight(price=500)]
    hotels = [
        make_hotel(price_per_night=100, name="A"),
        make_hotel(price_per_night=80, name="B"),
        make_hotel(price_per_night=200, name="C"),
    ]
    generator, provider = _generator(flights=flights, hotels=hotels)
    result = await generator.generate(query)

    assert provider.calls == ["flights", "lodging"]
    assert result.flight_status is LegStatus.OK
    assert result.lodging_status is LegStatus.OK

    value, balanced, premium = result.packages
    assert [p.id for p in result.packages] == [
        "Lisbon-value-2025-09-20",
        "Lisbon-balanced-2025-09-20",
        "Lisbon-premium-2025-09-20",
    ]

    # Flights follow provider order, not price
    assert [p.flight.price for p in result.packages] == [300, 250, 500]

    assert [(h.name, h.price_per_night) for h in value.hotels] == [("B", 76)]
    assert [(h.name, h.price_per_night) for h in balanced.hotels] == [("A", 100), ("B", 80)]
    assert [(h.name, h.price_per_night) for h in premium.hotels] == [("C", 250), ("A", 125)]
    assert all(h.nights == 6 for p in result.packages for h in p.hotels)

    # value: 300 + 76*6 + 15 = 771, margin 62
    assert value.pricing.total_per_person == 833
    # balanced: 250 + 600 + 15 = 865, margin 69
    assert balanced.pricing.total_per_person == 934
    # premium: 500 + 1500 + 15 = 2015, margin 161
    assert premium.pricing.total_per_person == 2176
    assert premium.pricing.breakdown.fees == 15


async def test_originals_are_not_mutated(query):
    hotel = make_hotel(price_per_night=100, nights=2)
    generator, _ = _generator(flights=[make_flight()], hotels=[hotel])
    await generator.generate(query)
    assert hotel.price_per_night == 100
    assert hotel.nights == 2


async def test_flight_index_clamps_to_last(query):
    flights = [make_flight(price=300, airline="Aegean"), make_flight(price=200, airline="TAP")]
    generator, _ = _generator(flights=flights, hotels=[make_hotel()])
    packages = await generate_packages(query, generator)
    assert [p.flight.airline for p in packages] == ["Aegean", "TAP", "TAP"]


async def test_filtered_flights_are_skipped_before_assignment(query):
    flights = [
        make_flight(price=100, stops=1, layovers=[30], airline="Bad"),
        make_flight(price=300, airline="Aegean"),
    ]
    generator, _ = _generator(flights=flights, hotels=[make_hotel()])
    packages = await generate_packages(query, generator)
    assert {p.flight.airline for p in packages} == {"Aegean"}


async def test_single_hotel_fills_every_variant(query):
    generator, _ = _generator(flights=[make_flight()], hotels=[make_hotel(price_per_night=100)])
    value, balanced, premium = await generate_packages(query, generator)
    assert [h.price_per_night for h in value.hotels] == [95]
    assert [h.price_per_night for h in balanced.hotels] == [100]
    assert [h.price_per_night for h in premium.hotels] == [125, 125]


async def test_missing_hotel_rate_uses_default_base(query):
    generator, _ = _generator(flights=[make_flight()], hotels=[make_hotel(price_per_night=None)])
    _, balanced, premium = await generate_packages(query, generator)
    assert balanced.hotels[0].price_per_night == 70
    # round(70 * 1.25) = 87.5 -> 88
    assert premium.hotels[0].price_per_night == 88


async def test_empty_lodging_uses_fallback_hotel(query):
    generator, _ = _generator(flights=[make_flight(price=400)], hotels=[])
    result = await generator.generate(query)
    assert result.lodging_status is LegStatus.EMPTY
    assert len(result.packages) == 3
    for package in result.packages:
        assert package.hotels == []
        assert package.pricing.breakdown.hotel == 70 * 6
        # 400 + 420 + 15 = 835, margin round(66.8) = 67
        assert package.pricing.total_per_person == 902


async def test_lodging_failure_degrades_to_fallback_hotel(query):
    generator, provider = _generator(
        flights=[make_flight(price=400)],
        lodging_error=QuoteProviderError("Hotels fetch failed (500)"),
    )
    result = await generator.generate(query)
    assert result.lodging_status is LegStatus.FAILED
    assert provider.calls == ["flights", "lodging"]
    assert [p.pricing.total_per_person for p in result.packages] == [902, 902, 902]


async def test_identical_queries_are_idempotent(query):
    flights = [make_flight(price=300), make_flight(price=250)]
    hotels = [make_hotel(price_per_night=100), make_hotel(price_per_night=80)]
    generator, _ = _generator(flights=flights, hotels=hotels)

    first = await generate_packages(query, generator)
    second = await generate_packages(query, generator)

    assert [p.id for p in first] == [p.id for p in second]
    assert [p.pricing.total_per_person for p in first] == [p.pricing.total_per_person for p in second]
    assert all(a.pricing is not b.pricing for a, b in zip(first, second))


async def test_nights_from_dates():
    short = PackageQuery(origin="ATH", destination="Rome", depart_date=date(2025, 5, 1), return_date=date(2025, 5, 1))
    generator, _ = _generator(flights=[make_flight()], hotels=[make_hotel()])
    packages = await generate_packages(short, generator)
    assert {p.nights for p in packages} == {1}


async def test_package_shape(query):
    generator, _ = _generator(flights=[make_flight()], hotels=[make_hotel()])
    value = (await generate_packages(query, generator))[0]
    assert value.title == "Lisbon: Value Plan"
    assert value.destination == "Lisbon"
    assert value.highlights == ["Smart location", "Budget food tips", "Transit friendly"]
    assert value.meta.origin == "ATH"
    assert value.meta.return_date == date(2025, 9, 26)


async def test_camel_case_lodging_records_are_validated(query):
    hotels = [
        {"pricePerNight": 90, "nights": 6, "refundable": True, "rating": 4.1},
        {"pricePerNight": 60, "board": "BB"},
    ]
    generator, _ = _generator(flights=[make_flight()], hotels=hotels)
    result = await generator.generate(query)
    value, balanced, _ = result.packages
    assert result.lodging_status is LegStatus.OK
    assert [h.price_per_night for h in balanced.hotels] == [90, 60]
    # round(60 * 0.95) = 57
    assert [h.price_per_night for h in value.hotels] == [57]


async def test_missing_and_malformed_lodging_records_fall_through(query):
    hotels = [None, {"pricePerNight": 90, "board": "FB"}, make_hotel(price_per_night=100)]
    generator, _ = _generator(flights=[make_flight()], hotels=hotels)
    value, balanced, premium = await generate_packages(query, generator)
    # index 1 is unusable, so value falls back to index 0, which is missing too
    assert value.hotels == []
    assert balanced.hotels == []
    assert [h.price_per_night for h in premium.hotels] == [125]


async def test_non_list_lodging_payload_uses_fallback_hotel(query):
    generator, _ = _generator(flights=[make_flight(price=400)], hotels={"hotels": [{"pricePerNight": 90}]})
    result = await generator.generate(query)
    assert result.lodging_status is LegStatus.EMPTY
    assert [p.pricing.total_per_person for p in result.packages] == [902, 902, 902]


async def test_only_malformed_lodging_counts_as_empty(query):
    generator, _ = _generator(flights=[make_flight()], hotels=[{"rating": "great"}, "Hotel Lisboa"])
    result = await generator.generate(query)
    assert result.lodging_status is LegStatus.EMPTY
    assert all(p.hotels == [] for p in result.packages)


async def test_value_falls_back_when_second_hotel_missing(query):
    generator, _ = _generator(flights=[make_flight()], hotels=[make_hotel(price_per_night=100), None])
    value, _, _ = await generate_packages(query, generator)
    assert [h.price_per_night for h in value.hotels] == [95]

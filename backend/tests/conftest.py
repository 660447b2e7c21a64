from datetime import date

import pytest

from app.schemas.package import PackageQuery


@pytest.fixture
def query() -> PackageQuery:
    return PackageQuery(
        origin="ATH",
        destination="Lisbon",
        depart_date=date(2025, 9, 20),
        return_date=date(2025, 9, 26),
        adults=2,
    )

"""Root-level pytest fixtures for all tests.

Provides shared fixtures for DHL shipment tests:
- Credentials and a country name table
- Sender/recipient addresses
- A metric, non-dutiable single-parcel request
- A fixed clock
"""

from datetime import UTC, datetime

import pytest

from src.services.connection_types import DHLCredentials
from src.services.measurement import LengthUnit, MassUnit
from src.services.parcel import Parcel
from src.services.shipment_models import Address, ShipmentRequest, UnitSystem

FIXED_NOW = datetime(2024, 3, 5, 9, 30, 0, tzinfo=UTC)

COUNTRY_NAMES = {
    "US": "United States Of America",
    "DE": "Germany",
    "GB": "United Kingdom",
    "VE": "Venezuela, Bolivarian Republic Of The Country",
}


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external services"
    )


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    """Clock returning FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def credentials() -> DHLCredentials:
    return DHLCredentials(
        site_id="TestSite",
        password="s3cr3t-pass",
        account_number="123456789",
    )


@pytest.fixture
def country_names() -> dict[str, str]:
    return dict(COUNTRY_NAMES)


@pytest.fixture
def sender() -> Address:
    return Address(
        name="Acme Widgets",
        address1="1 Market St",
        city="San Francisco",
        zip="94105",
        country_code="US",
        contact_name="Pat Sender",
        contact_phone="4155550100",
        state="CA",
    )


@pytest.fixture
def recipient() -> Address:
    return Address(
        name="Beispiel GmbH",
        address1="Unter den Linden 5",
        address2="",
        city="Berlin",
        zip="10117",
        country_code="DE",
        contact_name="Alex Empfänger",
        contact_phone="+49305550100",
    )


@pytest.fixture
def parcel() -> Parcel:
    """10 x 20 x 30 cm, 2.5 kg."""
    return Parcel.make(
        10, 20, 30, 2.5,
        length_unit=LengthUnit.CENTIMETER,
        mass_unit=MassUnit.KILOGRAM,
    )


@pytest.fixture
def metric_request(sender, recipient, parcel) -> ShipmentRequest:
    """Metric, non-dutiable, single parcel, no special services."""
    return ShipmentRequest(
        service="P",
        reference="ORDER-1001",
        sender=sender,
        recipient=recipient,
        parcels=[parcel],
        units=UnitSystem.METRIC,
        contents="Widgets",
    )

"""Общие fixtures: in-memory host-система."""

import pytest

from em_currency.core.domain.currencies import CurrencyCatalogue
from em_currency.core.domain.host import (
    AllowAllAuthorizer,
    DictSettingsProvider,
    HostServices,
    InMemoryMetadataStore,
    StaticBookingProvider,
)
from em_currency.store.override_store import CurrencyOverrideStore


@pytest.fixture
def settings():
    """Опции сайта: USD, формат '@#'."""
    return DictSettingsProvider({"dbem_bookings_currency": "USD"})


@pytest.fixture
def metadata():
    return InMemoryMetadataStore()


@pytest.fixture
def services(metadata, settings):
    return HostServices(
        metadata=metadata,
        settings=settings,
        bookings=StaticBookingProvider(settings, CurrencyCatalogue()),
        authorizer=AllowAllAuthorizer(),
    )


@pytest.fixture
def store(metadata, settings):
    return CurrencyOverrideStore(metadata, settings)

"""
Domain models and value objects.

Contains the currency catalogue, the override and format template models,
the site settings snapshot, and the host-side booking value objects.
Host collaborator protocols live in em_currency.core.domain.host.
"""

from em_currency.core.domain.currencies import (
    CURRENCY_NAMES,
    CURRENCY_SYMBOLS,
    CurrencyCatalogue,
)
from em_currency.core.domain.models import (
    CURRENCY_CODE_PATTERN,
    OPTION_DEFAULTS,
    Booking,
    BookingsTable,
    CurrencyFormatTemplate,
    Event,
    EventCurrencyOverride,
    EventId,
    SiteSettings,
    Ticket,
    TicketBooking,
    as_flag,
    normalize_currency_code,
)

__all__ = [
    # Currencies
    "CURRENCY_NAMES",
    "CURRENCY_SYMBOLS",
    "CurrencyCatalogue",
    # Models
    "CURRENCY_CODE_PATTERN",
    "OPTION_DEFAULTS",
    "EventId",
    "EventCurrencyOverride",
    "CurrencyFormatTemplate",
    "SiteSettings",
    "as_flag",
    "normalize_currency_code",
    # Host value objects
    "Event",
    "Ticket",
    "TicketBooking",
    "Booking",
    "BookingsTable",
]

"""Hooks — handlers extension point'ов host-системы.

Порядок регистрации (CurrencyPerEventPlugin.register):
- Pricing: ticket price, booking spaces, formatted price
- Bookings table: cols template, columns, row price column
- Event form: meta box, front-end form footer, save
- Gateways: Sage, PayPal Standard, PayPal Chained
"""

from .bookings_table import (
    BookingCurrencyPriceColumnHook,
    BookingsTableColsTemplateHook,
    BookingsTableColumnsHook,
)
from .event_form import EventCurrencyMetaBox, FrontEventFormFooter, SaveEventCurrency, SaveResult
from .gateways import PayPalChainedRequestHook, PayPalVarsHook, SageCurrencyHook
from .pricing import BookingSpacesHook, CurrencyFormattedHook, TicketPriceHook
from .registry import (
    BookingsTableHandler,
    ColumnsTemplateHandler,
    EventFormRenderer,
    EventSaveHandler,
    ExtensionPoint,
    ExtensionRegistry,
    GatewayCurrencyResolver,
    HookKind,
    PriceFormatter,
    PriceLookupHandler,
    Registration,
    RowValueHandler,
)

__all__ = [
    "ExtensionPoint",
    "ExtensionRegistry",
    "HookKind",
    "Registration",
    "PriceLookupHandler",
    "PriceFormatter",
    "ColumnsTemplateHandler",
    "BookingsTableHandler",
    "RowValueHandler",
    "EventFormRenderer",
    "EventSaveHandler",
    "GatewayCurrencyResolver",
    "TicketPriceHook",
    "BookingSpacesHook",
    "CurrencyFormattedHook",
    "BookingsTableColsTemplateHook",
    "BookingsTableColumnsHook",
    "BookingCurrencyPriceColumnHook",
    "EventCurrencyMetaBox",
    "FrontEventFormFooter",
    "SaveEventCurrency",
    "SaveResult",
    "SageCurrencyHook",
    "PayPalVarsHook",
    "PayPalChainedRequestHook",
]

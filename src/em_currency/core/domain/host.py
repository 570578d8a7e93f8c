"""
Host — Контракты коллабораторов host-системы

Плагин не владеет данными: события, бронирования, опции сайта и per-event
метаданные принадлежат host-системе. Здесь описаны только методы, которые
плагин вызывает на границе, плюс in-memory реализации для встраивания и тестов.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Tuple, Union

from em_currency.core.domain.currencies import CurrencyCatalogue
from em_currency.core.domain.models import (
    OPTION_CURRENCY_FORMAT,
    OPTION_DECIMAL_POINT,
    OPTION_DEFAULT_CURRENCY,
    OPTION_DEFAULTS,
    OPTION_THOUSANDS_SEP,
    Booking,
    EventId,
    Ticket,
    TicketBooking,
    normalize_currency_code,
)
from em_currency.core.pricing.price_format import PRICE_DECIMALS, number_format, render_template

# =============================================================================
# PROTOCOLS
# =============================================================================


class MetadataStore(Protocol):
    """Per-event key-value хранилище host-системы (post meta)."""

    def get(self, event_id: EventId, key: str) -> Any: ...

    def set(self, event_id: EventId, key: str, value: Any) -> None: ...

    def delete(self, event_id: EventId, key: str) -> None: ...


class SettingsProvider(Protocol):
    """Опции сайта."""

    def get(self, option_name: str, default: Any = None) -> Any: ...


class CurrencySymbolProvider(Protocol):
    """Символ валюты по коду; None если валюта неизвестна."""

    def get_symbol(self, currency_code: str) -> Optional[str]: ...


class BookingProvider(Protocol):
    """Доступ к событию и цене объектов бронирования."""

    def get_event(self, ticket_or_booking: Union[Ticket, TicketBooking, Booking]) -> EventId: ...

    def get_price(self, booking: Booking, include_currency_symbol: bool) -> Union[Decimal, str]: ...


class Authorizer(Protocol):
    """
    Авторизация записи override.

    verify_request проверяет nonce формы, can_edit — право на редактирование
    события текущим пользователем.
    """

    def verify_request(self, form: Mapping[str, Any]) -> bool: ...

    def can_edit(self, event_id: EventId) -> bool: ...


# =============================================================================
# IN-MEMORY РЕАЛИЗАЦИИ
# =============================================================================


class InMemoryMetadataStore:
    """Post meta в словаре: {(event_id, key): value}."""

    def __init__(self, initial: Optional[Mapping[Tuple[EventId, str], Any]] = None):
        self._data: Dict[Tuple[EventId, str], Any] = dict(initial or {})

    def get(self, event_id: EventId, key: str) -> Any:
        return self._data.get((event_id, key))

    def set(self, event_id: EventId, key: str, value: Any) -> None:
        self._data[(event_id, key)] = value

    def delete(self, event_id: EventId, key: str) -> None:
        self._data.pop((event_id, key), None)

    def __len__(self) -> int:
        return len(self._data)


class DictSettingsProvider:
    """Опции сайта в словаре."""

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        self.options: Dict[str, Any] = dict(options or {})

    def get(self, option_name: str, default: Any = None) -> Any:
        return self.options.get(option_name, default)


class StaticBookingProvider:
    """
    BookingProvider поверх value objects из models.

    get_price(booking, True) форматирует цену в валюте сайта, как это делает
    host без плагина: опции берутся как есть, без проверки контракта.
    """

    def __init__(
        self,
        settings: SettingsProvider,
        symbols: Optional[CurrencySymbolProvider] = None,
    ):
        self._settings = settings
        self._symbols = symbols or CurrencyCatalogue()

    def get_event(self, ticket_or_booking: Union[Ticket, TicketBooking, Booking]) -> EventId:
        if isinstance(ticket_or_booking, TicketBooking):
            return ticket_or_booking.ticket.event.post_id
        return ticket_or_booking.event.post_id

    def get_price(self, booking: Booking, include_currency_symbol: bool) -> Union[Decimal, str]:
        if not include_currency_symbol:
            return booking.price

        code = normalize_currency_code(self._option(OPTION_DEFAULT_CURRENCY)) or OPTION_DEFAULTS[OPTION_DEFAULT_CURRENCY]
        number = number_format(
            booking.price,
            PRICE_DECIMALS,
            self._option(OPTION_DECIMAL_POINT),
            self._option(OPTION_THOUSANDS_SEP),
        )
        return render_template(self._option(OPTION_CURRENCY_FORMAT), self._symbols.get_symbol(code) or code, number)

    def _option(self, name: str) -> str:
        return str(self._settings.get(name, OPTION_DEFAULTS[name]))


class AllowAllAuthorizer:
    """Authorizer без проверок (CLI/импорт, где авторизация сделана выше)."""

    def verify_request(self, form: Mapping[str, Any]) -> bool:
        return True

    def can_edit(self, event_id: EventId) -> bool:
        return True


# =============================================================================
# SERVICES BUNDLE
# =============================================================================


def _never_admin() -> bool:
    return False


@dataclass(frozen=True)
class HostServices:
    """
    Набор коллабораторов host-системы, передаваемый в handlers.

    currencies = None означает, что host-плагин бронирований не активен.
    """

    metadata: MetadataStore
    settings: SettingsProvider
    bookings: BookingProvider
    authorizer: Authorizer
    currencies: Optional[CurrencyCatalogue] = field(default_factory=CurrencyCatalogue)
    is_admin_request: Callable[[], bool] = _never_admin

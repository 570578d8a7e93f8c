"""
Models — Модели данных плагина и value objects host-системы

Immutable Pydantic модели:
- EventCurrencyOverride: override валюты для одного события
- CurrencyFormatTemplate: шаблон форматирования цены ('@' символ, '#' сумма)
- SiteSettings: снапшот опций сайта, влияющих на валюту

Value objects host-системы (Event, Ticket, TicketBooking, Booking, BookingsTable)
описывают только то, что плагин читает на границе. Плагин их не создаёт и не
хранит дольше одной операции.
"""

from decimal import Decimal
from typing import Any, Dict, Final, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator

from em_currency.core.contracts import validate_site_options

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

EventId = Union[int, str]

CURRENCY_CODE_PATTERN: Final[str] = r"^[A-Z]{3}$"

AMOUNT_PLACEHOLDER: Final[str] = "#"
SYMBOL_PLACEHOLDER: Final[str] = "@"

# Имена опций host-системы
OPTION_DEFAULT_CURRENCY: Final[str] = "dbem_bookings_currency"
OPTION_CURRENCY_FORMAT: Final[str] = "dbem_bookings_currency_format"
OPTION_DECIMAL_POINT: Final[str] = "dbem_bookings_currency_decimal_point"
OPTION_THOUSANDS_SEP: Final[str] = "dbem_bookings_currency_thousands_sep"
OPTION_MULTIPLE_BOOKINGS: Final[str] = "dbem_multiple_bookings"

OPTION_DEFAULTS: Final[Mapping[str, Any]] = {
    OPTION_DEFAULT_CURRENCY: "USD",
    OPTION_CURRENCY_FORMAT: "@#",
    OPTION_DECIMAL_POINT: ".",
    OPTION_THOUSANDS_SEP: ",",
    OPTION_MULTIPLE_BOOKINGS: 0,
}

_TRUTHY_FLAGS: Final[frozenset] = frozenset({"1", "true", "yes", "on"})


def as_flag(value: Any) -> bool:
    """
    Приведение значения опции-флага к bool.

    Host хранит флаги как 0/1, '0'/'1', '' или bool.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY_FLAGS
    return False


def normalize_currency_code(value: Any) -> Optional[str]:
    """
    Нормализация кода валюты: strip + upper.

    Returns:
        Код или None для пустого/нестрокового значения
    """
    if not isinstance(value, str):
        return None
    code = value.strip().upper()
    return code or None


# =============================================================================
# OVERRIDE
# =============================================================================


class EventCurrencyOverride(BaseModel):
    """
    Override валюты для события.

    currency_code = None означает "использовать валюту сайта".
    Не более одного значения на event_id (гарантируется хранилищем).
    """

    event_id: EventId = Field(..., description="Идентификатор события host-системы")
    currency_code: Optional[str] = Field(
        None, pattern=CURRENCY_CODE_PATTERN, description="ISO 4217 код override"
    )

    model_config = {"frozen": True}

    @property
    def is_set(self) -> bool:
        return self.currency_code is not None


# =============================================================================
# ФОРМАТ ЦЕНЫ
# =============================================================================


class CurrencyFormatTemplate(BaseModel):
    """
    Шаблон форматирования цены.

    template содержит ровно один '@' (символ валюты) и ровно один '#' (сумма),
    например '@#', '# @', '@ #'.
    """

    template: str = Field("@#", description="Шаблон с placeholder'ами '@' и '#'")
    decimal_point: str = Field(".", min_length=1)
    thousands_separator: str = Field(",", description="Может быть пустым или многосимвольным (&nbsp;)")

    model_config = {"frozen": True}

    @field_validator("template")
    @classmethod
    def validate_placeholders(cls, v: str) -> str:
        """Ровно по одному placeholder каждого вида"""
        if v.count(AMOUNT_PLACEHOLDER) != 1 or v.count(SYMBOL_PLACEHOLDER) != 1:
            raise ValueError(
                f"Currency format {v!r} must contain exactly one "
                f"'{AMOUNT_PLACEHOLDER}' and one '{SYMBOL_PLACEHOLDER}'"
            )
        return v


# =============================================================================
# НАСТРОЙКИ САЙТА
# =============================================================================


class SiteSettings(BaseModel):
    """
    Снапшот опций сайта, относящихся к валюте бронирований.

    Читается из SettingsProvider на каждую операцию (опции принадлежат host
    и могут меняться между запросами).
    """

    default_currency: str = Field("USD", pattern=CURRENCY_CODE_PATTERN)
    format_template: CurrencyFormatTemplate = Field(default_factory=CurrencyFormatTemplate)
    multiple_bookings: bool = Field(
        False, description="Multi-booking mode: per-event override отключены"
    )

    model_config = {"frozen": True}

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "SiteSettings":
        """
        Построение из словаря опций host-системы.

        Raises:
            jsonschema.ValidationError: если снапшот опций нарушает контракт
        """
        snapshot: Dict[str, Any] = {**OPTION_DEFAULTS, **dict(options)}
        validate_site_options(snapshot)

        return cls(
            default_currency=snapshot[OPTION_DEFAULT_CURRENCY],
            format_template=CurrencyFormatTemplate(
                template=snapshot[OPTION_CURRENCY_FORMAT],
                decimal_point=snapshot[OPTION_DECIMAL_POINT],
                thousands_separator=snapshot[OPTION_THOUSANDS_SEP],
            ),
            multiple_bookings=as_flag(snapshot[OPTION_MULTIPLE_BOOKINGS]),
        )

    @classmethod
    def from_provider(cls, provider) -> "SiteSettings":
        """Построение через SettingsProvider.get(name, default)."""
        return cls.from_options(
            {name: provider.get(name, default) for name, default in OPTION_DEFAULTS.items()}
        )


# =============================================================================
# HOST VALUE OBJECTS
# =============================================================================


class Event(BaseModel):
    """Событие host-системы (только поля, нужные плагину)."""

    post_id: EventId
    name: str = ""

    model_config = {"frozen": True}


class Ticket(BaseModel):
    """Тип билета события."""

    ticket_id: EventId
    event: Event
    price: Decimal = Decimal("0")

    model_config = {"frozen": True}


class TicketBooking(BaseModel):
    """Строка бронирования: билет и количество мест."""

    ticket: Ticket
    spaces: int = Field(1, ge=0)

    model_config = {"frozen": True}


class Booking(BaseModel):
    """Бронирование события."""

    booking_id: EventId
    event: Event
    price: Decimal = Decimal("0")
    ticket_bookings: List[TicketBooking] = Field(default_factory=list)

    model_config = {"frozen": True}


class BookingsTable(BaseModel):
    """
    Таблица бронирований в админке.

    Mutable: host-hook 'em_bookings_table' меняет список колонок in-place.
    """

    cols: List[str] = Field(default_factory=list)

"""
Конфигурация плагина.

Имена ключей и полей совпадают с теми, что уже лежат в базах сайтов
(post meta, поля форм, колонки таблицы бронирований) — менять их нельзя без
миграции данных.
"""

from dataclasses import dataclass
from typing import Final

EVENT_CURRENCY_META_KEY: Final[str] = "star_em_event_currency"


@dataclass(frozen=True)
class PluginConfig:
    """Конфигурация плагина currency-per-event."""

    # Persisted state
    meta_key: str = EVENT_CURRENCY_META_KEY

    # Поле select в формах редактирования события
    form_field: str = "dbem_bookings_currency"

    # Таблица бронирований в админке
    price_column: str = "booking_currency_price"
    price_column_label: str = "Total"
    replaced_column: str = "booking_price"
    actions_column: str = "actions"

    # Приоритеты handlers (меньше — раньше)
    default_priority: int = 10
    bookings_table_priority: int = 20  # после того, как host собрал таблицу

"""Currency Override Store — чтение/запись override валюты события.

Persisted state: одна строка на событие в per-event metadata host-системы под
ключом star_em_event_currency. Отсутствие значения = "валюта сайта".

Правила:
- get_override возвращает None, если override не задан, битый, или включён
  multi-booking mode (флаг сайта, отключающий все per-event override)
- set_override с пустым значением удаляет override
- авторизация записи — ответственность вызывающего кода
"""

import logging
from typing import Any, Optional

from em_currency.core.config import EVENT_CURRENCY_META_KEY
from em_currency.core.domain.models import (
    OPTION_DEFAULTS,
    OPTION_MULTIPLE_BOOKINGS,
    EventCurrencyOverride,
    EventId,
    as_flag,
    normalize_currency_code,
)
from em_currency.core.exceptions import InvalidCurrencyCode

logger = logging.getLogger(__name__)


class CurrencyOverrideStore:
    """Хранилище override валюты поверх MetadataStore."""

    def __init__(self, metadata, settings, meta_key: str = EVENT_CURRENCY_META_KEY):
        """
        Args:
            metadata: MetadataStore host-системы
            settings: SettingsProvider (для флага multi-booking mode)
            meta_key: ключ post meta
        """
        self.metadata = metadata
        self.settings = settings
        self.meta_key = meta_key

    def multiple_bookings_enabled(self) -> bool:
        """Multi-booking mode читается на каждый вызов: опция может измениться."""
        return as_flag(
            self.settings.get(OPTION_MULTIPLE_BOOKINGS, OPTION_DEFAULTS[OPTION_MULTIPLE_BOOKINGS])
        )

    def get_stored(self, event_id: EventId) -> Optional[str]:
        """
        Сохранённый override без учёта multi-booking mode.

        Битое значение (не ISO 4217 код) считается отсутствующим.
        """
        raw = self.metadata.get(event_id, self.meta_key)
        code = normalize_currency_code(raw)
        if code is None:
            return None

        try:
            return EventCurrencyOverride(event_id=event_id, currency_code=code).currency_code
        except ValueError:
            logger.warning(
                "Ignoring malformed currency override %r for event %r", raw, event_id
            )
            return None

    def get_override(self, event_id: EventId) -> Optional[str]:
        """
        Действующий override события.

        Returns:
            ISO 4217 код или None (нет override / multi-booking mode)
        """
        if self.multiple_bookings_enabled():
            return None
        return self.get_stored(event_id)

    def get(self, event_id: EventId) -> EventCurrencyOverride:
        """Действующий override как модель."""
        return EventCurrencyOverride(event_id=event_id, currency_code=self.get_override(event_id))

    def set_override(self, event_id: EventId, currency_code: Any) -> Optional[str]:
        """
        Запись или удаление override.

        Args:
            event_id: идентификатор события
            currency_code: код валюты; None или пустая строка удаляют override

        Returns:
            Сохранённый (нормализованный) код или None после удаления

        Raises:
            InvalidCurrencyCode: если код не соответствует ISO 4217 формату
        """
        code = normalize_currency_code(currency_code)
        if code is None:
            self.clear_override(event_id)
            return None

        try:
            override = EventCurrencyOverride(event_id=event_id, currency_code=code)
        except ValueError:
            raise InvalidCurrencyCode(f"Invalid currency code: {currency_code!r}")

        self.metadata.set(event_id, self.meta_key, override.currency_code)
        logger.info("Currency override for event %r set to %s", event_id, override.currency_code)
        return override.currency_code

    def clear_override(self, event_id: EventId) -> None:
        self.metadata.delete(event_id, self.meta_key)
        logger.info("Currency override for event %r cleared", event_id)

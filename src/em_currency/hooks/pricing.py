"""Pricing hooks: определение override при получении цены и подмена символа при форматировании.

Цепочка в одной операции:
1. TICKET_GET_PRICE / BOOKING_GET_SPACES: событие ещё известно: override
   активируется в контексте, значение hook'а не меняется
2. CURRENCY_FORMATTED: события уже нет: код берётся из контекста, цена
   форматируется заново с символом override
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from em_currency.core.domain.models import CurrencyFormatTemplate, TicketBooking
from em_currency.hooks.base import HookHandler
from em_currency.hooks.registry import PriceFormatter, PriceLookupHandler
from em_currency.propagation.context import PropagationContext

logger = logging.getLogger(__name__)


class TicketPriceHook(HookHandler, PriceLookupHandler):
    """em_ticket_get_price: цена билета → override события билета в контекст."""

    def __call__(self, ticket_price: Any, ticket: Any, *, context: Optional[PropagationContext] = None) -> Any:
        with self.operation(context) as ctx:
            ctx.resolve_for_event(self.services.bookings.get_event(ticket))
        return ticket_price


class BookingSpacesHook(HookHandler, PriceLookupHandler):
    """em_booking_get_spaces: места строки бронирования → override события в контекст.

    Hook вызывается и для других объектов host-системы (бронирование целиком,
    мульти-бронирование); их контекст не трогается.
    """

    def __call__(self, spaces: Any, source: Any, *, context: Optional[PropagationContext] = None) -> Any:
        if not isinstance(source, TicketBooking):
            return spaces

        with self.operation(context) as ctx:
            ctx.resolve_for_event(self.services.bookings.get_event(source))
        return spaces


class CurrencyFormattedHook(HookHandler, PriceFormatter):
    """em_get_currency_formatted: переформатирование цены с символом override."""

    def __call__(
        self,
        formatted_price: str,
        price: Any,
        currency: str,
        template: str,
        *,
        context: Optional[PropagationContext] = None,
    ) -> str:
        with self.operation(context) as ctx:
            code = ctx.consume()

        if code is None:
            return formatted_price

        settings = self.site_settings()
        if settings is None:
            return formatted_price

        try:
            format_template = CurrencyFormatTemplate(
                template=template,
                decimal_point=settings.format_template.decimal_point,
                thousands_separator=settings.format_template.thousands_separator,
            )
        except ValidationError:
            logger.warning("Unusable currency format %r, keeping host formatting", template)
            return formatted_price

        return self.resolver(settings).format(price, code, format_template)

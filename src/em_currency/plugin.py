"""CurrencyPerEventPlugin — сборка плагина: проверка host-системы и регистрация handlers.

Если host-плагин бронирований не активен (нет каталога валют), регистрируется
только одно admin-уведомление; handlers не вызываются никогда, и сайт остаётся
в безопасном состоянии без override.
"""

import logging
from contextlib import contextmanager
from decimal import Decimal
from html import escape
from typing import Iterator, List, Optional, Union

from em_currency.core.config import PluginConfig
from em_currency.core.domain.currencies import CurrencyCatalogue
from em_currency.core.domain.host import HostServices
from em_currency.core.domain.models import EventId, SiteSettings
from em_currency.core.pricing.price_format import PriceFormatResolver
from em_currency.hooks.base import load_site_settings, site_default_currency
from em_currency.hooks.bookings_table import (
    BookingCurrencyPriceColumnHook,
    BookingsTableColsTemplateHook,
    BookingsTableColumnsHook,
)
from em_currency.hooks.event_form import EventCurrencyMetaBox, FrontEventFormFooter, SaveEventCurrency
from em_currency.hooks.gateways import PayPalChainedRequestHook, PayPalVarsHook, SageCurrencyHook
from em_currency.hooks.pricing import BookingSpacesHook, CurrencyFormattedHook, TicketPriceHook
from em_currency.hooks.registry import ExtensionPoint, ExtensionRegistry
from em_currency.propagation.context import PropagationContext, operation_scope
from em_currency.store.override_store import CurrencyOverrideStore

logger = logging.getLogger(__name__)

HOST_MISSING_MESSAGE = "Please ensure Events Manager is enabled for the Currencies per Event plugin to work."


class CurrencyPerEventPlugin:
    """Плагин currency-per-event.

    Usage:
        plugin = CurrencyPerEventPlugin(services)
        registry = plugin.register()

        with plugin.operation() as ctx:
            registry.apply_filters(ExtensionPoint.TICKET_GET_PRICE, price, ticket, context=ctx)
            registry.apply_filters(ExtensionPoint.CURRENCY_FORMATTED, text, price, "USD", "@#", context=ctx)
    """

    def __init__(
        self,
        services: HostServices,
        registry: Optional[ExtensionRegistry] = None,
        config: Optional[PluginConfig] = None,
    ):
        self.services = services
        self.registry = registry or ExtensionRegistry()
        self.config = config or PluginConfig()
        self.store = CurrencyOverrideStore(services.metadata, services.settings, self.config.meta_key)

        self._notices: List[str] = []
        self._registered = False

    # -------------------------------------------------------------------------
    # Host dependency
    # -------------------------------------------------------------------------

    def check_host(self) -> bool:
        """Проверка, что host-плагин бронирований активен.

        При отсутствии host-системы уведомление ставится в очередь один раз.
        """
        if self.services.currencies is not None:
            return True

        if HOST_MISSING_MESSAGE not in self._notices:
            logger.warning(HOST_MISSING_MESSAGE)
            self._notices.append(HOST_MISSING_MESSAGE)
        return False

    def admin_notices(self) -> List[str]:
        """HTML admin-уведомлений."""
        return [f'<div class="error"> <p>{escape(message)}</p></div>' for message in self._notices]

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self) -> ExtensionRegistry:
        """Регистрация handlers в фиксированном порядке.

        Повторный вызов ничего не регистрирует повторно.
        """
        if self._registered or not self.check_host():
            return self.registry

        args = (self.services, self.config, self.store)
        priority = self.config.default_priority

        handlers = [
            (ExtensionPoint.TICKET_GET_PRICE, TicketPriceHook(*args), priority),
            (ExtensionPoint.BOOKING_GET_SPACES, BookingSpacesHook(*args), priority),
            (ExtensionPoint.CURRENCY_FORMATTED, CurrencyFormattedHook(*args), priority),
            (ExtensionPoint.BOOKINGS_TABLE_COLS_TEMPLATE, BookingsTableColsTemplateHook(*args), priority),
            (ExtensionPoint.BOOKINGS_TABLE, BookingsTableColumnsHook(*args), self.config.bookings_table_priority),
            (ExtensionPoint.BOOKINGS_TABLE_ROW_CURRENCY_PRICE, BookingCurrencyPriceColumnHook(*args), priority),
            (ExtensionPoint.EVENT_META_BOXES, EventCurrencyMetaBox(*args), priority),
            (ExtensionPoint.FRONT_EVENT_FORM_FOOTER, FrontEventFormFooter(*args), priority),
            (ExtensionPoint.SAVE_POST, SaveEventCurrency(*args), priority),
            (ExtensionPoint.GATEWAY_SAGE_CURRENCY, SageCurrencyHook(*args), priority),
            (ExtensionPoint.GATEWAY_PAYPAL_VARS, PayPalVarsHook(*args), priority),
            (ExtensionPoint.GATEWAY_PAYPAL_CHAINED_REQUEST, PayPalChainedRequestHook(*args), priority),
        ]
        for point, handler, handler_priority in handlers:
            self.registry.register(point, handler, handler_priority)

        self._registered = True
        logger.debug("Registered %d currency-per-event handlers", len(handlers))
        return self.registry

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    @contextmanager
    def operation(self) -> Iterator[PropagationContext]:
        """Контекст одной операции форматирования/транзакции."""
        with operation_scope(self.store) as context:
            yield context

    def format_event_price(self, event_id: EventId, amount: Union[Decimal, int, float, str]) -> str:
        """Цена в валюте события (или сайта, если override нет).

        Полный цикл одной операции: resolve → consume → format. Если опции
        форматирования сайта нарушают контракт, используется шаблон по
        умолчанию с валютой сайта.
        """
        settings = load_site_settings(self.services.settings) or SiteSettings(
            default_currency=site_default_currency(self.services)
        )
        resolver = PriceFormatResolver.from_settings(self.services.currencies or CurrencyCatalogue(), settings)
        with self.operation() as context:
            context.resolve_for_event(event_id)
            code = context.consume()
        return resolver.format(amount, code)

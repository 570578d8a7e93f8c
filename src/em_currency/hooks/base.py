"""Базовый класс handlers extension point'ов."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import jsonschema
import pydantic

from em_currency.core.config import PluginConfig
from em_currency.core.domain.host import HostServices, SettingsProvider
from em_currency.core.domain.models import (
    OPTION_DEFAULT_CURRENCY,
    OPTION_DEFAULTS,
    SiteSettings,
    normalize_currency_code,
)
from em_currency.core.pricing.price_format import PriceFormatResolver
from em_currency.propagation.context import PropagationContext, get_current_context, operation_scope
from em_currency.store.override_store import CurrencyOverrideStore

logger = logging.getLogger(__name__)


def load_site_settings(provider: SettingsProvider) -> Optional[SiteSettings]:
    """
    Снапшот опций сайта для handler'а.

    Опции принадлежат host-системе, и handler не должен падать внутри её
    фильтра: снапшот, нарушающий контракт, логируется и даёт None.
    Вызывающий код в этом случае оставляет значение host-системы как есть.
    """
    try:
        return SiteSettings.from_provider(provider)
    except jsonschema.ValidationError as e:
        logger.warning("Site currency options rejected (%s): %s", "/".join(map(str, e.path)), e.message)
    except pydantic.ValidationError as e:
        logger.warning("Site currency options rejected: %s", e)
    return None


def site_default_currency(services: HostServices) -> str:
    """Валюта сайта без проверки опций форматирования.

    Нужна формам, которым шаблон цены не важен.
    """
    default = OPTION_DEFAULTS[OPTION_DEFAULT_CURRENCY]
    code = normalize_currency_code(services.settings.get(OPTION_DEFAULT_CURRENCY, default))
    if code is None or (services.currencies is not None and code not in services.currencies):
        return default
    return code


class HookHandler:
    """
    Общие зависимости handlers: коллабораторы host-системы, конфигурация,
    хранилище override.

    Handlers stateless между вызовами: всё состояние операции живёт в
    PropagationContext.
    """

    def __init__(
        self,
        services: HostServices,
        config: Optional[PluginConfig] = None,
        store: Optional[CurrencyOverrideStore] = None,
    ):
        """
        Args:
            services: коллабораторы host-системы
            config: конфигурация плагина (default: PluginConfig())
            store: хранилище override (default: поверх services.metadata)
        """
        self.services = services
        self.config = config or PluginConfig()
        self.store = store or CurrencyOverrideStore(
            services.metadata, services.settings, self.config.meta_key
        )

    def site_settings(self) -> Optional[SiteSettings]:
        return load_site_settings(self.services.settings)

    def default_currency(self) -> str:
        return site_default_currency(self.services)

    def resolver(self, settings: SiteSettings) -> PriceFormatResolver:
        return PriceFormatResolver.from_settings(self.services.currencies, settings)

    @contextmanager
    def operation(self, context: Optional[PropagationContext]) -> Iterator[PropagationContext]:
        """Переданный контекст, контекст текущей операции или собственный
        короткоживущий operation_scope."""
        context = context or get_current_context()
        if context is not None:
            yield context
            return
        with operation_scope(self.store) as own_context:
            yield own_context

"""
Currency per event для host-плагина бронирований Events Manager.

Override валюты бронирований на уровне события и его распространение на
отображение цен, таблицу бронирований в админке и запросы к платёжным шлюзам.
"""

from em_currency.core.config import EVENT_CURRENCY_META_KEY, PluginConfig
from em_currency.core.domain.host import HostServices
from em_currency.hooks.registry import ExtensionPoint, ExtensionRegistry
from em_currency.plugin import CurrencyPerEventPlugin
from em_currency.propagation.context import PropagationContext, operation_scope
from em_currency.store.override_store import CurrencyOverrideStore

__version__ = "1.4.0"

__all__ = [
    "EVENT_CURRENCY_META_KEY",
    "PluginConfig",
    "HostServices",
    "ExtensionPoint",
    "ExtensionRegistry",
    "CurrencyPerEventPlugin",
    "PropagationContext",
    "operation_scope",
    "CurrencyOverrideStore",
]

"""Store — per-event override валюты поверх metadata host-системы."""

from .override_store import CurrencyOverrideStore

__all__ = [
    "CurrencyOverrideStore",
]

"""
Pricing для em_currency

Форматирование цен в валюте события или сайта.
"""

from em_currency.core.pricing.price_format import (
    PRICE_DECIMALS,
    PriceFormatResolver,
    format_price,
    number_format,
    render_template,
    resolve_currency_code,
    to_decimal,
)

__all__ = [
    "PRICE_DECIMALS",
    "PriceFormatResolver",
    "format_price",
    "number_format",
    "render_template",
    "resolve_currency_code",
    "to_decimal",
]

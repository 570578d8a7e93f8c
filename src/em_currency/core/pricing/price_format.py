"""
Price Format Resolver — Форматирование цены в валюте

Чистые функции без side effects: одинаковый вход всегда даёт одинаковую строку.

Правила:
- сумма округляется до 2 знаков (ROUND_HALF_UP, как number_format host-системы)
- разряды группируются по 3 цифры через thousands_separator
- '@' в шаблоне заменяется символом валюты, '#' суммой (за один проход)
- пустой или неизвестный код валюты → валюта сайта и её символ
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Final, Optional, Union

from em_currency.core.domain.models import (
    AMOUNT_PLACEHOLDER,
    SYMBOL_PLACEHOLDER,
    CurrencyFormatTemplate,
    normalize_currency_code,
)
from em_currency.core.exceptions import InvalidAmount

Amount = Union[Decimal, int, float, str]

PRICE_DECIMALS: Final[int] = 2

_PLACEHOLDER_RE: Final = re.compile(f"[{re.escape(AMOUNT_PLACEHOLDER)}{re.escape(SYMBOL_PLACEHOLDER)}]")


# =============================================================================
# ЧИСЛА
# =============================================================================


def to_decimal(amount: Amount) -> Decimal:
    """
    Приведение суммы к Decimal.

    float проходит через str(), чтобы 1234.5 не превратился в
    1234.4999999999999...

    Raises:
        InvalidAmount: для NaN/Inf и нечисловых строк
    """
    if isinstance(amount, Decimal):
        value = amount
    else:
        try:
            value = Decimal(str(amount).strip())
        except InvalidOperation:
            raise InvalidAmount(f"Amount is not a number: {amount!r}")

    if not value.is_finite():
        raise InvalidAmount(f"Amount must be finite: {amount!r}")
    return value


def number_format(
    amount: Amount,
    decimals: int = PRICE_DECIMALS,
    decimal_point: str = ".",
    thousands_separator: str = ",",
) -> str:
    """
    Форматирование числа с фиксированным числом знаков и группировкой разрядов.

    Args:
        amount: сумма
        decimals: число дробных знаков (>= 0)
        decimal_point: разделитель дробной части
        thousands_separator: разделитель тысяч (может быть пустым)

    Returns:
        Строка вида '1,234.50'

    Raises:
        InvalidAmount: если сумма не конечное число
        ValueError: если decimals < 0
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative: {decimals}")

    value = to_decimal(amount).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)

    # -0.00 после округления печатается без знака
    sign = "-" if value < 0 else ""
    integer_part, _, fraction = f"{abs(value):f}".partition(".")

    groups = []
    while len(integer_part) > 3:
        groups.insert(0, integer_part[-3:])
        integer_part = integer_part[:-3]
    groups.insert(0, integer_part)

    result = sign + thousands_separator.join(groups)
    if decimals:
        result += decimal_point + fraction
    return result


# =============================================================================
# ВАЛЮТА
# =============================================================================


def resolve_currency_code(
    currency_code: Optional[str],
    symbols,
    default_currency: str,
) -> str:
    """
    Код валюты для отображения: override если он известен провайдеру символов,
    иначе валюта сайта.
    """
    code = normalize_currency_code(currency_code)
    if code is None or symbols.get_symbol(code) is None:
        return default_currency
    return code


def render_template(template: str, symbol: str, number: str) -> str:
    """
    Подстановка символа и суммы в строку шаблона за один проход.

    Шаблон не проверяется: отсутствующий placeholder просто не подставляется,
    как str_replace в host-системе.
    """
    return _PLACEHOLDER_RE.sub(
        lambda m: symbol if m.group(0) == SYMBOL_PLACEHOLDER else number,
        template,
    )


def format_price(
    amount: Amount,
    currency_code: Optional[str],
    template: CurrencyFormatTemplate,
    *,
    symbols,
    default_currency: str,
) -> str:
    """
    Форматирование цены по шаблону сайта.

    Args:
        amount: сумма
        currency_code: код override (None/'' → валюта сайта)
        template: шаблон и разделители
        symbols: CurrencySymbolProvider
        default_currency: валюта сайта

    Returns:
        Например '£1,234.50' для ('1234.5', 'GBP', '@#')
    """
    code = resolve_currency_code(currency_code, symbols, default_currency)
    symbol = symbols.get_symbol(code) or code
    number = number_format(
        amount,
        PRICE_DECIMALS,
        template.decimal_point,
        template.thousands_separator,
    )

    return render_template(template.template, symbol, number)


class PriceFormatResolver:
    """
    Резолвер форматирования, привязанный к провайдеру символов и настройкам сайта.

    Удобная обёртка над format_price для кода, которому не нужно передавать
    шаблон и валюту сайта в каждый вызов.
    """

    def __init__(self, symbols, default_currency: str, template: Optional[CurrencyFormatTemplate] = None):
        """
        Args:
            symbols: CurrencySymbolProvider
            default_currency: валюта сайта
            template: шаблон (default: CurrencyFormatTemplate())
        """
        self.symbols = symbols
        self.default_currency = default_currency
        self.template = template or CurrencyFormatTemplate()

    @classmethod
    def from_settings(cls, symbols, settings) -> "PriceFormatResolver":
        """Из SiteSettings."""
        return cls(symbols, settings.default_currency, settings.format_template)

    def format(
        self,
        amount: Amount,
        currency_code: Optional[str] = None,
        template: Optional[CurrencyFormatTemplate] = None,
    ) -> str:
        return format_price(
            amount,
            currency_code,
            template or self.template,
            symbols=self.symbols,
            default_currency=self.default_currency,
        )

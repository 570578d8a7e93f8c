"""
Currencies — Каталог валют бронирований

Список кодов, названий и символов совпадает со списком, который поставляет
host-плагин бронирований (Events Manager). Каталог выступает default
реализацией CurrencySymbolProvider и источником опций для select'ов выбора
валюты.
"""

from typing import Final, Mapping, Optional

# =============================================================================
# КАТАЛОГ
# =============================================================================

CURRENCY_NAMES: Final[Mapping[str, str]] = {
    "EUR": "Euros",
    "USD": "U.S. Dollars",
    "GBP": "British Pounds",
    "CAD": "Canadian Dollars",
    "AUD": "Australian Dollars",
    "BRL": "Brazilian Reais",
    "CZK": "Czech Koruny",
    "DKK": "Danish Kroner",
    "HKD": "Hong Kong Dollars",
    "HUF": "Hungarian Forints",
    "ILS": "Israeli New Shekels",
    "JPY": "Japanese Yen",
    "MYR": "Malaysian Ringgit",
    "MXN": "Mexican Pesos",
    "TWD": "New Taiwan Dollars",
    "NZD": "New Zealand Dollars",
    "NOK": "Norwegian Kroner",
    "PHP": "Philippine Pesos",
    "PLN": "Polish Zlotys",
    "SGD": "Singapore Dollars",
    "SEK": "Swedish Kronor",
    "CHF": "Swiss Francs",
    "THB": "Thai Baht",
    "TRY": "Turkish Liras",
    "RUB": "Russian Ruble",
}

# "True" символы (не HTML entities)
CURRENCY_SYMBOLS: Final[Mapping[str, str]] = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "CAD": "$",
    "AUD": "$",
    "BRL": "R$",
    "CZK": "Kč",
    "DKK": "kr",
    "HKD": "$",
    "HUF": "Ft",
    "ILS": "₪",
    "JPY": "¥",
    "MYR": "RM",
    "MXN": "$",
    "TWD": "$",
    "NZD": "$",
    "NOK": "kr",
    "PHP": "Php",
    "PLN": "zł",
    "SGD": "$",
    "SEK": "kr",
    "CHF": "CHF",
    "THB": "฿",
    "TRY": "TL",
    "RUB": "₽",
}


class CurrencyCatalogue:
    """
    Каталог валют: названия и символы по коду.

    Реализует протокол CurrencySymbolProvider. Host может передать
    собственные словари, если его список валют отличается.
    """

    def __init__(
        self,
        names: Optional[Mapping[str, str]] = None,
        symbols: Optional[Mapping[str, str]] = None,
    ):
        self._names = dict(CURRENCY_NAMES if names is None else names)
        self._symbols = dict(CURRENCY_SYMBOLS if symbols is None else symbols)

    @property
    def names(self) -> Mapping[str, str]:
        """Названия валют в порядке каталога."""
        return self._names

    def __contains__(self, currency_code: object) -> bool:
        return currency_code in self._names

    def get_name(self, currency_code: str) -> Optional[str]:
        return self._names.get(currency_code)

    def get_symbol(self, currency_code: str) -> Optional[str]:
        """
        Символ валюты для отображения.

        Args:
            currency_code: ISO 4217 код (например, 'GBP')

        Returns:
            Символ или None если валюта неизвестна каталогу
        """
        if currency_code not in self._names:
            return None
        # Валюта в каталоге без отдельного символа отображается кодом
        return self._symbols.get(currency_code, currency_code)

    def label(self, currency_code: str) -> str:
        """Подпись для select: 'GBP - British Pounds'."""
        name = self._names.get(currency_code)
        return f"{currency_code} - {name}" if name else currency_code

"""
Исключения плагина.

Ядро не порождает фатальных ошибок в runtime-пути: отсутствующий, битый или
отключённый override всегда деградирует в валюту сайта. Исключения ниже
сигнализируют о некорректном вводе на границе (запись override, сумма,
регистрация hook'ов). Ошибки шаблона цены приходят как pydantic ValidationError.
"""


class CurrencyPluginError(Exception):
    """Базовое исключение плагина."""
    pass


class InvalidCurrencyCode(CurrencyPluginError, ValueError):
    """
    Код валюты не соответствует формату ISO 4217 (три заглавные буквы).

    Выбрасывается при записи override; при чтении битое значение
    игнорируется с fallback на валюту сайта.
    """
    pass


class InvalidAmount(CurrencyPluginError, ValueError):
    """Сумма не является конечным числом (NaN, Inf, нечисловая строка)."""
    pass


class UnknownExtensionPoint(CurrencyPluginError, KeyError):
    """Имя extension point не известно реестру."""
    pass

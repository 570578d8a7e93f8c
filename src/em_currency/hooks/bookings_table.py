"""Bookings table hooks: колонка Total в валюте события в админке.

- BookingsTableColsTemplateHook: в шаблоне колонок booking_price заменяется
  на booking_currency_price
- BookingsTableColumnsHook: колонка гарантированно видима, actions остаётся последней
- BookingCurrencyPriceColumnHook: значение ячейки; каждая строка это отдельная
  операция со своим контекстом
"""

from typing import Any, Dict, Optional

from em_currency.core.domain.models import Booking, BookingsTable
from em_currency.hooks.base import HookHandler
from em_currency.hooks.registry import BookingsTableHandler, ColumnsTemplateHandler, RowValueHandler
from em_currency.propagation.context import PropagationContext, operation_scope


class BookingsTableColsTemplateHook(HookHandler, ColumnsTemplateHandler):
    """em_bookings_table_cols_template (только в админке)."""

    def __call__(
        self,
        cols_template: Dict[str, str],
        *args: Any,
        context: Optional[PropagationContext] = None,
    ) -> Dict[str, str]:
        if not self.services.is_admin_request():
            return cols_template

        cols = {k: v for k, v in cols_template.items() if k != self.config.replaced_column}
        cols[self.config.price_column] = self.config.price_column_label
        return cols


class BookingsTableColumnsHook(HookHandler, BookingsTableHandler):
    """em_bookings_table: добавление колонки в видимые колонки таблицы."""

    def __call__(self, table: BookingsTable, *, context: Optional[PropagationContext] = None) -> BookingsTable:
        if self.config.price_column in table.cols:
            return table

        table.cols.append(self.config.price_column)

        # actions всегда последняя
        if self.config.actions_column in table.cols:
            table.cols.remove(self.config.actions_column)
            table.cols.append(self.config.actions_column)
        return table


class BookingCurrencyPriceColumnHook(HookHandler, RowValueHandler):
    """em_bookings_table_rows_col_booking_currency_price: сумма бронирования в валюте события."""

    def __call__(
        self,
        value: Any,
        booking: Booking,
        table: Optional[BookingsTable] = None,
        *,
        context: Optional[PropagationContext] = None,
    ) -> str:
        bookings = self.services.bookings

        # Новый контекст на строку: override соседней строки не протекает
        with operation_scope(self.store) as row_context:
            row_context.resolve_for_event(bookings.get_event(booking))
            code = row_context.consume()

        if code is None:
            return bookings.get_price(booking, True)

        settings = self.site_settings()
        if settings is None:
            return bookings.get_price(booking, True)

        return self.resolver(settings).format(bookings.get_price(booking, False), code)

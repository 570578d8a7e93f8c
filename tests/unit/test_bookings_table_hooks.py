"""Unit тесты для bookings table hooks.

Coverage:
- Шаблон колонок: замена booking_price только в админке
- Видимые колонки: добавление колонки, actions последней
- Ячейка Total: валюта события, fallback на форматирование host-системы
- Изоляция строк таблицы
"""

from dataclasses import replace

import pytest

from em_currency.core.domain.models import BookingsTable
from em_currency.hooks.bookings_table import (
    BookingCurrencyPriceColumnHook,
    BookingsTableColsTemplateHook,
    BookingsTableColumnsHook,
)
from em_currency.propagation.context import operation_scope
from tests.unit.factories import make_booking


@pytest.fixture
def admin_services(services):
    return replace(services, is_admin_request=lambda: True)


@pytest.fixture
def row_hook(services, store):
    return BookingCurrencyPriceColumnHook(services, store=store)


# =============================================================================
# COLUMNS
# =============================================================================


class TestColsTemplate:
    """em_bookings_table_cols_template"""

    def test_admin_replaces_price_column(self, admin_services):
        hook = BookingsTableColsTemplateHook(admin_services)
        cols = {"user_name": "Name", "booking_price": "Price", "actions": ""}

        result = hook(cols)

        assert result == {"user_name": "Name", "actions": "", "booking_currency_price": "Total"}
        # Исходный шаблон не меняется
        assert "booking_price" in cols

    def test_admin_without_price_column(self, admin_services):
        hook = BookingsTableColsTemplateHook(admin_services)

        assert hook({"user_name": "Name"}) == {"user_name": "Name", "booking_currency_price": "Total"}

    def test_front_end_unchanged(self, services):
        hook = BookingsTableColsTemplateHook(services)
        cols = {"booking_price": "Price"}

        assert hook(cols) is cols


class TestColumns:
    """em_bookings_table"""

    def test_column_added_before_actions(self, services):
        table = BookingsTable(cols=["user_name", "event_name", "actions"])

        BookingsTableColumnsHook(services)(table)

        assert table.cols == ["user_name", "event_name", "booking_currency_price", "actions"]

    def test_column_added_without_actions(self, services):
        table = BookingsTable(cols=["user_name"])

        BookingsTableColumnsHook(services)(table)

        assert table.cols == ["user_name", "booking_currency_price"]

    def test_existing_column_untouched(self, services):
        table = BookingsTable(cols=["booking_currency_price", "actions", "user_name"])

        BookingsTableColumnsHook(services)(table)

        assert table.cols == ["booking_currency_price", "actions", "user_name"]


# =============================================================================
# ROW VALUE
# =============================================================================


class TestRowPrice:
    """em_bookings_table_rows_col_booking_currency_price"""

    def test_override_currency(self, row_hook, store):
        store.set_override(2, "GBP")

        assert row_hook("", make_booking(2, "1234.5")) == "£1,234.50"

    def test_host_formatting_without_override(self, row_hook):
        assert row_hook("", make_booking(1, "10")) == "$10.00"

    def test_site_default_currency_and_format(self, row_hook, settings):
        settings.options.update(
            {
                "dbem_bookings_currency": "EUR",
                "dbem_bookings_currency_format": "# @",
                "dbem_bookings_currency_decimal_point": ",",
                "dbem_bookings_currency_thousands_sep": ".",
            }
        )

        assert row_hook("", make_booking(1, "1234.5")) == "1.234,50 €"

    def test_multiple_bookings_mode(self, row_hook, store, settings):
        store.set_override(2, "GBP")
        settings.options["dbem_multiple_bookings"] = 1

        assert row_hook("", make_booking(2, "10")) == "$10.00"

    def test_rows_do_not_leak(self, row_hook, store):
        """Строка события с override не влияет на следующую строку"""
        store.set_override(2, "GBP")
        table = BookingsTable(cols=["booking_currency_price"])

        rows = [row_hook("", make_booking(post_id, "10"), table) for post_id in (2, 1, 2)]

        assert rows == ["£10.00", "$10.00", "£10.00"]

    def test_row_ignores_outer_operation(self, row_hook, store):
        store.set_override(2, "GBP")

        with operation_scope(store) as page:
            page.resolve_for_event(2)
            assert row_hook("", make_booking(1, "10"), context=page) == "$10.00"
            # Контекст страницы не тронут строкой
            assert page.active_currency_code == "GBP"

    def test_html_entity_thousands_separator(self, row_hook, store, settings):
        settings.options["dbem_bookings_currency_thousands_sep"] = "&nbsp;"
        store.set_override(2, "GBP")

        assert row_hook("", make_booking(2, "1234.5")) == "£1&nbsp;234.50"

    def test_unusable_site_format_falls_back_to_host(self, row_hook, store, settings):
        """Формат сайта без '@': ячейка как у host-системы, без исключения"""
        settings.options["dbem_bookings_currency_format"] = "#"
        store.set_override(2, "GBP")

        assert row_hook("", make_booking(2, "1234.5")) == "1,234.50"

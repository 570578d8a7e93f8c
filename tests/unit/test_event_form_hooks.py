"""Unit тесты для event form hooks.

Coverage:
- Meta box: select с текущим override, сообщение в multi-booking mode
- Front-end форма: валюта сайта первой, пусто в multi-booking mode
- Save: nonce, права, ревизии, запись, удаление, битый код
"""

from dataclasses import replace

import pytest

from em_currency.hooks.event_form import (
    MULTIPLE_BOOKINGS_MESSAGE,
    EventCurrencyMetaBox,
    FrontEventFormFooter,
    SaveEventCurrency,
)

META_KEY = "star_em_event_currency"


class StubAuthorizer:
    """Authorizer с фиксированными ответами."""

    def __init__(self, nonce_ok=True, can_edit=True):
        self.nonce_ok = nonce_ok
        self.allowed = can_edit

    def verify_request(self, form):
        return self.nonce_ok

    def can_edit(self, event_id):
        return self.allowed


def save_hook(services, store, **authorizer_flags):
    return SaveEventCurrency(replace(services, authorizer=StubAuthorizer(**authorizer_flags)), store=store)


# =============================================================================
# META BOX
# =============================================================================


class TestMetaBox:
    def test_select_with_current_override(self, services, store):
        store.set_override(7, "GBP")

        html = EventCurrencyMetaBox(services, store=store)(7)

        assert "Default Currency: USD" in html
        assert '<select name="dbem_bookings_currency">' in html
        assert '<option value="">Use Default</option>' in html
        assert '<option value="GBP" selected="selected">British Pounds</option>' in html
        assert '<option value="EUR">Euros</option>' in html

    def test_no_selection_without_override(self, services, store):
        html = EventCurrencyMetaBox(services, store=store)(7)

        assert "selected" not in html

    def test_multiple_bookings_message(self, services, store, settings):
        settings.options["dbem_multiple_bookings"] = 1

        html = EventCurrencyMetaBox(services, store=store)(7)

        assert html == MULTIPLE_BOOKINGS_MESSAGE
        assert "<select" not in html

    def test_renders_with_unusable_format_option(self, services, store, settings):
        settings.options.update({"dbem_bookings_currency": "EUR", "dbem_bookings_currency_format": "#"})

        html = EventCurrencyMetaBox(services, store=store)(7)

        assert "Default Currency: EUR" in html


# =============================================================================
# FRONT-END FORM
# =============================================================================


class TestFrontEventFormFooter:
    def test_default_currency_first(self, services, store):
        html = FrontEventFormFooter(services, store=store)()

        assert html.startswith("<h3>Event Currency</h3>")
        first_option = html.index("<option")
        assert html[first_option:].startswith('<option value="">USD - U.S. Dollars</option>')
        assert '<option value="" disabled>------------------</option>' in html
        assert '<option value="JPY">JPY - Japanese Yen</option>' in html

    def test_existing_event_selects_override(self, services, store):
        store.set_override(7, "CHF")

        html = FrontEventFormFooter(services, store=store)(7)

        assert '<option value="CHF" selected="selected">CHF - Swiss Francs</option>' in html

    def test_unknown_site_currency_falls_back(self, services, store, settings):
        settings.options["dbem_bookings_currency"] = "dollars"

        html = FrontEventFormFooter(services, store=store)()

        assert '<option value="">USD - U.S. Dollars</option>' in html

    def test_multiple_bookings_renders_nothing(self, services, store, settings):
        settings.options["dbem_multiple_bookings"] = "1"

        assert FrontEventFormFooter(services, store=store)(7) == ""


# =============================================================================
# SAVE
# =============================================================================


class TestSaveEventCurrency:
    def test_submitted_currency_saved(self, services, store, metadata):
        result = save_hook(services, store)(7, "event", {"dbem_bookings_currency": "GBP"})

        assert result.written is True
        assert result.reason == "override_set"
        assert result.currency_code == "GBP"
        assert metadata.get(7, META_KEY) == "GBP"

    @pytest.mark.parametrize("form", [{}, {"dbem_bookings_currency": ""}])
    def test_missing_selection_clears(self, services, store, metadata, form):
        store.set_override(7, "GBP")

        result = save_hook(services, store)(7, "event", form)

        assert result.written is True
        assert result.reason == "override_cleared"
        assert result.currency_code is None
        assert metadata.get(7, META_KEY) is None

    def test_invalid_nonce_rejected(self, services, store):
        store.set_override(7, "GBP")

        result = save_hook(services, store, nonce_ok=False)(7, "event", {"dbem_bookings_currency": "EUR"})

        assert result.written is False
        assert result.reason == "invalid_nonce"
        assert store.get_override(7) == "GBP"

    def test_forbidden_rejected(self, services, store):
        result = save_hook(services, store, can_edit=False)(7, "event", {"dbem_bookings_currency": "EUR"})

        assert result.written is False
        assert result.reason == "forbidden"
        assert store.get_override(7) is None

    def test_revision_skipped(self, services, store):
        store.set_override(7, "GBP")

        result = save_hook(services, store)(7, "revision", {})

        assert result.written is False
        assert result.reason == "revision"
        assert store.get_override(7) == "GBP"

    def test_invalid_currency_rejected(self, services, store):
        store.set_override(7, "GBP")

        result = save_hook(services, store)(7, "event", {"dbem_bookings_currency": "Pounds"})

        assert result.written is False
        assert result.reason == "invalid_currency"
        assert store.get_override(7) == "GBP"

    def test_saved_override_round_trips(self, services, store):
        save_hook(services, store)(7, "event", {"dbem_bookings_currency": "eur"})

        assert store.get_override(7) == "EUR"

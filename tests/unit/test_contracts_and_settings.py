"""
Tests for JSON Schema contracts and site settings

Проверяет:
- Валидность самих схем и кэширование загрузчика
- Валидацию снапшота опций сайта
- Контракты payload'ов PayPal
- Построение SiteSettings из опций host-системы
"""

from pathlib import Path

import pytest
from jsonschema import ValidationError

from em_currency.core.contracts import (
    PAYPAL_VARS_CONTRACT,
    SITE_OPTIONS_CONTRACT,
    PayPalChainedRequestValidator,
    PayPalVarsValidator,
    SchemaLoader,
    SiteOptionsValidator,
    validate_paypal_chained_request,
    validate_paypal_vars,
    validate_site_options,
)
from em_currency.core.domain.host import DictSettingsProvider
from em_currency.core.domain.models import OPTION_DEFAULTS, SiteSettings, as_flag


@pytest.fixture
def valid_options():
    return dict(OPTION_DEFAULTS)


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    @pytest.mark.parametrize("name", ["site_options", "paypal_vars", "paypal_chained_request"])
    def test_schemas_load(self, name):
        schema = SchemaLoader().load_schema(name)

        assert schema["title"] == name

    def test_schema_cached(self):
        loader = SchemaLoader()

        assert loader.load_schema("paypal_vars") is loader.load_schema("paypal_vars")

    def test_validator_compiled_once(self):
        loader = SchemaLoader()

        assert loader.validator_for("site_options") is loader.validator_for("site_options")
        assert SiteOptionsValidator(loader=loader).schema is loader.load_schema("site_options")

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "nope")

    def test_invalid_schema(self, tmp_path):
        (tmp_path / "broken.json").write_text('{"type": 12}', encoding="utf-8")

        with pytest.raises(ValueError):
            SchemaLoader(Path(tmp_path)).load_schema("broken")


# =============================================================================
# SITE OPTIONS
# =============================================================================


class TestSiteOptionsContract:
    def test_defaults_valid(self, valid_options):
        validate_site_options(valid_options)

    @pytest.mark.parametrize(
        "option,value",
        [
            ("dbem_bookings_currency", "usd"),
            ("dbem_bookings_currency", "DOLLAR"),
            ("dbem_bookings_currency_format", "##"),
            ("dbem_bookings_currency_format", "@#@"),
            ("dbem_bookings_currency_decimal_point", ""),
            ("dbem_bookings_currency_thousands_sep", 0),
            ("dbem_multiple_bookings", None),
        ],
    )
    def test_violations(self, valid_options, option, value):
        valid_options[option] = value

        with pytest.raises(ValidationError):
            validate_site_options(valid_options)

    def test_missing_required(self, valid_options):
        del valid_options["dbem_bookings_currency"]

        assert not SiteOptionsValidator().is_valid(valid_options)
        assert len(list(SiteOptionsValidator().iter_errors(valid_options))) == 1


class TestPayPalContracts:
    def test_paypal_vars(self):
        validate_paypal_vars({"currency_code": "GBP", "amount": "10.00"})

        assert not PayPalVarsValidator().is_valid({"amount": "10.00"})
        assert not PayPalVarsValidator().is_valid({"currency_code": "gbp"})

    def test_shared_contract_instances(self):
        assert PAYPAL_VARS_CONTRACT.schema_name == "paypal_vars"
        assert SITE_OPTIONS_CONTRACT.is_valid(dict(OPTION_DEFAULTS))

    def test_describe_violations(self):
        assert PAYPAL_VARS_CONTRACT.describe({"currency_code": "GBP"}) == ""
        assert PAYPAL_VARS_CONTRACT.describe({"currency_code": "gbp"}).startswith("currency_code: ")

    def test_paypal_chained(self):
        validate_paypal_chained_request({"PayRequestFields": {"CurrencyCode": "GBP"}})

        validator = PayPalChainedRequestValidator()
        assert not validator.is_valid({"PayRequestFields": "PAY"})
        assert not validator.is_valid({"PayRequestFields": {}})
        assert not validator.is_valid({})


# =============================================================================
# SITE SETTINGS
# =============================================================================


class TestSiteSettings:
    def test_defaults(self):
        settings = SiteSettings.from_provider(DictSettingsProvider())

        assert settings.default_currency == "USD"
        assert settings.format_template.template == "@#"
        assert settings.format_template.decimal_point == "."
        assert settings.format_template.thousands_separator == ","
        assert settings.multiple_bookings is False

    def test_from_options(self):
        settings = SiteSettings.from_options(
            {
                "dbem_bookings_currency": "EUR",
                "dbem_bookings_currency_format": "# @",
                "dbem_bookings_currency_decimal_point": ",",
                "dbem_bookings_currency_thousands_sep": "",
                "dbem_multiple_bookings": "1",
            }
        )

        assert settings.default_currency == "EUR"
        assert settings.format_template.template == "# @"
        assert settings.format_template.thousands_separator == ""
        assert settings.multiple_bookings is True

    def test_html_entity_separator_accepted(self):
        settings = SiteSettings.from_options({"dbem_bookings_currency_thousands_sep": "&nbsp;"})

        assert settings.format_template.thousands_separator == "&nbsp;"

    def test_invalid_options_raise(self):
        with pytest.raises(ValidationError):
            SiteSettings.from_options({"dbem_bookings_currency": "euro"})

    @pytest.mark.parametrize(
        "value,expected",
        [(1, True), (0, False), ("1", True), ("0", False), ("", False), (True, True), (None, False), ("on", True)],
    )
    def test_as_flag(self, value, expected):
        assert as_flag(value) is expected

"""
Contract Validators — JSON Schema контракты на границе с host-системой

Контракты (Draft 2020-12, каталог schema/ внутри пакета):
- site_options: снапшот опций сайта, относящихся к валюте
- paypal_vars: переменные PayPal Standard после подстановки валюты
- paypal_chained_request: запрос PayPal Chained Payments после подстановки валюты

Схема компилируется в валидатор один раз; handlers пользуются готовыми
экземплярами SITE_OPTIONS_CONTRACT, PAYPAL_VARS_CONTRACT и
PAYPAL_CHAINED_REQUEST_CONTRACT.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional

import jsonschema
from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Схемы контрактов по имени файла без расширения.

    Каждая схема проходит meta-validation при первой загрузке; схема и
    скомпилированный валидатор кэшируются.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self.schema_dir = schema_dir or SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Contract schema directory not found: {self.schema_dir}")

        self._validators: Dict[str, Draft202012Validator] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Raises:
            FileNotFoundError: нет файла <schema_name>.json
            ValueError: схема не проходит meta-validation
        """
        return self.validator_for(schema_name).schema

    def validator_for(self, schema_name: str) -> Draft202012Validator:
        validator = self._validators.get(schema_name)
        if validator is not None:
            return validator

        path = self.schema_dir / f"{schema_name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"Contract schema not found: {path}")

        schema = json.loads(path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Contract schema {path.name} is not a valid Draft 2020-12 schema: {e.message}")

        validator = self._validators[schema_name] = Draft202012Validator(schema)
        return validator


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACTS
# =============================================================================


class ContractValidator:
    """Проверка payload'а по одному контракту."""

    schema_name: str = ""

    def __init__(self, schema_name: Optional[str] = None, loader: Optional[SchemaLoader] = None):
        self.schema_name = schema_name or self.schema_name
        self._validator = (loader or _SCHEMA_LOADER).validator_for(self.schema_name)

    @property
    def schema(self) -> Dict[str, Any]:
        return self._validator.schema

    def validate(self, data: Mapping[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: первое нарушение контракта
        """
        self._validator.validate(data)

    def is_valid(self, data: Mapping[str, Any]) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Mapping[str, Any]) -> Iterator[jsonschema.ValidationError]:
        return self._validator.iter_errors(data)

    def describe(self, data: Mapping[str, Any]) -> str:
        """Нарушения одной строкой для логов: 'path: message; ...'."""
        return "; ".join(
            f"{'/'.join(map(str, error.path)) or '<root>'}: {error.message}"
            for error in self.iter_errors(data)
        )


class SiteOptionsValidator(ContractValidator):
    schema_name = "site_options"


class PayPalVarsValidator(ContractValidator):
    schema_name = "paypal_vars"


class PayPalChainedRequestValidator(ContractValidator):
    schema_name = "paypal_chained_request"


SITE_OPTIONS_CONTRACT = SiteOptionsValidator()
PAYPAL_VARS_CONTRACT = PayPalVarsValidator()
PAYPAL_CHAINED_REQUEST_CONTRACT = PayPalChainedRequestValidator()


def validate_site_options(data: Mapping[str, Any]) -> None:
    """
    Raises:
        jsonschema.ValidationError: снапшот опций нарушает контракт
    """
    SITE_OPTIONS_CONTRACT.validate(data)


def validate_paypal_vars(data: Mapping[str, Any]) -> None:
    PAYPAL_VARS_CONTRACT.validate(data)


def validate_paypal_chained_request(data: Mapping[str, Any]) -> None:
    PAYPAL_CHAINED_REQUEST_CONTRACT.validate(data)

"""
Contract Validation Module

Валидация JSON контрактов на границе с host-системой: опции сайта и
payload'ы платёжных шлюзов.
"""

from .validators import (
    PAYPAL_CHAINED_REQUEST_CONTRACT,
    PAYPAL_VARS_CONTRACT,
    SCHEMA_DIR,
    SITE_OPTIONS_CONTRACT,
    ContractValidator,
    PayPalChainedRequestValidator,
    PayPalVarsValidator,
    SchemaLoader,
    SiteOptionsValidator,
    validate_paypal_chained_request,
    validate_paypal_vars,
    validate_site_options,
)

__all__ = [
    # Contracts
    "SCHEMA_DIR",
    "SITE_OPTIONS_CONTRACT",
    "PAYPAL_VARS_CONTRACT",
    "PAYPAL_CHAINED_REQUEST_CONTRACT",
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "SiteOptionsValidator",
    "PayPalVarsValidator",
    "PayPalChainedRequestValidator",
    # Functions
    "validate_site_options",
    "validate_paypal_vars",
    "validate_paypal_chained_request",
]

"""Gateway hooks: валюта события в запросах к платёжным шлюзам.

- SageCurrencyHook: em_gateway_sage_get_currency (строка валюты)
- PayPalVarsHook: em_gateway_paypal_get_paypal_vars (currency_code)
- PayPalChainedRequestHook: em_gateway_paypal_chained_paypal_request_data
  (PayRequestFields.CurrencyCode)

В multi-booking mode все handlers пропускают payload без изменений. Переданный
payload никогда не мутируется: при подмене возвращается копия.
"""

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from em_currency.core.contracts import PAYPAL_CHAINED_REQUEST_CONTRACT, PAYPAL_VARS_CONTRACT
from em_currency.core.domain.models import Booking
from em_currency.hooks.base import HookHandler
from em_currency.hooks.registry import GatewayCurrencyResolver
from em_currency.propagation.context import PropagationContext

logger = logging.getLogger(__name__)


class GatewayCurrencyHook(HookHandler, GatewayCurrencyResolver):
    """Общая логика: override события бронирования через контекст операции."""

    def booking_currency(
        self,
        booking: Booking,
        context: Optional[PropagationContext],
    ) -> Optional[str]:
        """
        Returns:
            Код override или None (нет override / multi-booking mode)
        """
        if self.store.multiple_bookings_enabled():
            return None

        with self.operation(context) as ctx:
            ctx.resolve_for_event(self.services.bookings.get_event(booking))
            return ctx.consume()


class SageCurrencyHook(GatewayCurrencyHook):
    def __call__(
        self,
        currency: str,
        booking: Booking,
        *args: Any,
        context: Optional[PropagationContext] = None,
    ) -> str:
        code = self.booking_currency(booking, context)
        return code if code is not None else currency


class PayPalVarsHook(GatewayCurrencyHook):
    def __call__(
        self,
        paypal_vars: Mapping[str, Any],
        booking: Booking,
        *args: Any,
        context: Optional[PropagationContext] = None,
    ) -> Mapping[str, Any]:
        code = self.booking_currency(booking, context)
        if code is None:
            return paypal_vars

        rewritten = dict(paypal_vars)
        rewritten["currency_code"] = code

        if not PAYPAL_VARS_CONTRACT.is_valid(rewritten):
            logger.warning(
                "PayPal vars for booking %r violate contract, left unchanged: %s",
                booking.booking_id,
                PAYPAL_VARS_CONTRACT.describe(rewritten),
            )
            return paypal_vars
        return rewritten


class PayPalChainedRequestHook(GatewayCurrencyHook):
    def __call__(
        self,
        request_data: Mapping[str, Any],
        booking: Booking,
        *args: Any,
        context: Optional[PropagationContext] = None,
    ) -> Mapping[str, Any]:
        code = self.booking_currency(booking, context)
        if code is None:
            return request_data

        fields = request_data.get("PayRequestFields")
        if fields is not None and not isinstance(fields, Mapping):
            logger.warning(
                "PayRequestFields of booking %r is %s, left unchanged",
                booking.booking_id,
                type(fields).__name__,
            )
            return request_data

        rewritten: Dict[str, Any] = copy.deepcopy(dict(request_data))
        rewritten["PayRequestFields"] = {**(rewritten.get("PayRequestFields") or {}), "CurrencyCode": code}

        if not PAYPAL_CHAINED_REQUEST_CONTRACT.is_valid(rewritten):
            logger.warning(
                "PayPal chained request for booking %r violates contract, left unchanged: %s",
                booking.booking_id,
                PAYPAL_CHAINED_REQUEST_CONTRACT.describe(rewritten),
            )
            return request_data
        return rewritten

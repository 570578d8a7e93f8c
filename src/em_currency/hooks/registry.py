"""Extension Registry — явный реестр handlers по extension point'ам host-системы.

Каждый extension point имеет:
- имя host-hook'а (сохраняется для совместимости с dispatch host-системы)
- вид: FILTER (значение проходит через цепочку handlers) или ACTION
  (handlers вызываются по очереди, результаты собираются)
- типизированный протокол handler'а

Порядок вызова детерминированный: по priority, при равенстве по порядку
регистрации. Каждый handler получает PropagationContext явно.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Union, runtime_checkable

from em_currency.core.domain.models import Booking, BookingsTable, EventId
from em_currency.core.exceptions import UnknownExtensionPoint
from em_currency.propagation.context import PropagationContext, get_current_context

logger = logging.getLogger(__name__)


class HookKind(str, Enum):
    FILTER = "FILTER"
    ACTION = "ACTION"


class ExtensionPoint(str, Enum):
    """Extension point'ы host-системы, которые использует плагин."""

    TICKET_GET_PRICE = "em_ticket_get_price"
    BOOKING_GET_SPACES = "em_booking_get_spaces"
    CURRENCY_FORMATTED = "em_get_currency_formatted"
    BOOKINGS_TABLE_COLS_TEMPLATE = "em_bookings_table_cols_template"
    BOOKINGS_TABLE = "em_bookings_table"
    BOOKINGS_TABLE_ROW_CURRENCY_PRICE = "em_bookings_table_rows_col_booking_currency_price"
    EVENT_META_BOXES = "add_meta_boxes_event"
    FRONT_EVENT_FORM_FOOTER = "em_front_event_form_footer"
    SAVE_POST = "save_post"
    GATEWAY_SAGE_CURRENCY = "em_gateway_sage_get_currency"
    GATEWAY_PAYPAL_VARS = "em_gateway_paypal_get_paypal_vars"
    GATEWAY_PAYPAL_CHAINED_REQUEST = "em_gateway_paypal_chained_paypal_request_data"

    @property
    def kind(self) -> HookKind:
        return HookKind.ACTION if self in _ACTIONS else HookKind.FILTER

    @property
    def protocol(self) -> type:
        """Протокол, который реализует handler этого point'а."""
        return _HANDLER_PROTOCOLS[self]


_ACTIONS = frozenset(
    {
        ExtensionPoint.BOOKINGS_TABLE,
        ExtensionPoint.EVENT_META_BOXES,
        ExtensionPoint.FRONT_EVENT_FORM_FOOTER,
        ExtensionPoint.SAVE_POST,
    }
)


# =============================================================================
# HANDLER PROTOCOLS
# =============================================================================


@runtime_checkable
class PriceLookupHandler(Protocol):
    """TICKET_GET_PRICE / BOOKING_GET_SPACES: наблюдает объект, значение не меняет."""

    def __call__(self, value: Any, source: Any, /, *, context: Optional[PropagationContext] = None) -> Any: ...


@runtime_checkable
class PriceFormatter(Protocol):
    """CURRENCY_FORMATTED: (formatted_price, price, currency, format) → formatted_price."""

    def __call__(
        self,
        formatted_price: str,
        price: Any,
        currency: str,
        template: str,
        /,
        *,
        context: Optional[PropagationContext] = None,
    ) -> str: ...


@runtime_checkable
class ColumnsTemplateHandler(Protocol):
    """BOOKINGS_TABLE_COLS_TEMPLATE: {колонка: подпись} → {колонка: подпись}."""

    def __call__(
        self,
        cols_template: Dict[str, str],
        *args: Any,
        context: Optional[PropagationContext] = None,
    ) -> Dict[str, str]: ...


@runtime_checkable
class BookingsTableHandler(Protocol):
    """BOOKINGS_TABLE: меняет видимые колонки таблицы in-place."""

    def __call__(self, table: BookingsTable, /, *, context: Optional[PropagationContext] = None) -> Any: ...


@runtime_checkable
class RowValueHandler(Protocol):
    """BOOKINGS_TABLE_ROW_CURRENCY_PRICE: значение ячейки строки бронирования."""

    def __call__(
        self,
        value: Any,
        booking: Booking,
        table: Optional[BookingsTable] = None,
        /,
        *,
        context: Optional[PropagationContext] = None,
    ) -> Any: ...


@runtime_checkable
class EventFormRenderer(Protocol):
    """EVENT_META_BOXES / FRONT_EVENT_FORM_FOOTER: HTML блока выбора валюты."""

    def __call__(self, event_id: EventId, /, *, context: Optional[PropagationContext] = None) -> str: ...


@runtime_checkable
class EventSaveHandler(Protocol):
    """SAVE_POST: сохранение отправленной формы события."""

    def __call__(
        self,
        event_id: EventId,
        post_type: str,
        form: Mapping[str, Any],
        /,
        *,
        context: Optional[PropagationContext] = None,
    ) -> Any: ...


@runtime_checkable
class GatewayCurrencyResolver(Protocol):
    """GATEWAY_*: payload шлюза → payload с валютой события."""

    def __call__(
        self,
        payload: Any,
        booking: Booking,
        *args: Any,
        context: Optional[PropagationContext] = None,
    ) -> Any: ...


_HANDLER_PROTOCOLS: Dict[ExtensionPoint, type] = {
    ExtensionPoint.TICKET_GET_PRICE: PriceLookupHandler,
    ExtensionPoint.BOOKING_GET_SPACES: PriceLookupHandler,
    ExtensionPoint.CURRENCY_FORMATTED: PriceFormatter,
    ExtensionPoint.BOOKINGS_TABLE_COLS_TEMPLATE: ColumnsTemplateHandler,
    ExtensionPoint.BOOKINGS_TABLE: BookingsTableHandler,
    ExtensionPoint.BOOKINGS_TABLE_ROW_CURRENCY_PRICE: RowValueHandler,
    ExtensionPoint.EVENT_META_BOXES: EventFormRenderer,
    ExtensionPoint.FRONT_EVENT_FORM_FOOTER: EventFormRenderer,
    ExtensionPoint.SAVE_POST: EventSaveHandler,
    ExtensionPoint.GATEWAY_SAGE_CURRENCY: GatewayCurrencyResolver,
    ExtensionPoint.GATEWAY_PAYPAL_VARS: GatewayCurrencyResolver,
    ExtensionPoint.GATEWAY_PAYPAL_CHAINED_REQUEST: GatewayCurrencyResolver,
}

Handler = Union[
    PriceLookupHandler,
    PriceFormatter,
    ColumnsTemplateHandler,
    BookingsTableHandler,
    RowValueHandler,
    EventFormRenderer,
    EventSaveHandler,
    GatewayCurrencyResolver,
    Callable[..., Any],
]


@dataclass(frozen=True)
class Registration:
    point: ExtensionPoint
    handler: Handler
    priority: int
    sequence: int


def _coerce_point(point: Union[ExtensionPoint, str]) -> ExtensionPoint:
    try:
        return ExtensionPoint(point)
    except ValueError:
        raise UnknownExtensionPoint(point)


# =============================================================================
# REGISTRY
# =============================================================================


class ExtensionRegistry:
    """Реестр handlers с детерминированным порядком вызова."""

    def __init__(self):
        self._registrations: Dict[ExtensionPoint, List[Registration]] = {}
        self._sequence = 0

    def register(
        self,
        point: Union[ExtensionPoint, str],
        handler: Handler,
        priority: int = 10,
    ) -> Registration:
        """
        Регистрация handler'а.

        Raises:
            UnknownExtensionPoint: если имя point'а неизвестно
            TypeError: если handler не реализует протокол point'а
        """
        point = _coerce_point(point)
        if not isinstance(handler, point.protocol):
            raise TypeError(f"{handler!r} does not implement {point.protocol.__name__} for {point.value}")

        registration = Registration(point, handler, priority, self._sequence)
        self._sequence += 1

        registrations = self._registrations.setdefault(point, [])
        registrations.append(registration)
        registrations.sort(key=lambda r: (r.priority, r.sequence))

        logger.debug("Registered %r on %s (priority %d)", handler, point.value, priority)
        return registration

    def handlers(self, point: Union[ExtensionPoint, str]) -> List[Handler]:
        return [r.handler for r in self._registrations.get(_coerce_point(point), [])]

    def has_handlers(self, point: Union[ExtensionPoint, str]) -> bool:
        return bool(self._registrations.get(_coerce_point(point)))

    def apply_filters(
        self,
        point: Union[ExtensionPoint, str],
        value: Any,
        *args: Any,
        context: Optional[PropagationContext] = None,
    ) -> Any:
        """
        Прогон значения через цепочку handlers FILTER point'а.

        Без handlers значение возвращается без изменений.

        Args:
            point: extension point
            value: значение, которое фильтруется
            *args: дополнительные аргументы host-hook'а
            context: контекст операции (default: текущий operation_scope)
        """
        point = _coerce_point(point)
        context = self._resolve_context(context)

        for handler in self.handlers(point):
            value = handler(value, *args, context=context)
        return value

    def do_action(
        self,
        point: Union[ExtensionPoint, str],
        *args: Any,
        context: Optional[PropagationContext] = None,
    ) -> List[Any]:
        """
        Вызов handlers ACTION point'а.

        Returns:
            Результаты handlers в порядке вызова
        """
        point = _coerce_point(point)
        context = self._resolve_context(context)
        return [handler(*args, context=context) for handler in self.handlers(point)]

    def _resolve_context(self, context: Optional[PropagationContext]) -> Optional[PropagationContext]:
        # Вне operation_scope handlers получают None и сами открывают
        # короткоживущий контекст
        if context is not None:
            return context
        return get_current_context()

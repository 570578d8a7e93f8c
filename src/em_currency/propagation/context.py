"""Propagation Context — перенос override валюты от event-aware к event-blind коду.

Hook форматирования цены host-системы получает только сумму и шаблон, без
события или билета. Override определяется раньше (получение цены билета,
мест бронирования) и переносится через контекст операции.

State machine на одну операцию форматирования/транзакции:
- IDLE → RESOLVED(code) → CONSUMED → IDLE
- IDLE → CONSUMED(None) → IDLE, если override нет

Контекст создаётся заново на каждую операцию (operation_scope) и никогда не
разделяется между запросами: override одной строки таблицы не может попасть в
форматирование другой.
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from em_currency.core.domain.models import EventId

logger = logging.getLogger(__name__)


class ContextState(str, Enum):
    """Состояние контекста операции."""

    IDLE = "IDLE"
    RESOLVED = "RESOLVED"
    CONSUMED = "CONSUMED"


@dataclass(frozen=True)
class ContextTransition:
    """Переход состояния контекста (для диагностики)."""

    previous_state: ContextState
    new_state: ContextState
    currency_code: Optional[str]
    event_id: Optional[EventId]
    reason: str


class PropagationContext:
    """Контекст одной операции форматирования/транзакции.

    resolve_for_event() всегда перезаписывает активный код: событие без
    override сбрасывает код, оставшийся от предыдущего события в той же
    операции.
    """

    def __init__(self, store):
        """
        Args:
            store: CurrencyOverrideStore
        """
        self.store = store

        self._state = ContextState.IDLE
        self._active_currency_code: Optional[str] = None
        self._source_event_id: Optional[EventId] = None
        self._transitions: List[ContextTransition] = []

    @property
    def state(self) -> ContextState:
        return self._state

    @property
    def active_currency_code(self) -> Optional[str]:
        return self._active_currency_code

    @property
    def source_event_id(self) -> Optional[EventId]:
        return self._source_event_id

    @property
    def transitions(self) -> List[ContextTransition]:
        return list(self._transitions)

    def resolve_for_event(self, event_id: EventId) -> Optional[str]:
        """Поиск override события и активация его в контексте.

        Args:
            event_id: идентификатор события

        Returns:
            Код override или None (нет override / multi-booking mode)
        """
        code = self.store.get_override(event_id)

        if code is None:
            self._transition(ContextState.IDLE, None, None, "no_override")
            return None

        self._transition(ContextState.RESOLVED, code, event_id, "override_resolved")
        return code

    def consume(self) -> Optional[str]:
        """Чтение активного кода downstream-потребителем.

        Потребитель не знает, какое событие дало код. None означает
        "использовать валюту сайта" и ошибкой не является.
        """
        code = self._active_currency_code
        reason = "consumed" if code is not None else "consumed_empty"
        self._transition(ContextState.CONSUMED, code, self._source_event_id, reason)
        return code

    def finish(self) -> None:
        """Завершение операции: возврат в IDLE."""
        self._transition(ContextState.IDLE, None, None, "operation_finished")

    def _transition(
        self,
        new_state: ContextState,
        currency_code: Optional[str],
        event_id: Optional[EventId],
        reason: str,
    ) -> None:
        transition = ContextTransition(
            previous_state=self._state,
            new_state=new_state,
            currency_code=currency_code,
            event_id=event_id,
            reason=reason,
        )
        self._transitions.append(transition)

        self._state = new_state
        self._active_currency_code = currency_code
        self._source_event_id = event_id

        logger.debug(
            "Propagation context %s -> %s (%s, code=%s, event=%r)",
            transition.previous_state.value,
            new_state.value,
            reason,
            currency_code,
            event_id,
        )


# =============================================================================
# REQUEST SCOPE
# =============================================================================

_current_context: ContextVar[Optional[PropagationContext]] = ContextVar(
    "em_currency_propagation_context", default=None
)


def get_current_context() -> Optional[PropagationContext]:
    """Контекст текущей операции или None вне operation_scope."""
    return _current_context.get()


@contextmanager
def operation_scope(store) -> Iterator[PropagationContext]:
    """Новый контекст на время одной операции.

    Контекст привязан к текущему потоку/таске через ContextVar; по выходе он
    возвращается в IDLE, а предыдущий контекст (если был) восстанавливается.

    Usage:
        with operation_scope(store) as ctx:
            ctx.resolve_for_event(event_id)
            ...
    """
    context = PropagationContext(store)
    token = _current_context.set(context)
    try:
        yield context
    finally:
        context.finish()
        _current_context.reset(token)

"""Propagation — перенос override валюты внутри одной операции.

- State machine IDLE → RESOLVED → CONSUMED → IDLE
- Контекст на операцию, без глобального состояния между запросами
"""

from .context import (
    ContextState,
    ContextTransition,
    PropagationContext,
    get_current_context,
    operation_scope,
)

__all__ = [
    "ContextState",
    "ContextTransition",
    "PropagationContext",
    "get_current_context",
    "operation_scope",
]

"""Event form hooks: выбор валюты при редактировании события и сохранение override.

- EventCurrencyMetaBox: блок "Currency" в редакторе события (админка)
- FrontEventFormFooter: select "Event Currency" в front-end форме подачи события
- SaveEventCurrency: сохранение выбранной валюты при save_post

Формы отдают пустое значение для "валюты сайта"; сохранение пустого или
отсутствующего поля удаляет override.
"""

import logging
from dataclasses import dataclass
from html import escape
from typing import Any, List, Mapping, Optional

from em_currency.core.domain.models import EventId
from em_currency.core.exceptions import InvalidCurrencyCode
from em_currency.hooks.base import HookHandler
from em_currency.hooks.registry import EventFormRenderer, EventSaveHandler
from em_currency.propagation.context import PropagationContext

logger = logging.getLogger(__name__)

MULTIPLE_BOOKINGS_MESSAGE = "Currencies cannot be set per event when multiple bookings mode is enabled."
SETTINGS_HINT = (
    "The currency for all events is configured under Events -> Settings -> Bookings -> Pricing Options. "
    "If you want this event to use a different currency to the above, select from the list below."
)

REVISION_POST_TYPE = "revision"


def _option(value: str, label: str, selected: bool = False, disabled: bool = False) -> str:
    attrs = f' value="{escape(value)}"'
    if selected:
        attrs += ' selected="selected"'
    if disabled:
        attrs += " disabled"
    return f"<option{attrs}>{escape(label)}</option>"


class EventCurrencyMetaBox(HookHandler, EventFormRenderer):
    """add_meta_boxes_event: блок выбора валюты в редакторе события."""

    title = "Currency"

    def __call__(self, event_id: EventId, *, context: Optional[PropagationContext] = None) -> str:
        if self.store.multiple_bookings_enabled():
            return escape(MULTIPLE_BOOKINGS_MESSAGE)

        current = self.store.get_stored(event_id)
        currencies = self.services.currencies

        options: List[str] = [_option("", "Use Default")]
        options.extend(
            _option(code, name, selected=(code == current))
            for code, name in currencies.names.items()
        )

        return (
            f"<p><strong>Default Currency: {escape(self.default_currency())}</strong></p>"
            f"<p>{escape(SETTINGS_HINT)}</p>"
            f'<select name="{escape(self.config.form_field)}">{"".join(options)}</select>'
        )


class FrontEventFormFooter(HookHandler, EventFormRenderer):
    """em_front_event_form_footer: select валюты в front-end форме события."""

    def __call__(
        self,
        event_id: Optional[EventId] = None,
        *,
        context: Optional[PropagationContext] = None,
    ) -> str:
        if self.store.multiple_bookings_enabled():
            return ""

        # Новое событие ещё не имеет id
        current = self.store.get_stored(event_id) if event_id is not None else None
        currencies = self.services.currencies

        options: List[str] = [
            _option("", currencies.label(self.default_currency())),
            _option("", "------------------", disabled=True),
        ]
        options.extend(
            _option(code, currencies.label(code), selected=(code == current))
            for code in currencies.names
        )

        return (
            "<h3>Event Currency</h3>"
            f'<select name="{escape(self.config.form_field)}">{"".join(options)}</select>'
        )


# =============================================================================
# SAVE
# =============================================================================


@dataclass(frozen=True)
class SaveResult:
    """Результат сохранения override."""

    written: bool
    reason: str
    event_id: EventId
    currency_code: Optional[str]
    details: str


class SaveEventCurrency(HookHandler, EventSaveHandler):
    """save_post: запись или удаление override из отправленной формы.

    Порядок проверок:
    1. Nonce формы (Authorizer.verify_request)
    2. Право на редактирование события (Authorizer.can_edit)
    3. Ревизии не сохраняются
    4. Поле задано и не пустое → запись, иначе → удаление

    Отказ на шагах 1-3 и битый код означают "запись не произошла", не ошибку.
    """

    def __call__(
        self,
        event_id: EventId,
        post_type: str,
        form: Mapping[str, Any],
        *,
        context: Optional[PropagationContext] = None,
    ) -> SaveResult:
        authorizer = self.services.authorizer

        if not authorizer.verify_request(form):
            return self._rejected(event_id, "invalid_nonce")

        if not authorizer.can_edit(event_id):
            return self._rejected(event_id, "forbidden")

        if post_type == REVISION_POST_TYPE:
            return SaveResult(
                written=False,
                reason="revision",
                event_id=event_id,
                currency_code=None,
                details="Revisions do not carry a currency override",
            )

        submitted = form.get(self.config.form_field)
        try:
            code = self.store.set_override(event_id, submitted)
        except InvalidCurrencyCode:
            logger.warning("Rejected currency %r submitted for event %r", submitted, event_id)
            return self._rejected(event_id, "invalid_currency")

        return SaveResult(
            written=True,
            reason="override_set" if code else "override_cleared",
            event_id=event_id,
            currency_code=code,
            details=f"{self.config.meta_key}={code}" if code else f"{self.config.meta_key} deleted",
        )

    def _rejected(self, event_id: EventId, reason: str) -> SaveResult:
        logger.warning("Currency override for event %r not saved: %s", event_id, reason)
        return SaveResult(
            written=False,
            reason=reason,
            event_id=event_id,
            currency_code=None,
            details=f"Write rejected: {reason}",
        )

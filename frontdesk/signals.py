"""
Front desk domain events.

State-changing services call :func:`emit` once their writes are done.
Receivers run only after the surrounding transaction commits and their
failures are logged, never raised, so audit or display problems cannot
undo or fail the business operation.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

# kwargs: action, actor, instance, detail
frontdesk_event = Signal()

QUEUE_CREATED = 'queue.created'
QUEUE_TRANSITIONED = 'queue.transitioned'
PREREG_SUBMITTED = 'preregistration.submitted'
PREREG_APPROVED = 'preregistration.approved'
PREREG_REJECTED = 'preregistration.rejected'


def _dispatch(action: str, actor, instance, detail: dict[str, Any]) -> None:
    results = frontdesk_event.send_robust(
        sender=instance.__class__, action=action, actor=actor, instance=instance, detail=detail
    )
    for receiver, result in results:
        if isinstance(result, Exception):
            logger.error(
                'event receiver %s failed for %s on %s#%s: %r',
                getattr(receiver, '__qualname__', receiver), action,
                instance.__class__.__name__, instance.pk, result,
            )


def emit(action: str, *, actor, instance, detail: Optional[dict[str, Any]] = None) -> None:
    """Publish ``action`` for ``instance`` once the current transaction commits."""
    payload = dict(detail or {})
    transaction.on_commit(lambda: _dispatch(action, actor, instance, payload))

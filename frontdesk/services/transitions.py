"""
Status lifecycle of a single queue entry.

    waiting -> serving -> served
    waiting -> skipped

``served`` and ``skipped`` are terminal.  Re-applying the current status
is accepted and changes nothing.
"""
from __future__ import annotations

import datetime
from typing import Optional

from django.utils import timezone
from rest_framework.exceptions import ValidationError

from frontdesk.exceptions import InvalidTransition
from frontdesk.models import QueueEntry, QueueStatus

TRANSITIONS: dict[QueueStatus, frozenset[QueueStatus]] = {
    QueueStatus.WAITING: frozenset({QueueStatus.SERVING, QueueStatus.SKIPPED}),
    QueueStatus.SERVING: frozenset({QueueStatus.SERVED}),
    QueueStatus.SERVED: frozenset(),
    QueueStatus.SKIPPED: frozenset(),
}


def parse_status(value) -> QueueStatus:
    try:
        return QueueStatus(value)
    except ValueError:
        raise ValidationError({'status': [f'"{value}" is not a valid queue status.']})


def can_transition(current, target) -> bool:
    current, target = QueueStatus(current), QueueStatus(target)
    return current == target or target in TRANSITIONS[current]


def apply_transition(entry: QueueEntry, target, *, now: Optional[datetime.datetime] = None) -> list[str]:
    """Move ``entry`` to ``target`` in memory.

    Returns the names of the fields that changed (empty for a no-op) so the
    caller can save only those.  ``called_at`` and ``served_at`` are only
    ever set once.
    """
    target = parse_status(target)
    current = QueueStatus(entry.status)
    if not can_transition(current, target):
        raise InvalidTransition(f'Cannot move queue entry #{entry.queue_number} from {current} to {target}.')
    if current == target:
        return []
    now = now or timezone.now()
    changed = ['status']
    entry.status = target
    if target == QueueStatus.SERVING and entry.called_at is None:
        entry.called_at = now
        changed.append('called_at')
    if target == QueueStatus.SERVED and entry.served_at is None:
        entry.served_at = now
        changed.append('served_at')
    return changed

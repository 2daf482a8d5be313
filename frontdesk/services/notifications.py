"""
Staff inbox.

Broadcast notifications (``user`` empty) are shared by every staff
member, so marking one read marks it read for the whole desk.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from django.db.models import Q

from frontdesk.exceptions import NotFound
from frontdesk.models import Notification, PreRegistration

logger = logging.getLogger(__name__)

INBOX_LIMIT = 50


def notify_staff(*, type: str, title: str, message: str, data: Optional[dict[str, Any]] = None,
                 user=None) -> Notification:
    return Notification.objects.create(user=user, type=type, title=title, message=message, data=data or {})


def notify_pre_registration(pre: PreRegistration) -> Notification:
    n = notify_staff(
        type=Notification.TYPE_PRE_REGISTRATION,
        title='New Pre-Registration',
        message=f'New pre-registration from {pre.full_name}',
        data={'preRegistrationId': pre.pk, 'patientName': pre.full_name},
    )
    logger.info('staff notified of pre-registration %s', pre.pk)
    return n


def visible_to(user):
    return Notification.objects.filter(Q(user__isnull=True) | Q(user=user))


def inbox(user, *, limit: int = INBOX_LIMIT) -> list[Notification]:
    return list(visible_to(user).order_by('-created_at', '-id')[:limit])


def unread_count(user) -> int:
    return visible_to(user).filter(is_read=False).count()


def _get(pk: int, user) -> Notification:
    n = visible_to(user).filter(pk=pk).first()
    if not n:
        raise NotFound('notification not found')
    return n


def mark_read(pk: int, user) -> Notification:
    n = _get(pk, user)
    if not n.is_read:
        n.is_read = True
        n.save(update_fields=['is_read'])
    return n


def mark_all_read(user) -> int:
    return visible_to(user).filter(is_read=False).update(is_read=True)


def delete(pk: int, user) -> None:
    _get(pk, user).delete()

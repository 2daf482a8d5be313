"""
Queue orchestration and read projections.

Writes go through :mod:`frontdesk.services.ledger` (creation) and
:mod:`frontdesk.services.transitions` (status changes).  Reads are plain
read-committed queries; a display may briefly lag a concurrent write.
"""
from __future__ import annotations

import datetime
import logging
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from frontdesk.exceptions import InvalidTransition, NotFound
from frontdesk.models import Patient, QueueEntry, QueueStatus, SystemSetting
from frontdesk.services import ledger
from frontdesk.services.system_settings import format_ticket, is_open, working_hours
from frontdesk.services.transitions import apply_transition, parse_status
from frontdesk.signals import emit, QUEUE_CREATED, QUEUE_TRANSITIONED

logger = logging.getLogger(__name__)


def _for_date(queue_date: datetime.date):
    return QueueEntry.objects.filter(queue_date=queue_date).select_related('patient')


def list_for_date(queue_date: datetime.date) -> list[QueueEntry]:
    return list(_for_date(queue_date).order_by('queue_number'))


def now_serving(queue_date: datetime.date) -> Optional[QueueEntry]:
    # If more than one entry is serving, the lowest number wins.
    return _for_date(queue_date).filter(status=QueueStatus.SERVING).order_by('queue_number').first()


def next_up(queue_date: datetime.date, limit: int) -> list[QueueEntry]:
    if limit <= 0:
        return []
    return list(_for_date(queue_date).filter(status=QueueStatus.WAITING).order_by('queue_number')[:limit])


def statistics(queue_date: datetime.date) -> dict[str, int]:
    counts = QueueEntry.objects.filter(queue_date=queue_date).aggregate(
        total=Count('id'),
        **{s.value: Count('id', filter=Q(status=s)) for s in QueueStatus},
    )
    return {k: v or 0 for k, v in counts.items()}


def get_entry(pk: int) -> QueueEntry:
    entry = QueueEntry.objects.select_related('patient').filter(pk=pk).first()
    if not entry:
        raise NotFound('queue entry not found')
    return entry


def create_walk_in(*, patient_id: int, reason_for_visit: str,
                   queue_date: Optional[datetime.date] = None, actor=None) -> QueueEntry:
    """Queue an already registered patient directly at the desk."""
    patient = Patient.objects.filter(pk=patient_id).first()
    if not patient:
        raise NotFound('patient not found')
    with transaction.atomic():
        entry = ledger.create_entry(patient=patient, reason_for_visit=reason_for_visit, queue_date=queue_date)
        emit(QUEUE_CREATED, actor=actor, instance=entry, detail={
            'queueNumber': entry.queue_number,
            'queueDate': entry.queue_date.isoformat(),
            'patientId': patient.pk,
        })
    return entry


def _ensure_single_serving(entry: QueueEntry) -> None:
    others = QueueEntry.objects.filter(
        queue_date=entry.queue_date, status=QueueStatus.SERVING
    ).exclude(pk=entry.pk)
    current = others.order_by('queue_number').first()
    if current:
        raise InvalidTransition(
            f'Queue #{current.queue_number} is still being served; finish it before calling #{entry.queue_number}.'
        )


@transaction.atomic
def transition(pk: int, target, *, actor=None) -> QueueEntry:
    """Move entry ``pk`` to status ``target`` and persist it."""
    target = parse_status(target)
    entry = QueueEntry.objects.select_for_update().filter(pk=pk).first()
    if not entry:
        raise NotFound('queue entry not found')
    previous = entry.status
    if settings.QUEUE_SINGLE_SERVING and target == QueueStatus.SERVING and previous != QueueStatus.SERVING:
        _ensure_single_serving(entry)
    changed = apply_transition(entry, target)
    if changed:
        entry.save(update_fields=changed + ['updated_at'])
        emit(QUEUE_TRANSITIONED, actor=actor, instance=entry, detail={
            'queueNumber': entry.queue_number,
            'queueDate': entry.queue_date.isoformat(),
            'from': previous,
            'to': entry.status,
        })
        logger.info('queue entry %s: %s -> %s', entry.pk, previous, entry.status)
    return entry


# Entries that still hold a place in line ahead of someone waiting.
ACTIVE_STATUSES = (QueueStatus.WAITING, QueueStatus.SERVING)


def estimated_wait_minutes(entry: QueueEntry, minutes_per_patient: int) -> Optional[int]:
    """Minutes until ``entry`` is likely called; ``None`` unless it is waiting."""
    if entry.status != QueueStatus.WAITING:
        return None
    ahead = QueueEntry.objects.filter(
        queue_date=entry.queue_date, status__in=ACTIVE_STATUSES, queue_number__lt=entry.queue_number
    ).count()
    return ahead * minutes_per_patient


def estimated_waits(entries, minutes_per_patient: int) -> dict[int, Optional[int]]:
    """:func:`estimated_wait_minutes` for every entry of one day, without extra queries.

    ``entries`` must hold every active entry of that day.
    """
    waits, ahead = {}, 0
    for e in sorted(entries, key=lambda e: e.queue_number):
        waits[e.pk] = ahead * minutes_per_patient if e.status == QueueStatus.WAITING else None
        if e.status in ACTIVE_STATUSES:
            ahead += 1
    return waits


def display_board(queue_date: datetime.date, *, system_settings: SystemSetting,
                  next_count: Optional[int] = None, at: Optional[datetime.datetime] = None) -> dict:
    """Public lobby screen: who is being served, who is next and roughly how long they wait."""
    if next_count is None:
        next_count = settings.QUEUE_DISPLAY_NEXT_COUNT
    prefix = system_settings.queue_number_prefix
    active = list(
        QueueEntry.objects.filter(queue_date=queue_date, status__in=ACTIVE_STATUSES).order_by('queue_number')
    )
    waits = estimated_waits(active, system_settings.average_consultation_minutes)
    serving = next((e for e in active if e.status == QueueStatus.SERVING), None)
    waiting = [e for e in active if e.status == QueueStatus.WAITING][:max(next_count, 0)]

    def ticket(e: QueueEntry) -> dict:
        return {
            'id': e.id,
            'queueNumber': e.queue_number,
            'ticket': format_ticket(e.queue_number, prefix),
            'estimatedWaitMinutes': waits[e.pk],
        }

    return {
        'date': queue_date.isoformat(),
        'hospitalName': system_settings.hospital_name,
        'workingHours': working_hours(system_settings),
        'isOpen': is_open(system_settings, at),
        'nowServing': ticket(serving) if serving else None,
        'nextUp': [ticket(e) for e in waiting],
        'waitingCount': sum(1 for e in active if e.status == QueueStatus.WAITING),
        'generatedAt': timezone.now().isoformat(),
    }

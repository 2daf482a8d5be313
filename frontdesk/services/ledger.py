"""
Queue ledger: per-day sequential numbering of queue entries.

Numbers come from a :class:`QueueCounter` row per ``queue_date``.  The
increment is a single ``UPDATE ... SET last_number = last_number + 1``,
which holds the row lock until the caller's transaction ends, so two
requests for the same day can never read the same value.  The first
request of a day creates the row; a concurrent creator loses on the
unique ``queue_date`` and retries against the row the winner created.
"""
from __future__ import annotations

import datetime
import logging
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F, Max
from django.utils import timezone

from frontdesk.exceptions import ConflictError
from frontdesk.models import Patient, QueueCounter, QueueEntry, QueueStatus

logger = logging.getLogger(__name__)


def _highest_assigned(queue_date: datetime.date) -> int:
    return QueueEntry.objects.filter(queue_date=queue_date).aggregate(m=Max('queue_number'))['m'] or 0


def peek_next_number(queue_date: Optional[datetime.date] = None) -> int:
    """Number the next entry for ``queue_date`` would get. Does not reserve it."""
    queue_date = queue_date or timezone.localdate()
    return _highest_assigned(queue_date) + 1


def next_number(queue_date: datetime.date) -> int:
    """Allocate and consume the next queue number for ``queue_date``.

    Must be called inside the transaction that inserts the entry; if that
    transaction rolls back, the number is released with it and the day's
    numbering stays contiguous.
    """
    attempts = max(1, settings.QUEUE_ALLOCATION_ATTEMPTS)
    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                bumped = QueueCounter.objects.filter(queue_date=queue_date).update(
                    last_number=F('last_number') + 1, updated_at=timezone.now()
                )
                if not bumped:
                    # Seed from existing rows so entries made before the
                    # counter existed keep their numbers.
                    counter = QueueCounter.objects.create(
                        queue_date=queue_date, last_number=_highest_assigned(queue_date) + 1
                    )
                    return counter.last_number
                return QueueCounter.objects.values_list('last_number', flat=True).get(queue_date=queue_date)
        except IntegrityError:
            logger.info('queue counter for %s created concurrently, retrying (%d/%d)', queue_date, attempt, attempts)
    raise ConflictError()


def create_entry(*, patient: Patient, reason_for_visit: str,
                 queue_date: Optional[datetime.date] = None) -> QueueEntry:
    """Append a ``waiting`` entry for ``patient`` to the queue of ``queue_date`` (default today)."""
    queue_date = queue_date or timezone.localdate()
    try:
        with transaction.atomic():
            number = next_number(queue_date)
            entry = QueueEntry.objects.create(
                queue_number=number,
                queue_date=queue_date,
                patient=patient,
                reason_for_visit=reason_for_visit,
                status=QueueStatus.WAITING,
            )
    except IntegrityError:
        logger.warning('queue number collision on %s for patient %s', queue_date, patient.pk)
        raise ConflictError()
    logger.info('queue entry #%d created for %s (patient %s)', entry.queue_number, queue_date, patient.pk)
    return entry

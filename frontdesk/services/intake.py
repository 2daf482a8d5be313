"""
Pre-registration intake.

Patients submit visit requests without an account.  Staff approve a
request, which turns it into a patient record plus today's queue entry,
or reject it.  A request can be acted on exactly once.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from django.db import transaction
from django.utils import timezone

from frontdesk.exceptions import InvalidState, NotFound
from frontdesk.models import Patient, PreRegistration, PreRegistrationStatus, QueueEntry
from frontdesk.services import ledger
from frontdesk.signals import emit, PREREG_APPROVED, PREREG_REJECTED, PREREG_SUBMITTED

logger = logging.getLogger(__name__)

# Every field a pre-registration collects, in the patient record's terms.
PATIENT_FIELDS = (
    'full_name',
    'date_of_birth',
    'gender',
    'address',
    'contact_number',
    'civil_status',
    'religion',
    'philhealth_id',
    'reason_for_visit',
)


def patient_fields(pre: PreRegistration) -> dict[str, Any]:
    return {name: getattr(pre, name) for name in PATIENT_FIELDS}


def submit(data: dict[str, Any]) -> PreRegistration:
    """Store a validated intake form as a pending request."""
    with transaction.atomic():
        pre = PreRegistration.objects.create(
            **{k: v for k, v in data.items() if k in PATIENT_FIELDS},
            status=PreRegistrationStatus.PENDING,
        )
        emit(PREREG_SUBMITTED, actor=None, instance=pre, detail={'fullName': pre.full_name})
    logger.info('pre-registration %s submitted', pre.pk)
    return pre


def list_pre_registrations(status: Optional[str] = None):
    qs = PreRegistration.objects.select_related('approved_by')
    if status:
        qs = qs.filter(status=status)
    return qs.order_by('-created_at', '-id')


def get_pre_registration(pk: int) -> PreRegistration:
    pre = PreRegistration.objects.select_related('approved_by').filter(pk=pk).first()
    if not pre:
        raise NotFound('pre-registration not found')
    return pre


def _lock_pending(pk: int) -> PreRegistration:
    pre = PreRegistration.objects.select_for_update().filter(pk=pk).first()
    if not pre:
        raise NotFound('pre-registration not found')
    if pre.status != PreRegistrationStatus.PENDING:
        raise InvalidState(f'Pre-registration {pk} is already {pre.status}.')
    return pre


@transaction.atomic
def approve(pk: int, *, actor) -> tuple[Patient, QueueEntry]:
    """Create the patient and today's queue entry, then mark the request approved.

    All three writes share one transaction: if any of them fails nothing
    is kept and the request stays pending.
    """
    pre = _lock_pending(pk)
    patient = Patient.objects.create(**patient_fields(pre))
    entry = ledger.create_entry(
        patient=patient, reason_for_visit=pre.reason_for_visit, queue_date=timezone.localdate()
    )
    pre.status = PreRegistrationStatus.APPROVED
    pre.approved_by = actor
    pre.approved_at = timezone.now()
    pre.save(update_fields=['status', 'approved_by', 'approved_at', 'updated_at'])
    emit(PREREG_APPROVED, actor=actor, instance=pre, detail={
        'patientId': patient.pk,
        'queueEntryId': entry.pk,
        'queueNumber': entry.queue_number,
        'queueDate': entry.queue_date.isoformat(),
    })
    logger.info('pre-registration %s approved: patient %s, queue #%d', pre.pk, patient.pk, entry.queue_number)
    return patient, entry


@transaction.atomic
def reject(pk: int, *, actor, reason: str = '') -> PreRegistration:
    pre = _lock_pending(pk)
    pre.status = PreRegistrationStatus.REJECTED
    pre.approved_by = actor
    pre.approved_at = timezone.now()
    pre.save(update_fields=['status', 'approved_by', 'approved_at', 'updated_at'])
    # The reason lives in the audit trail only.
    emit(PREREG_REJECTED, actor=actor, instance=pre, detail={'reason': reason})
    logger.info('pre-registration %s rejected', pre.pk)
    return pre

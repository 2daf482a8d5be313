"""
Unit tests for the queue entry status lifecycle.  No database needed:
transitions only touch the in-memory instance.
"""
import datetime

import pytest
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from frontdesk.exceptions import InvalidTransition
from frontdesk.models import QueueEntry, QueueStatus
from frontdesk.services.transitions import apply_transition, can_transition


def make_entry(status=QueueStatus.WAITING, **extra) -> QueueEntry:
    return QueueEntry(queue_number=4, reason_for_visit='checkup', status=status, **extra)


@pytest.mark.parametrize('current,target,allowed', [
    ('waiting', 'serving', True),
    ('waiting', 'skipped', True),
    ('waiting', 'served', False),
    ('serving', 'served', True),
    ('serving', 'waiting', False),
    ('serving', 'skipped', False),
    ('served', 'waiting', False),
    ('served', 'serving', False),
    ('skipped', 'waiting', False),
    ('skipped', 'serving', False),
])
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed


@pytest.mark.parametrize('status', list(QueueStatus))
def test_same_status_is_always_accepted(status):
    assert can_transition(status, status)


def test_calling_stamps_called_at_once():
    entry = make_entry()
    first = timezone.now()
    assert apply_transition(entry, 'serving', now=first) == ['status', 'called_at']
    assert entry.called_at == first

    later = first + datetime.timedelta(minutes=3)
    assert apply_transition(entry, 'serving', now=later) == []
    assert entry.called_at == first


def test_serving_then_served_keeps_called_at():
    entry = make_entry()
    called = timezone.now()
    apply_transition(entry, 'serving', now=called)
    served = called + datetime.timedelta(minutes=10)
    assert apply_transition(entry, 'served', now=served) == ['status', 'served_at']
    assert entry.status == QueueStatus.SERVED
    assert entry.called_at == called
    assert entry.served_at == served


def test_served_back_to_waiting_is_rejected_and_leaves_entry_alone():
    stamp = timezone.now()
    entry = make_entry(QueueStatus.SERVED, called_at=stamp, served_at=stamp)
    with pytest.raises(InvalidTransition):
        apply_transition(entry, 'waiting')
    assert entry.status == QueueStatus.SERVED
    assert entry.called_at == stamp and entry.served_at == stamp


def test_skip_only_changes_status():
    entry = make_entry()
    assert apply_transition(entry, 'skipped') == ['status']
    assert entry.called_at is None and entry.served_at is None
    with pytest.raises(InvalidTransition):
        apply_transition(entry, 'serving')


def test_existing_called_at_is_never_rewritten():
    # e.g. data fixed up by hand: waiting again but already called once
    stamp = timezone.now() - datetime.timedelta(hours=1)
    entry = make_entry(called_at=stamp)
    apply_transition(entry, 'serving')
    assert entry.called_at == stamp


def test_unknown_status_is_a_validation_error():
    with pytest.raises(ValidationError):
        apply_transition(make_entry(), 'attending')

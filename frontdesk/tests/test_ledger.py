import datetime
import logging
import threading

import pytest
from django.db import connection, IntegrityError, transaction

from frontdesk.exceptions import ConflictError
from frontdesk.models import QueueCounter, QueueEntry
from frontdesk.services import ledger

pytestmark = pytest.mark.django_db


def test_numbers_are_contiguous_from_one(make_patient, today):
    patient = make_patient()
    numbers = [ledger.create_entry(patient=patient, reason_for_visit='fever', queue_date=today).queue_number
               for _ in range(5)]
    assert numbers == [1, 2, 3, 4, 5]
    assert QueueCounter.objects.get(queue_date=today).last_number == 5


def test_new_date_restarts_at_one(make_patient):
    patient = make_patient()
    monday = datetime.date(2026, 3, 2)
    tuesday = monday + datetime.timedelta(days=1)
    for _ in range(7):
        ledger.create_entry(patient=patient, reason_for_visit='x', queue_date=monday)
    entry = ledger.create_entry(patient=patient, reason_for_visit='x', queue_date=tuesday)
    assert entry.queue_number == 1
    # monday's run is untouched
    assert ledger.create_entry(patient=patient, reason_for_visit='x', queue_date=monday).queue_number == 8


def test_entry_defaults_to_today_and_waiting(make_patient, today):
    entry = ledger.create_entry(patient=make_patient(), reason_for_visit='cough')
    assert entry.queue_date == today
    assert entry.status == 'waiting'
    assert entry.called_at is None and entry.served_at is None


def test_counter_is_seeded_from_existing_entries(make_patient, today):
    patient = make_patient()
    QueueEntry.objects.create(queue_number=1, queue_date=today, patient=patient, reason_for_visit='legacy')
    QueueEntry.objects.create(queue_number=2, queue_date=today, patient=patient, reason_for_visit='legacy')
    assert not QueueCounter.objects.filter(queue_date=today).exists()
    assert ledger.create_entry(patient=patient, reason_for_visit='new').queue_number == 3


def test_peek_does_not_consume(make_patient, today):
    patient = make_patient()
    assert ledger.peek_next_number(today) == 1
    assert ledger.peek_next_number(today) == 1
    ledger.create_entry(patient=patient, reason_for_visit='x')
    assert ledger.peek_next_number(today) == 2


def test_rolled_back_allocation_releases_the_number(make_patient, today):
    patient = make_patient()
    ledger.create_entry(patient=patient, reason_for_visit='x')
    with pytest.raises(RuntimeError):
        with transaction.atomic():
            ledger.create_entry(patient=patient, reason_for_visit='y')
            raise RuntimeError('request failed after allocation')
    assert ledger.create_entry(patient=patient, reason_for_visit='z').queue_number == 2
    assert sorted(QueueEntry.objects.filter(queue_date=today).values_list('queue_number', flat=True)) == [1, 2]


def test_lost_counter_creation_race_is_retried(monkeypatch, caplog, make_patient, today):
    real_create = QueueCounter.objects.create
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        if len(calls) == 1:
            raise IntegrityError('UNIQUE constraint failed: frontdesk_queuecounter.queue_date')
        return real_create(**kwargs)

    monkeypatch.setattr(QueueCounter.objects, 'create', create)
    with caplog.at_level(logging.INFO, logger='frontdesk.services.ledger'):
        entry = ledger.create_entry(patient=make_patient(), reason_for_visit='x')

    assert entry.queue_number == 1
    assert len(calls) == 2
    assert QueueCounter.objects.get(queue_date=today).last_number == 1
    assert any('retrying (1/5)' in r.getMessage() for r in caplog.records)


def test_allocation_gives_up_with_conflict(settings, monkeypatch, make_patient, today):
    settings.QUEUE_ALLOCATION_ATTEMPTS = 3
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        raise IntegrityError('UNIQUE constraint failed: frontdesk_queuecounter.queue_date')

    monkeypatch.setattr(QueueCounter.objects, 'create', create)
    with pytest.raises(ConflictError):
        ledger.create_entry(patient=make_patient(), reason_for_visit='x')
    assert len(calls) == 3
    assert not QueueEntry.objects.filter(queue_date=today).exists()


@pytest.mark.django_db(transaction=True)
def test_concurrent_creation_yields_unique_contiguous_numbers(make_patient, today):
    patient = make_patient()
    workers = 8
    barrier = threading.Barrier(workers)
    errors = []

    def work():
        try:
            barrier.wait()
            ledger.create_entry(patient=patient, reason_for_visit='rush', queue_date=today)
        except Exception as e:  # collected for the assertion below
            errors.append(e)
        finally:
            connection.close()

    threads = [threading.Thread(target=work) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    numbers = sorted(QueueEntry.objects.filter(queue_date=today).values_list('queue_number', flat=True))
    assert numbers == list(range(1, workers + 1))

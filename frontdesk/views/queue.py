"""
Queue endpoints.

Staff list a day's queue, add walk-ins and move entries through their
statuses.  The lobby display endpoint is public and exposes ticket
numbers only.
"""
from __future__ import annotations

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ..serializers.queue import (
    QueueCreateSerializer,
    QueueDateQuerySerializer,
    QueueTransitionSerializer,
    queue_entry_payload,
)
from ..services import queue as queue_service
from ..services.system_settings import format_ticket, get_system_settings


def _queue_date(request):
    q = QueueDateQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return q.validated_data.get('date') or timezone.localdate()


def _entry_with_ticket(request, entry, estimated_wait_minutes=None) -> dict:
    row = get_system_settings(request)
    if estimated_wait_minutes is None:
        estimated_wait_minutes = queue_service.estimated_wait_minutes(entry, row.average_consultation_minutes)
    return {
        **queue_entry_payload(entry, estimated_wait_minutes),
        'ticket': format_ticket(entry.queue_number, row.queue_number_prefix),
    }


@api_view(['GET'])
@permission_classes([AllowAny])
def queue_display(request):
    """Now serving plus the next few waiting tickets for the lobby screen."""
    queue_date = _queue_date(request)
    return Response(queue_service.display_board(queue_date, system_settings=get_system_settings(request)))


@api_view(['GET', 'POST'])
def queue_collection(request):
    """``GET``: entries for ``?date=`` (default today).  ``POST``: add a walk-in."""
    if request.method == 'GET':
        queue_date = _queue_date(request)
        entries = queue_service.list_for_date(queue_date)
        waits = queue_service.estimated_waits(entries, get_system_settings(request).average_consultation_minutes)
        return Response([_entry_with_ticket(request, e, waits[e.pk]) for e in entries])

    s = QueueCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    entry = queue_service.create_walk_in(
        patient_id=s.validated_data['patientId'],
        reason_for_visit=s.validated_data['reasonForVisit'],
        queue_date=s.validated_data.get('queueDate'),
        actor=request.user,
    )
    return Response(_entry_with_ticket(request, entry), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT'])
def queue_entry(request, pk: int):
    """``GET``: one entry.  ``PUT {"status": ...}``: transition it."""
    if request.method == 'GET':
        return Response(_entry_with_ticket(request, queue_service.get_entry(pk)))

    s = QueueTransitionSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    entry = queue_service.transition(pk, s.validated_data['status'], actor=request.user)
    # reload for the patient relation; transition() locks without joins
    return Response(_entry_with_ticket(request, queue_service.get_entry(entry.pk)))


@api_view(['GET'])
def queue_statistics(request):
    queue_date = _queue_date(request)
    return Response({'date': queue_date.isoformat(), **queue_service.statistics(queue_date)})

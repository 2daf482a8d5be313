"""
Pre-registration endpoints.

Submitting is public (and throttled per IP); reviewing, approving and
rejecting are staff-only.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle

from ..permissions import IsPublicSubmission, IsStaffRole
from ..serializers.preregistration import (
    PreRegistrationListQuerySerializer,
    PreRegistrationRejectSerializer,
    PreRegistrationSubmitSerializer,
    pre_registration_payload,
)
from ..serializers.queue import queue_entry_payload
from ..services import intake, queue as queue_service
from ..services.system_settings import get_system_settings
from ..throttling import PreRegistrationSubmitThrottle


@api_view(['GET', 'POST'])
@permission_classes([IsStaffRole | IsPublicSubmission])
@throttle_classes([PreRegistrationSubmitThrottle, UserRateThrottle])
def pre_registrations(request):
    """``POST``: public intake form.  ``GET``: staff review list (``?status=``)."""
    if request.method == 'POST':
        s = PreRegistrationSubmitSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        pre = intake.submit(s.validated_data)
        return Response({
            'message': 'Pre-registration submitted successfully. Please wait for approval.',
            'preRegistration': pre_registration_payload(pre),
        }, status=status.HTTP_201_CREATED)

    q = PreRegistrationListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = intake.list_pre_registrations(q.validated_data.get('status'))
    page = q.validated_data.get('page') or 1
    page_size = q.validated_data.get('pageSize') or 15
    total = qs.count()
    start = (page - 1) * page_size
    items = [pre_registration_payload(p) for p in qs[start:start + page_size]]
    return Response({'ok': True, 'data': items, 'pagination': {'total': total, 'page': page, 'pageSize': page_size}})


@api_view(['GET'])
def pre_registration_detail(request, pk: int):
    return Response(pre_registration_payload(intake.get_pre_registration(pk)))


@api_view(['POST'])
def pre_registration_approve(request, pk: int):
    patient, entry = intake.approve(pk, actor=request.user)
    pre = intake.get_pre_registration(pk)
    return Response({
        'message': 'Pre-registration approved successfully',
        'preRegistration': pre_registration_payload(pre),
        'patientId': patient.id,
        'queue': queue_entry_payload(entry, queue_service.estimated_wait_minutes(
            entry, get_system_settings(request).average_consultation_minutes)),
    })


@api_view(['POST'])
def pre_registration_reject(request, pk: int):
    s = PreRegistrationRejectSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    pre = intake.reject(pk, actor=request.user, reason=s.validated_data['reason'])
    return Response({
        'message': 'Pre-registration rejected successfully',
        'preRegistration': pre_registration_payload(pre),
    })

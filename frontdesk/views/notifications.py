"""
Staff notification inbox: list, unread badge count, mark read, delete.
"""
from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers.notification import notification_payload
from ..services import notifications


@api_view(['GET'])
def notification_list(request):
    return Response([notification_payload(n) for n in notifications.inbox(request.user)])


@api_view(['GET'])
def notification_unread_count(request):
    return Response({'count': notifications.unread_count(request.user)})


@api_view(['POST'])
def notification_mark_read(request, pk: int):
    notifications.mark_read(pk, request.user)
    return Response({'message': 'Notification marked as read'})


@api_view(['POST'])
def notification_mark_all_read(request):
    updated = notifications.mark_all_read(request.user)
    return Response({'message': 'All notifications marked as read', 'updated': updated})


@api_view(['DELETE'])
def notification_delete(request, pk: int):
    notifications.delete(pk, request.user)
    return Response({'message': 'Notification deleted successfully'})

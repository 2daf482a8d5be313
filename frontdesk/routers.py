"""
URL mappings for the front desk API.

Paths mirror the frontend's API client; trailing slashes are omitted
(``APPEND_SLASH = False``).
"""
from django.urls import path, include

from .views import health
from .views.preregistrations import (
    pre_registrations,
    pre_registration_detail,
    pre_registration_approve,
    pre_registration_reject,
)
from .views.queue import queue_display, queue_collection, queue_entry, queue_statistics
from .views.notifications import (
    notification_list,
    notification_unread_count,
    notification_mark_read,
    notification_mark_all_read,
    notification_delete,
)


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Pre-registrations
    path('api/pre-registrations', pre_registrations, name='pre-registrations'),
    path('api/pre-registrations/<int:pk>', pre_registration_detail, name='pre-registration-detail'),
    path('api/pre-registrations/<int:pk>/approve', pre_registration_approve, name='pre-registration-approve'),
    path('api/pre-registrations/<int:pk>/reject', pre_registration_reject, name='pre-registration-reject'),
    # Queue
    path('api/queue/display', queue_display, name='queue-display'),
    path('api/queue', queue_collection, name='queue'),
    path('api/queue/<int:pk>', queue_entry, name='queue-entry'),
    path('api/queue-statistics', queue_statistics, name='queue-statistics'),
    # Notifications
    path('api/notifications', notification_list, name='notifications'),
    path('api/notifications/unread-count', notification_unread_count, name='notification-unread-count'),
    path('api/notifications/read-all', notification_mark_all_read, name='notification-read-all'),
    path('api/notifications/<int:pk>/read', notification_mark_read, name='notification-read'),
    path('api/notifications/<int:pk>', notification_delete, name='notification-detail'),
]

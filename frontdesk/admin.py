"""
Django admin registrations for the front desk models.

Admins use ``/admin/`` to manage staff accounts and the hospital
settings row and to inspect queues and the audit trail.  Queue entries
and audit events are read-only here: numbers and status history must
only change through the API.
"""

from django.contrib import admin

from .models import (
    User,
    Patient,
    QueueCounter,
    QueueEntry,
    PreRegistration,
    SystemSetting,
    AuditEvent,
    Notification,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'is_staff', 'is_active')
    list_filter = ('role', 'is_active')
    search_fields = ('username', 'first_name', 'last_name')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'gender', 'date_of_birth', 'contact_number', 'created_at')
    list_filter = ('gender',)
    search_fields = ('full_name', 'contact_number', 'philhealth_id')


@admin.register(QueueEntry)
class QueueEntryAdmin(admin.ModelAdmin):
    list_display = ('queue_date', 'queue_number', 'patient', 'status', 'called_at', 'served_at')
    list_filter = ('queue_date', 'status')
    search_fields = ('patient__full_name', 'reason_for_visit')
    ordering = ('-queue_date', 'queue_number')
    readonly_fields = ('queue_number', 'queue_date', 'status', 'called_at', 'served_at')

    # entries are numbered by the API only
    def has_add_permission(self, request):
        return False


@admin.register(QueueCounter)
class QueueCounterAdmin(admin.ModelAdmin):
    list_display = ('queue_date', 'last_number', 'updated_at')
    readonly_fields = ('queue_date', 'last_number')


@admin.register(PreRegistration)
class PreRegistrationAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'status', 'approved_by', 'approved_at', 'created_at')
    list_filter = ('status',)
    search_fields = ('full_name', 'contact_number')
    readonly_fields = ('status', 'approved_by', 'approved_at')


@admin.register(SystemSetting)
class SystemSettingAdmin(admin.ModelAdmin):
    list_display = ('hospital_name', 'queue_number_prefix', 'working_hours_start', 'working_hours_end')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'object_type', 'object_id', 'user')
    list_filter = ('action', 'object_type')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'type', 'title', 'user', 'is_read')
    list_filter = ('type', 'is_read')
    search_fields = ('title', 'message')

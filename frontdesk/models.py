"""
Database models for the front desk.

Covers staff users, the externally owned patient record, the per-day
patient queue with its numbering counter, self-submitted
pre-registrations, the single-row system settings and the audit trail.
"""
from __future__ import annotations

import datetime

from django.contrib.auth.models import AbstractUser
from django.core.cache import cache
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Front desk staff account.

    Every role may work the queue and review pre-registrations; ``admin``
    additionally manages settings through the Django admin.
    """
    class Role(models.TextChoices):
        ADMIN = 'admin', 'Administrator'
        STAFF = 'staff', 'Front desk staff'
        DOCTOR = 'doctor', 'Doctor'

    role = models.CharField(max_length=10, choices=Role.choices, default=Role.STAFF)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Gender(models.TextChoices):
    MALE = 'male', 'Male'
    FEMALE = 'female', 'Female'
    OTHER = 'other', 'Other'


class Patient(models.Model):
    """Patient master record.

    The queue only ever creates patients (walk-in registration happens
    elsewhere); the fields mirror what a pre-registration collects.
    """
    full_name = models.CharField(max_length=255)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=Gender.choices)
    address = models.TextField()
    contact_number = models.CharField(max_length=20)
    civil_status = models.CharField(max_length=50, blank=True)
    religion = models.CharField(max_length=100, blank=True)
    philhealth_id = models.CharField(max_length=255, blank=True)
    reason_for_visit = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.full_name} (#{self.pk})"


class QueueCounter(models.Model):
    """Last queue number handed out for one calendar day."""
    queue_date = models.DateField(unique=True)
    last_number = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.queue_date:%F}: {self.last_number}"


class QueueStatus(models.TextChoices):
    WAITING = 'waiting', 'Waiting'
    SERVING = 'serving', 'Serving'
    SERVED = 'served', 'Served'
    SKIPPED = 'skipped', 'Skipped'


class QueueEntry(models.Model):
    """One patient's position in a single day's visit queue."""
    queue_number = models.PositiveIntegerField()
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='queue_entries')
    reason_for_visit = models.TextField()
    status = models.CharField(
        max_length=10, choices=QueueStatus.choices, default=QueueStatus.WAITING, db_index=True
    )
    called_at = models.DateTimeField(null=True, blank=True)
    served_at = models.DateTimeField(null=True, blank=True)
    queue_date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'queue'
        ordering = ['queue_date', 'queue_number']
        constraints = [
            models.UniqueConstraint(fields=['queue_date', 'queue_number'], name='unique_queue_number_per_day'),
        ]
        indexes = [
            models.Index(fields=['queue_date', 'status'], name='queue_date_status_idx'),
        ]
        verbose_name_plural = 'queue entries'

    def __str__(self) -> str:
        return f"#{self.queue_number} on {self.queue_date:%F} ({self.status})"


class PreRegistrationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class PreRegistration(models.Model):
    """A self-submitted visit request awaiting staff action."""
    full_name = models.CharField(max_length=255)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=Gender.choices)
    address = models.TextField()
    contact_number = models.CharField(max_length=20)
    civil_status = models.CharField(max_length=50, blank=True)
    religion = models.CharField(max_length=100, blank=True)
    philhealth_id = models.CharField(max_length=255, blank=True)
    reason_for_visit = models.TextField()
    status = models.CharField(
        max_length=10,
        choices=PreRegistrationStatus.choices,
        default=PreRegistrationStatus.PENDING,
        db_index=True,
    )
    approved_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='reviewed_pre_registrations'
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"{self.full_name} ({self.status})"


class SystemSetting(models.Model):
    """Hospital-wide settings. Only the first row is ever read."""
    CACHE_KEY = 'system-settings'

    hospital_name = models.CharField(max_length=255, default='MediQueue Hospital')
    working_hours_start = models.TimeField(default=datetime.time(8, 0))
    working_hours_end = models.TimeField(default=datetime.time(17, 0))
    average_consultation_minutes = models.PositiveIntegerField(default=15)
    queue_number_prefix = models.CharField(max_length=10, default='Q')
    auto_approve_preregistration = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        cache.delete(self.CACHE_KEY)

    def __str__(self) -> str:
        return self.hospital_name


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.object_type}#{self.object_id} by {self.user_id}"


class Notification(models.Model):
    """Desk inbox item.  ``user`` empty means every staff member sees it."""
    TYPE_PRE_REGISTRATION = 'pre_registration'

    user = models.ForeignKey(User, on_delete=models.CASCADE, null=True, blank=True, related_name='notifications')
    type = models.CharField(max_length=50)
    title = models.CharField(max_length=255)
    message = models.TextField()
    data = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notification_user_read_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.type}: {self.title}"

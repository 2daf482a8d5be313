from rest_framework import serializers

from frontdesk.models import QueueStatus
from frontdesk.serializers.text import clean_text


class QueueDateQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)


class QueueCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    reasonForVisit = serializers.CharField()
    queueDate = serializers.DateField(required=False, allow_null=True)

    def validate_reasonForVisit(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Reason for visit is required.')
        return v


class QueueTransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=QueueStatus.choices)


def patient_summary(patient) -> dict:
    return {
        'id': patient.id,
        'fullName': patient.full_name,
        'gender': patient.gender,
        'contactNumber': patient.contact_number,
    }


def queue_entry_payload(entry, estimated_wait_minutes=None) -> dict:
    return {
        'id': entry.id,
        'queueNumber': entry.queue_number,
        'queueDate': entry.queue_date.isoformat(),
        'patientId': entry.patient_id,
        'patient': patient_summary(entry.patient),
        'reasonForVisit': entry.reason_for_visit,
        'status': entry.status,
        'calledAt': entry.called_at.isoformat() if entry.called_at else None,
        'servedAt': entry.served_at.isoformat() if entry.served_at else None,
        'estimatedWaitMinutes': estimated_wait_minutes,
        'createdAt': entry.created_at.isoformat(),
        'updatedAt': entry.updated_at.isoformat(),
    }

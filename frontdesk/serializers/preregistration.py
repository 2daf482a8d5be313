from django.utils import timezone
from rest_framework import serializers

from frontdesk.models import Gender, PreRegistrationStatus
from frontdesk.serializers.text import clean_text


class PreRegistrationSubmitSerializer(serializers.Serializer):
    fullName = serializers.CharField(max_length=255, source='full_name')
    dateOfBirth = serializers.DateField(source='date_of_birth')
    gender = serializers.ChoiceField(choices=Gender.choices)
    address = serializers.CharField(max_length=500)
    contactNumber = serializers.CharField(max_length=20, source='contact_number')
    civilStatus = serializers.CharField(max_length=50, required=False, allow_blank=True, default='', source='civil_status')
    religion = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    philhealthId = serializers.CharField(max_length=255, required=False, allow_blank=True, default='', source='philhealth_id')
    reasonForVisit = serializers.CharField(source='reason_for_visit')

    def validate_fullName(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('Full name must be at least 2 characters.')
        return v

    def validate_dateOfBirth(self, v):
        if v > timezone.localdate():
            raise serializers.ValidationError('Date of birth cannot be in the future.')
        return v

    def validate_address(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Address is required.')
        return v

    def validate_contactNumber(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Contact number is required.')
        return v

    def validate_civilStatus(self, v):
        return clean_text(v)

    def validate_religion(self, v):
        return clean_text(v)

    def validate_philhealthId(self, v):
        return clean_text(v)

    def validate_reasonForVisit(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Reason for visit is required.')
        return v


class PreRegistrationListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PreRegistrationStatus.choices, required=False)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)


class PreRegistrationRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')

    def validate_reason(self, v):
        return clean_text(v)


def pre_registration_payload(pre) -> dict:
    return {
        'id': pre.id,
        'fullName': pre.full_name,
        'dateOfBirth': pre.date_of_birth.isoformat(),
        'gender': pre.gender,
        'address': pre.address,
        'contactNumber': pre.contact_number,
        'civilStatus': pre.civil_status,
        'religion': pre.religion,
        'philhealthId': pre.philhealth_id,
        'reasonForVisit': pre.reason_for_visit,
        'status': pre.status,
        'approvedBy': pre.approved_by_id,
        'approvedByName': (pre.approved_by.get_full_name() or pre.approved_by.username) if pre.approved_by else None,
        'approvedAt': pre.approved_at.isoformat() if pre.approved_at else None,
        'createdAt': pre.created_at.isoformat(),
    }

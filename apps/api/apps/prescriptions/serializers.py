"""
Prescription serializers.
"""
from rest_framework import serializers

from apps.authz.serializers import UserSummarySerializer
from .models import Prescription


class PrescriptionMedicineSerializer(serializers.Serializer):
    """One line of a prescription (stored inline as JSON)."""
    name = serializers.CharField(max_length=255)
    composition = serializers.CharField(required=False, allow_blank=True, default='')
    dosage = serializers.CharField(required=False, allow_blank=True, default='')
    frequency = serializers.CharField(required=False, allow_blank=True, default='')
    duration = serializers.CharField(required=False, allow_blank=True, default='')
    quantity = serializers.IntegerField(min_value=1, default=1)
    price = serializers.FloatField(min_value=0, required=False, allow_null=True, default=None)


class PrescriptionCreateSerializer(serializers.Serializer):
    """POST /api/prescriptions/"""
    patient_name = serializers.CharField(max_length=255)
    patient_age = serializers.IntegerField(min_value=0, max_value=150)
    patient_email = serializers.EmailField(required=False, allow_blank=True, default='')
    diagnosis = serializers.CharField()
    doctor_notes = serializers.CharField(required=False, allow_blank=True, default='')
    medicines = PrescriptionMedicineSerializer(many=True, allow_empty=False)


class PrescriptionSerializer(serializers.ModelSerializer):
    """Read representation with the doctor joined as {name, email, role}."""
    doctor = UserSummarySerializer(read_only=True)
    doctor_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Prescription
        fields = [
            'id',
            'patient_name',
            'patient_age',
            'patient_email',
            'doctor_id',
            'doctor',
            'medicines',
            'diagnosis',
            'doctor_notes',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PrescriptionStatusSerializer(serializers.Serializer):
    """
    PATCH /api/prescriptions/<id>/status/

    Only shape is checked here; status validity is decided after the
    existence and ownership checks.
    """
    status = serializers.CharField(required=False, allow_blank=True, default='')


class PrescriptionEmailSerializer(serializers.Serializer):
    patient_email = serializers.EmailField(required=False, allow_blank=True, default='')

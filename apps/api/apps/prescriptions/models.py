"""
Prescription model.

The primary key is the auto-increment BigAutoField, so id order equals
insertion order; cursor pagination relies on this.
"""
from django.conf import settings
from django.db import models
from django.utils import timezone


class PrescriptionStatusChoices(models.TextChoices):
    """
    Prescription status.

    ACTIVE is initial. Any status may be set from any other; the only
    guard on a transition is authorization.
    """
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class Prescription(models.Model):
    """
    A prescription issued by a doctor.

    ``doctor`` is set at creation and never reassigned; deleting the user
    leaves the stored id in place, so only admins can act on the prescription
    afterwards. ``medicines`` holds a list of {name, composition, dosage,
    frequency, duration, quantity, price} entries copied from the catalog at
    issue time.
    """
    patient_name = models.CharField(max_length=255)
    patient_age = models.PositiveSmallIntegerField()
    patient_email = models.EmailField(max_length=255, blank=True, default='')
    doctor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True,
        related_name='prescriptions',
    )
    medicines = models.JSONField(default=list)
    diagnosis = models.TextField()
    doctor_notes = models.TextField(blank=True, default='')
    status = models.CharField(
        max_length=20,
        choices=PrescriptionStatusChoices.choices,
        default=PrescriptionStatusChoices.ACTIVE,
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'prescription'
        verbose_name = 'Prescription'
        verbose_name_plural = 'Prescriptions'
        indexes = [
            models.Index(fields=['doctor', 'status'], name='idx_rx_doctor_status'),
            models.Index(fields=['created_at'], name='idx_rx_created'),
        ]

    def __str__(self):
        return f'Prescription {self.pk} ({self.status})'

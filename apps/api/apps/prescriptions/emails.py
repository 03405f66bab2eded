"""
Prescription email to the patient.

Rendered from templates as plain text plus an HTML alternative and sent
through Django's mail framework (EMAIL_BACKEND).
"""
import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from rest_framework import status
from rest_framework.exceptions import APIException

from apps.core.observability import metrics

logger = logging.getLogger(__name__)

SUBJECT = 'Your E-Prescription'


class EmailDeliveryFailed(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Error sending email'
    default_code = 'email_failed'


def medicine_rows(medicines):
    """Table rows with display defaults for missing values."""
    rows = []
    for item in medicines or []:
        rows.append({
            'name': item.get('name') or '-',
            'dosage': item.get('dosage') or '-',
            'frequency': item.get('frequency') or 'As directed',
            'duration': item.get('duration') or '-',
            'quantity': item.get('quantity') or 1,
        })
    return rows


def build_prescription_email(prescription, recipient):
    doctor_name = prescription.doctor.name if prescription.doctor else 'your doctor'
    context = {
        'patient_name': prescription.patient_name or recipient,
        'patient_age': prescription.patient_age,
        'diagnosis': prescription.diagnosis,
        'doctor_notes': prescription.doctor_notes,
        'doctor_name': doctor_name,
        'rows': medicine_rows(prescription.medicines),
        'frontend_url': settings.FRONTEND_URL,
    }
    message = EmailMultiAlternatives(
        subject=SUBJECT,
        body=render_to_string('prescriptions/email.txt', context),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[recipient],
    )
    message.attach_alternative(render_to_string('prescriptions/email.html', context), 'text/html')
    return message


def send_prescription_email(prescription, recipient):
    """
    Send the prescription to ``recipient``.

    Raises:
        EmailDeliveryFailed: if the mail backend fails
    """
    try:
        build_prescription_email(prescription, recipient).send(fail_silently=False)
    except Exception as e:
        metrics.prescription_emails_total.labels(result='failure').inc()
        logger.error(
            'Prescription email failed',
            extra={
                'event': 'prescription_email_failed',
                'prescription_id': prescription.pk,
                'error_type': e.__class__.__name__,
            }
        )
        raise EmailDeliveryFailed()

    metrics.prescription_emails_total.labels(result='success').inc()

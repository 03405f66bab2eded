"""
Domain events logging helpers.

Provides structured event logging for business operations.
"""
from typing import Dict, Optional
from .logging import get_sanitized_logger, sanitize_dict

logger = get_sanitized_logger(__name__)


def log_domain_event(
    event_name: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    entity_ids: Optional[Dict[str, str]] = None,
    result: str = 'success',
    **extra_fields
):
    """
    Log a domain event with structured data.

    Args:
        event_name: Name of the event (e.g., 'prescription_status_changed')
        entity_type: Type of entity (e.g., 'Prescription', 'Notification')
        entity_id: ID of primary entity
        entity_ids: Dictionary of related entity IDs
        result: Result of operation (success, failure, denied, ...)
        **extra_fields: Additional fields to log (will be sanitized)

    Example:
        log_domain_event(
            'prescription_status_changed',
            entity_type='Prescription',
            entity_id=str(prescription.id),
            entity_ids={'doctor_id': str(prescription.doctor_id)},
            from_status='pending',
            to_status='dispensed',
        )
    """
    event_data = {
        'event': event_name,
        'result': result,
    }

    if entity_type:
        event_data['entity_type'] = entity_type

    if entity_id:
        event_data['entity_id'] = entity_id

    if entity_ids:
        event_data.update(entity_ids)

    event_data.update(sanitize_dict(extra_fields))

    if result in ['failure', 'error']:
        logger.error(f'Domain event: {event_name}', extra=event_data)
    elif result in ['warning', 'denied', 'not_found']:
        logger.warning(f'Domain event: {event_name}', extra=event_data)
    else:
        logger.info(f'Domain event: {event_name}', extra=event_data)


def log_prescription_transition(prescription, from_status, to_status, result='success', **extra):
    """Log prescription status transition event."""
    log_domain_event(
        'prescription_status_changed',
        entity_type='Prescription',
        entity_id=str(prescription.id),
        entity_ids={'doctor_id': str(prescription.doctor_id)},
        result=result,
        from_status=from_status,
        to_status=to_status,
        **extra
    )


def log_search_fallback(error):
    """Log that full-text search failed and substring matching took over."""
    log_domain_event(
        'medicine_search_fallback',
        entity_type='Medicine',
        result='warning',
        error_type=error.__class__.__name__,
    )

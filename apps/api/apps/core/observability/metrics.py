"""
Metrics instrumentation.

Prometheus counters and histograms for the HTTP layer and the
prescription/search/notification domain. Exposed at /api/metrics.
"""
import time
from functools import wraps

from prometheus_client import Counter, Histogram


class MetricsRegistry:
    """
    Central metrics registry for the E-Prescription API.

    Provides typed access to all application metrics.
    """

    def __init__(self):
        self._setup_metrics()

    def _setup_metrics(self):
        # ===================================================================
        # HTTP Metrics
        # ===================================================================
        self.http_requests_total = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['route', 'method', 'status']
        )

        self.http_request_duration_seconds = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration in seconds',
            ['route', 'method'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
        )

        self.exceptions_total = Counter(
            'exceptions_total',
            'Total exceptions',
            ['exception_type', 'location']
        )

        # ===================================================================
        # Cache Metrics
        # ===================================================================
        self.cache_requests_total = Counter(
            'cache_requests_total',
            'Response cache lookups',
            ['namespace', 'result']  # result: hit|miss
        )

        self.cache_errors_total = Counter(
            'cache_errors_total',
            'Cache backend failures (treated as miss)',
            ['operation']  # get|set|delete|delete_pattern
        )

        # ===================================================================
        # Medicine Search Metrics
        # ===================================================================
        self.medicine_search_total = Counter(
            'medicine_search_total',
            'Medicine searches by strategy',
            ['strategy']  # fulltext|substring
        )

        self.medicine_search_duration_seconds = Histogram(
            'medicine_search_duration_seconds',
            'Medicine search duration',
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
        )

        # ===================================================================
        # Prescription Metrics
        # ===================================================================
        self.prescriptions_created_total = Counter(
            'prescriptions_created_total',
            'Prescriptions created'
        )

        self.prescription_status_transition_total = Counter(
            'prescription_status_transition_total',
            'Prescription status updates',
            ['to_status', 'result']  # result: success|denied|not_found|invalid
        )

        self.prescription_emails_total = Counter(
            'prescription_emails_total',
            'Prescription emails sent',
            ['result']
        )

        # ===================================================================
        # Notification / Audit Metrics
        # ===================================================================
        self.notifications_created_total = Counter(
            'notifications_created_total',
            'Notifications persisted',
            ['type']
        )

        self.notification_push_total = Counter(
            'notification_push_total',
            'Real-time notification pushes',
            ['result']  # success|skipped|failure
        )

        self.audit_log_writes_total = Counter(
            'audit_log_writes_total',
            'Audit log writes',
            ['action', 'result']
        )

    def track_duration(self, histogram_metric):
        """
        Decorator to track function duration.

        Usage:
            @metrics.track_duration(metrics.medicine_search_duration_seconds)
            def search_medicines(query):
                ...
        """
        def decorator(func):
            @wraps(func)
            def wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return func(*args, **kwargs)
                finally:
                    histogram_metric.observe(time.time() - start_time)
            return wrapper
        return decorator


# Global metrics instance
metrics = MetricsRegistry()

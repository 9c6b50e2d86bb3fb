from prometheus_client import Counter, Histogram


class BookingMetrics:
    """
    Booking core metrics collector

    Tracks reservation outcomes (including lost compare-and-set races), refunds,
    notification delivery and chat traffic.
    """

    def __init__(self):
        # ========== Reservation Metrics ==========
        self.booking_attempts = Counter(
            'booking_attempts_total',
            'Booking attempts by outcome',
            ['result'],  # committed/validation_failed/insufficient_seats/conflict/error
        )

        self.booking_duration = Histogram(
            'booking_duration_seconds',
            'Create-booking processing time',
            buckets=[0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        self.seat_conflicts = Counter(
            'booking_seat_conflicts_total',
            'Conditional seat decrements that matched zero rows',
        )

        self.seat_restore_failures = Counter(
            'booking_seat_restore_failures_total',
            'Cancellations whose seat restore did not apply',
        )

        # ========== Cancellation Metrics ==========
        self.cancellations = Counter(
            'booking_cancellations_total',
            'Cancelled bookings by refund eligibility',
            ['refund_status'],  # pending/not_eligible
        )

        # ========== Notification Metrics ==========
        self.notification_deliveries = Counter(
            'notification_deliveries_total',
            'Notification deliveries by outcome',
            ['kind', 'result'],  # result: delivered/failed
        )

        # ========== Chat Metrics ==========
        self.chat_messages = Counter(
            'chat_messages_total',
            'Chat messages persisted',
            ['message_type'],
        )

    def record_booking_attempt(self, *, result: str, duration: float | None = None) -> None:
        self.booking_attempts.labels(result=result).inc()
        if duration is not None:
            self.booking_duration.observe(duration)

    def record_seat_conflict(self) -> None:
        self.seat_conflicts.inc()

    def record_seat_restore_failure(self) -> None:
        self.seat_restore_failures.inc()

    def record_cancellation(self, *, refund_status: str) -> None:
        self.cancellations.labels(refund_status=refund_status).inc()

    def record_notification(self, *, kind: str, delivered: bool) -> None:
        self.notification_deliveries.labels(
            kind=kind, result='delivered' if delivered else 'failed'
        ).inc()

    def record_chat_message(self, *, message_type: str) -> None:
        self.chat_messages.labels(message_type=message_type).inc()


# Global metrics instance (prometheus collectors must be registered once per process)
metrics = BookingMetrics()

from django.db import models
from django.utils import timezone
import uuid

from .fulfillment.exceptions import InvalidTransition


class Order(models.Model):
    """One paid request, from checkout to delivery of the sync files"""
    PENDING = 'pending'
    PROCESSING = 'processing'
    DONE = 'done'
    FAILED = 'failed'

    STATUS_CHOICES = (
        (PENDING, 'Pending'),
        (PROCESSING, 'Processing'),
        (DONE, 'Done'),
        (FAILED, 'Failed'),
    )

    STANDARD = 'standard'
    PRO = 'pro'

    TIER_CHOICES = (
        (STANDARD, 'Standard'),
        (PRO, 'Pro'),
    )

    # Allowed forward moves; done and failed are terminal
    TRANSITIONS = {
        PENDING: (PROCESSING, FAILED),
        PROCESSING: (DONE, FAILED),
        DONE: (),
        FAILED: (),
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(db_index=True)
    tier = models.CharField(max_length=20, choices=TIER_CHOICES, default=STANDARD)
    audio_file = models.CharField(max_length=255, blank=True)
    audio_url = models.URLField(max_length=500, blank=True)
    lyrics = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING, db_index=True)

    stripe_checkout_session_id = models.CharField(max_length=255, unique=True, null=True, blank=True)
    stripe_payment_intent_id = models.CharField(max_length=255, unique=True, null=True, blank=True)
    processing_task_id = models.CharField(max_length=255, blank=True)

    lrc_url = models.URLField(max_length=500, blank=True)
    srt_url = models.URLField(max_length=500, blank=True)
    video_url = models.URLField(max_length=500, blank=True, null=True)
    error_message = models.TextField(blank=True)
    notification_error = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    notified_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['email', '-created_at'], name='orders_email_created_idx'),
        ]

    def __str__(self):
        return f"{self.email} [{self.tier}] ({self.status})"

    @property
    def is_terminal(self):
        return self.status in (self.DONE, self.FAILED)

    def can_transition(self, target):
        return target in self.TRANSITIONS.get(self.status, ())

    def transition(self, target, **fields):
        """
        Move the order to ``target`` with a conditional update.

        The row is only touched while it still holds the status this instance
        was loaded with, so concurrent or duplicate callers cannot both win.

        Args:
            target (str): The status to move to
            **fields: Extra columns to write in the same update

        Returns:
            bool: True if this call performed the transition, False if the
            row had already moved on

        Raises:
            InvalidTransition: If ``target`` is not reachable from the
            current status
        """
        if not self.can_transition(target):
            raise InvalidTransition(self.status, target)

        now = timezone.now()
        values = dict(fields, status=target, updated_at=now)
        updated = type(self).objects.filter(pk=self.pk, status=self.status).update(**values)
        if not updated:
            return False

        for name, value in values.items():
            setattr(self, name, value)
        return True

    def mark_processing(self, payment_intent_id=None):
        fields = {'paid_at': timezone.now()}
        if payment_intent_id:
            fields['stripe_payment_intent_id'] = payment_intent_id
        return self.transition(self.PROCESSING, **fields)

    def mark_done(self, lrc_url, srt_url, video_url=None, expires_at=None):
        return self.transition(
            self.DONE,
            lrc_url=lrc_url,
            srt_url=srt_url,
            video_url=video_url,
            completed_at=timezone.now(),
            expires_at=expires_at,
        )

    def mark_failed(self, error_message):
        """
        Record a terminal failure. Returns False when the order is already
        terminal so callers in error paths never raise a second time.
        """
        message = error_message or 'Unknown error'
        if self.is_terminal:
            return False
        if self.transition(self.FAILED, error_message=message):
            return True

        # Stale instance: retry once against the stored status
        self.refresh_from_db(fields=['status'])
        if self.is_terminal:
            return False
        return self.transition(self.FAILED, error_message=message)

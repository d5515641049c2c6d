"""
Order fulfillment services for SyncDrop.

Every external collaborator is reached through a client object built from
settings on demand, never through a module level handle:

- payments.py: Stripe checkout sessions and webhook verification
- storage.py: Uploaded audio storage and public URLs
- processing.py: The lyric synchronization workflow
- notifications.py: Delivery emails through Resend
- polling.py: Client side status polling
- exceptions.py: Custom exceptions
- utils.py: Small helpers
"""
from django.conf import settings
from django.core.files.storage import default_storage

from .notifications import EmailClient
from .payments import StripeGateway
from .processing import ProcessingClient
from .storage import AudioStorage


def get_payment_gateway():
    return StripeGateway(
        secret_key=settings.STRIPE_SECRET_KEY,
        webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
        prices=settings.TIER_PRICES,
        tolerance=settings.STRIPE_WEBHOOK_TOLERANCE,
    )


def get_audio_storage():
    return AudioStorage(default_storage, base_url=settings.SITE_URL)


def get_processing_client():
    return ProcessingClient(
        workflow_url=settings.GUMLOOP_WORKFLOW_URL,
        api_key=settings.GUMLOOP_API_KEY,
        timeout=settings.PROCESSING_TIMEOUT,
    )


def get_email_client():
    return EmailClient(
        api_key=settings.RESEND_API_KEY,
        sender=settings.EMAIL_FROM,
        api_url=settings.RESEND_API_URL,
    )

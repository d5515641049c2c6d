"""
Celery tasks for order fulfillment.
"""
import logging
import traceback

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from .fulfillment import get_email_client, get_processing_client
from .fulfillment.exceptions import NotificationError, SyncDropError
from .fulfillment.utils import link_expiry
from .models import Order

logger = logging.getLogger(__name__)


@shared_task
def process_order(order_id):
    """
    Generate and deliver the sync files for a paid order

    Steps:
    1. Call the sync workflow with the audio, lyrics and tier flags
    2. Save the output URLs and move the order to done
    3. Email the files to the customer

    Failures before step 2 completes leave the order failed; nothing is
    retried. A failed email does not undo a finished order.
    """
    try:
        order = Order.objects.get(id=order_id)
    except Order.DoesNotExist:
        logger.error(f"Order {order_id} not found, nothing to process")
        return {'order_id': str(order_id), 'status': None}

    if order.status != Order.PROCESSING:
        logger.warning(f"Order {order_id} is {order.status}, skipping processing run")
        return {'order_id': str(order.id), 'status': order.status}

    logger.info(f"Processing order {order.id} ({order.tier}) for {order.email}")

    try:
        if not order.audio_url:
            raise SyncDropError("Order has no uploaded audio")

        outputs = get_processing_client().process(
            audio_url=order.audio_url,
            lyrics=order.lyrics,
            email=order.email,
            tier=order.tier,
        )

        if not order.mark_done(
            lrc_url=outputs['lrc_url'],
            srt_url=outputs['srt_url'],
            video_url=outputs['video_url'],
            expires_at=link_expiry(settings.DOWNLOAD_LINK_TTL_HOURS),
        ):
            logger.warning(f"Order {order.id} left processing while the workflow ran")
            order.refresh_from_db(fields=['status'])
            return {'order_id': str(order.id), 'status': order.status}
    except Exception as e:
        if not isinstance(e, SyncDropError):
            logger.error(traceback.format_exc())
        logger.error(f"Error processing order {order.id}: {e}")
        _update_order_failed(order, str(e) or e.__class__.__name__)
        return {'order_id': str(order.id), 'status': order.status}

    logger.info(f"Order {order.id} processed successfully")
    _deliver(order, outputs)
    return {'order_id': str(order.id), 'status': order.status}


def _deliver(order, outputs):
    """
    Send the download email. The order stays done either way; the outcome
    is recorded in notified_at or notification_error.
    """
    try:
        get_email_client().send_download_email(
            order,
            lrc_content=outputs['lrc_content'],
            srt_content=outputs['srt_content'],
        )
    except Exception as e:
        if not isinstance(e, NotificationError):
            logger.error(traceback.format_exc())
        logger.error(f"Email delivery failed for order {order.id}: {e}")
        Order.objects.filter(pk=order.pk).update(notification_error=str(e), updated_at=timezone.now())
        order.notification_error = str(e)
        return

    order.notified_at = timezone.now()
    Order.objects.filter(pk=order.pk).update(notified_at=order.notified_at, updated_at=order.notified_at)


def _update_order_failed(order, error_message):
    """
    Update an order's status to failed.

    Args:
        order (Order): The order to update
        error_message (str): Error message to store
    """
    try:
        order.mark_failed(error_message)
    except Exception as e:
        logger.error(f"Error updating order status: {e}")

import logging
import uuid

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from rest_framework import status
from rest_framework.decorators import (
    api_view,
    authentication_classes,
    parser_classes,
    permission_classes,
)
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .fulfillment import get_audio_storage, get_payment_gateway
from .fulfillment.exceptions import (
    InvalidTransition,
    PaymentError,
    StorageError,
    WebhookVerificationError,
)
from .fulfillment.payments import CHECKOUT_COMPLETED, extract_checkout_details
from .models import Order
from .serializers import CheckoutSerializer, OrderStatusSerializer
from .tasks import process_order

logger = logging.getLogger(__name__)


class WebhookEventError(Exception):
    """A verified event that does not identify an order."""
    pass


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@parser_classes([MultiPartParser, FormParser])
def create_checkout(request):
    """Store the upload, create a pending order and a Stripe checkout page"""
    serializer = CheckoutSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    storage = get_audio_storage()

    try:
        audio_name = storage.save(data['audio_file'])
    except StorageError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    try:
        audio_url = storage.public_url(audio_name, request)
    except StorageError as e:
        storage.delete(audio_name)
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    try:
        order = Order.objects.create(
            email=data['email'],
            tier=data['tier'],
            lyrics=data['lyrics'],
            audio_file=audio_name,
            audio_url=audio_url,
        )
    except DatabaseError as e:
        logger.error(f"Could not create order for {data['email']}: {e}")
        storage.delete(audio_name)
        return Response({'error': 'Could not create order'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    origin = request.headers.get('Origin') or settings.SITE_URL

    try:
        session_id, checkout_url = get_payment_gateway().create_checkout_session(order, origin)
    except PaymentError as e:
        order.mark_failed(str(e))
        storage.delete(audio_name)
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    Order.objects.filter(pk=order.pk).update(stripe_checkout_session_id=session_id)
    logger.info(f"Order {order.id} awaiting payment ({order.tier})")

    return Response({'url': checkout_url, 'order_id': str(order.id)})


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def stripe_webhook(request):
    """
    Receive Stripe events. A completed checkout moves its order to
    processing once and queues the processing run; the response never
    waits for that run.
    """
    signature = request.META.get('HTTP_STRIPE_SIGNATURE', '')

    try:
        event = get_payment_gateway().verify_event(request.body, signature)
    except WebhookVerificationError as e:
        logger.warning(f"Webhook signature verification failed: {e}")
        return Response({'error': f"Webhook Error: {e}"}, status=status.HTTP_400_BAD_REQUEST)

    if event['type'] != CHECKOUT_COMPLETED:
        logger.debug(f"Ignoring Stripe event {event.get('id')} of type {event['type']}")
        return Response({'received': True})

    details = extract_checkout_details(event)
    payment_intent = details['payment_intent']

    if payment_intent and Order.objects.filter(stripe_payment_intent_id=payment_intent).exists():
        logger.info(f"Duplicate delivery for payment {payment_intent}, already recorded")
        return Response({'received': True, 'duplicate': True})

    try:
        with transaction.atomic():
            order = _resolve_order(details)
            advanced = order.mark_processing(payment_intent_id=payment_intent)
    except WebhookEventError as e:
        logger.error(f"Rejecting event {event.get('id')}: {e}")
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except (InvalidTransition, IntegrityError):
        advanced = False

    if not advanced:
        logger.info(f"Duplicate delivery for event {event.get('id')}, order already past pending")
        return Response({'received': True, 'duplicate': True})

    logger.info(f"Payment confirmed for order {order.id}, queueing processing")
    _dispatch_processing(order)

    return Response({'received': True, 'order_id': str(order.id)})


def _resolve_order(details):
    """
    Find the order a completed checkout refers to, by id or, failing that,
    by email and tier. Raises WebhookEventError when neither is usable.
    """
    order_id = details['order_id']
    if order_id:
        try:
            order_id = uuid.UUID(str(order_id))
        except ValueError:
            raise WebhookEventError(f"Malformed order id '{order_id}'")
        try:
            return Order.objects.select_for_update().get(id=order_id)
        except Order.DoesNotExist:
            raise WebhookEventError(f"Unknown order {order_id}")

    email = details['email']
    tier = details['tier']
    if not email or tier not in dict(Order.TIER_CHOICES):
        raise WebhookEventError("Event metadata has no order id and no email/tier")

    order = (Order.objects.select_for_update()
             .filter(email__iexact=email, tier=tier, status=Order.PENDING)
             .order_by('-created_at')
             .first())
    if order is None:
        order = Order.objects.create(email=email, tier=tier)
        logger.info(f"Created order {order.id} for {email} from webhook")
    return order


def _dispatch_processing(order):
    try:
        result = process_order.delay(str(order.id))
    except Exception as e:
        logger.error(f"Could not queue processing for order {order.id}: {e}")
        order.mark_failed(f"Could not queue processing: {e}")
        return None

    Order.objects.filter(pk=order.pk).update(processing_task_id=result.id)
    return result


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def order_status(request):
    """Latest status of an order, looked up by order_id or email"""
    order_id = request.query_params.get('order_id')
    email = request.query_params.get('email')

    if not order_id and not email:
        return Response(
            {'error': 'Email or order_id parameter is required'},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        if order_id:
            try:
                order_id = uuid.UUID(order_id)
            except ValueError:
                return Response({'error': 'Invalid order_id'}, status=status.HTTP_400_BAD_REQUEST)
            order = Order.objects.filter(id=order_id).first()
        else:
            order = Order.objects.filter(email__iexact=email).order_by('-created_at').first()
    except DatabaseError as e:
        logger.error(f"Error fetching order status: {e}")
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if order is None:
        return Response({'status': Order.PENDING})

    return Response(OrderStatusSerializer(order).data)

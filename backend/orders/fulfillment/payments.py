"""
Stripe checkout sessions and webhook verification.
"""
import json
import logging
from urllib.parse import urlencode

import stripe

from .exceptions import PaymentError, WebhookVerificationError

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = 'checkout.session.completed'

PRODUCTS = {
    'standard': {
        'name': 'SyncDrop Standard',
        'description': '.lrc + .srt lyric files',
    },
    'pro': {
        'name': 'SyncDrop Pro',
        'description': '.lrc + .srt lyric files + 1080p karaoke video',
    },
}


class StripeGateway:
    """Thin wrapper around the Stripe SDK bound to one set of credentials."""

    def __init__(self, secret_key, webhook_secret, prices, tolerance=300):
        """
        Args:
            secret_key (str): Stripe secret API key
            webhook_secret (str): Signing secret of the webhook endpoint
            prices (dict): Tier name to unit amount in USD cents
            tolerance (int): Accepted age of a webhook signature, in seconds
        """
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret
        self.prices = prices
        self.tolerance = tolerance

    def create_checkout_session(self, order, origin):
        """
        Create a hosted checkout page for an order.

        Args:
            order (Order): The pending order being paid for
            origin (str): Base URL the customer is sent back to

        Returns:
            tuple: (session id, hosted checkout URL)

        Raises:
            PaymentError: If credentials are missing or Stripe rejects the call
        """
        if not self.secret_key:
            raise PaymentError("Stripe is not configured. Set STRIPE_SECRET_KEY in .env")

        product = PRODUCTS[order.tier]
        origin = origin.rstrip('/')
        success_query = urlencode({
            'success': 'true',
            'email': order.email,
            'order_id': str(order.id),
        })

        try:
            session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                payment_method_types=['card'],
                line_items=[{
                    'price_data': {
                        'currency': 'usd',
                        'product_data': product,
                        'unit_amount': self.prices[order.tier],
                    },
                    'quantity': 1,
                }],
                mode='payment',
                success_url=f"{origin}/?{success_query}",
                cancel_url=f"{origin}/?canceled=true",
                customer_email=order.email,
                client_reference_id=str(order.id),
                metadata={
                    'order_id': str(order.id),
                    'email': order.email,
                    'tier': order.tier,
                },
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed for order {order.id}: {e}")
            raise PaymentError(f"Could not create checkout session: {e.user_message or e}") from e

        logger.info(f"Created checkout session {session.id} for order {order.id}")
        return session.id, session.url

    def verify_event(self, payload, signature):
        """
        Check the signature of a webhook delivery and decode it.

        Args:
            payload (bytes): Raw request body
            signature (str): Value of the Stripe-Signature header

        Returns:
            dict: The decoded event

        Raises:
            WebhookVerificationError: On a missing secret, a missing or
            mismatched signature, or a body that is not a JSON object
        """
        if not self.webhook_secret:
            raise WebhookVerificationError("Webhook secret is not configured")
        if not signature:
            raise WebhookVerificationError("Missing Stripe-Signature header")

        if isinstance(payload, bytes):
            try:
                payload = payload.decode('utf-8')
            except UnicodeDecodeError as e:
                raise WebhookVerificationError(f"Invalid payload: {e}") from e

        try:
            stripe.WebhookSignature.verify_header(
                payload, signature, self.webhook_secret, tolerance=self.tolerance
            )
        except stripe.SignatureVerificationError as e:
            raise WebhookVerificationError(f"Invalid signature: {e}") from e

        try:
            event = json.loads(payload)
        except ValueError as e:
            raise WebhookVerificationError(f"Invalid payload: {e}") from e

        if not isinstance(event, dict) or 'type' not in event:
            raise WebhookVerificationError("Invalid payload: not a Stripe event")
        return event


def extract_checkout_details(event):
    """
    Pull the order reference out of a completed checkout session event.

    Returns:
        dict: order_id, email, tier and payment_intent (any may be None)
    """
    session = (event.get('data') or {}).get('object') or {}
    metadata = session.get('metadata') or {}
    return {
        'order_id': metadata.get('order_id') or session.get('client_reference_id'),
        'email': metadata.get('email') or session.get('customer_email'),
        'tier': metadata.get('tier'),
        'payment_intent': session.get('payment_intent'),
        'session_id': session.get('id'),
    }

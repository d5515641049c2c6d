"""
Shared fixtures for the order tests.
"""
import hashlib
import hmac
import io
import json
import time
import uuid
import wave
from unittest.mock import MagicMock

from django.conf import settings
from django.core.files.uploadedfile import SimpleUploadedFile


def sign_payload(payload, secret=None, timestamp=None):
    """Build a Stripe-Signature header for a raw payload."""
    secret = secret or settings.STRIPE_WEBHOOK_SECRET
    timestamp = int(timestamp if timestamp is not None else time.time())
    signed = f"{timestamp}.{payload}".encode('utf-8')
    signature = hmac.new(secret.encode('utf-8'), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def checkout_completed_event(order_id=None, email=None, tier=None, payment_intent=None,
                             customer_email=None, event_type='checkout.session.completed'):
    """A Stripe event body as delivered to the webhook, serialized to JSON."""
    metadata = {}
    if order_id is not None:
        metadata['order_id'] = str(order_id)
    if email is not None:
        metadata['email'] = email
    if tier is not None:
        metadata['tier'] = tier

    event = {
        'id': f"evt_{uuid.uuid4().hex[:24]}",
        'object': 'event',
        'type': event_type,
        'data': {
            'object': {
                'id': f"cs_test_{uuid.uuid4().hex[:24]}",
                'object': 'checkout.session',
                'customer_email': customer_email,
                'payment_intent': payment_intent or f"pi_{uuid.uuid4().hex[:24]}",
                'metadata': metadata,
            }
        },
    }
    return json.dumps(event)


def wav_upload(name='song.wav', size_bytes=2 * 1024 * 1024):
    """A silent mono 16-bit WAV file of roughly ``size_bytes``."""
    buffer = io.BytesIO()
    with wave.open(buffer, 'wb') as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(44100)
        wav.writeframes(b'\x00\x00' * (size_bytes // 2))
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='audio/wav')


def make_response(status_code=200, json_data=None, text=''):
    """A stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text or (json.dumps(json_data) if json_data is not None else '')
    if json_data is None:
        response.json.side_effect = ValueError('No JSON object could be decoded')
    else:
        response.json.return_value = json_data
    return response


def workflow_outputs(tier='standard'):
    outputs = {
        'lrc_url': 'https://files.syncdrop.test/song.lrc',
        'srt_url': 'https://files.syncdrop.test/song.srt',
        'lrc_content': '[00:12.00]First line\n[00:15.50]Second line\n',
        'srt_content': '1\n00:00:12,000 --> 00:00:15,500\nFirst line\n\n',
    }
    if tier == 'pro':
        outputs['video_url'] = 'https://files.syncdrop.test/karaoke.mp4'
    return {'status': 'success', 'outputs': outputs}

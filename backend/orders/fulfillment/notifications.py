"""
Delivery emails sent through the Resend HTTP API.
"""
import logging

import requests
from django.template.loader import render_to_string

from .exceptions import NotificationError
from .utils import encode_attachment

logger = logging.getLogger(__name__)

SUBJECT = "Your SyncDrop Files Are Ready!"


class EmailClient:
    """Sends the download email with the sync files attached."""

    def __init__(self, api_key, sender, api_url='https://api.resend.com/emails', timeout=30):
        self.api_key = api_key
        self.sender = sender
        self.api_url = api_url
        self.timeout = timeout

    def render(self, order):
        return render_to_string('orders/email/files_ready.html', {
            'order': order,
            'expires_at': order.expires_at,
        })

    def send_download_email(self, order, lrc_content, srt_content):
        """
        Email the customer their download links.

        Raises:
            NotificationError: If the API key is missing or Resend rejects
            the message
        """
        if not self.api_key:
            raise NotificationError("RESEND_API_KEY not configured in .env")

        body = {
            'from': self.sender,
            'to': order.email,
            'subject': SUBJECT,
            'html': self.render(order),
            'attachments': [
                {
                    'filename': f"song-{order.id}.lrc",
                    'content': encode_attachment(lrc_content),
                },
                {
                    'filename': f"song-{order.id}.srt",
                    'content': encode_attachment(srt_content),
                },
            ],
        }

        try:
            response = requests.post(
                self.api_url,
                json=body,
                headers={'Authorization': f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NotificationError(f"Failed to send email: {e}") from e

        if not response.ok:
            raise NotificationError(f"Resend API error ({response.status_code}): {response.text}")

        logger.info(f"Email sent successfully to {order.email} for order {order.id}")

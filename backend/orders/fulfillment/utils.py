"""
Utility functions for order fulfillment.
"""
import base64
from datetime import timedelta

from django.utils import timezone

def clean_filename(filename):
    """
    Remove invalid characters from filenames.

    Args:
        filename (str): Original filename

    Returns:
        str: Cleaned filename
    """
    invalid_chars = '<>:"/\\|?*'
    for char in invalid_chars:
        filename = filename.replace(char, '')
    return filename.strip()

def link_expiry(hours, now=None):
    """Point in time after which download links stop working."""
    return (now or timezone.now()) + timedelta(hours=hours)

def encode_attachment(content):
    """Base64 encode text or bytes for an email attachment."""
    if isinstance(content, str):
        content = content.encode('utf-8')
    return base64.b64encode(content).decode('ascii')

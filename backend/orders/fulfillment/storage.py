"""
Storage of uploaded audio files.
"""
import os
import uuid
import logging

from .exceptions import StorageError
from .utils import clean_filename

logger = logging.getLogger(__name__)


def audio_upload_path(filename):
    """Generate a unique path for uploaded audio"""
    ext = os.path.splitext(clean_filename(filename))[1].lower()
    return os.path.join('audio', f"{uuid.uuid4()}{ext}")


class AudioStorage:
    """Stores uploads in a Django storage backend and exposes public URLs."""

    def __init__(self, storage, base_url=''):
        self.storage = storage
        self.base_url = base_url.rstrip('/')

    def save(self, uploaded_file):
        """
        Save an uploaded file under a fresh name.

        Returns:
            str: The storage name of the saved file
        """
        name = audio_upload_path(uploaded_file.name)
        try:
            saved_name = self.storage.save(name, uploaded_file)
        except Exception as e:
            logger.error(f"Error storing audio upload {uploaded_file.name}: {e}")
            raise StorageError(f"Could not store audio file: {e}") from e
        logger.info(f"Stored audio upload as {saved_name} ({uploaded_file.size} bytes)")
        return saved_name

    def public_url(self, name, request=None):
        """
        Absolute URL the processing workflow can download the file from.
        """
        try:
            url = self.storage.url(name)
        except Exception as e:
            raise StorageError(f"Could not resolve URL for {name}: {e}") from e

        if url.startswith(('http://', 'https://')):
            return url
        if request is not None:
            return request.build_absolute_uri(url)
        return f"{self.base_url}{url}"

    def delete(self, name):
        try:
            self.storage.delete(name)
        except Exception as e:
            logger.warning(f"Could not delete stored audio {name}: {e}")

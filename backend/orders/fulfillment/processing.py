"""
Client for the external lyric synchronization workflow.
"""
import logging

import requests

from .exceptions import ProcessingError

logger = logging.getLogger(__name__)


class ProcessingClient:
    """Calls the sync workflow and returns the generated artifacts."""

    def __init__(self, workflow_url, api_key, timeout=None):
        self.workflow_url = workflow_url
        self.api_key = api_key
        self.timeout = timeout

    def process(self, audio_url, lyrics, email, tier):
        """
        Run the workflow for one order.

        Args:
            audio_url (str): Public URL of the uploaded audio
            lyrics (str): Plain lyrics text
            email (str): Customer email
            tier (str): 'standard' or 'pro'; pro also renders a video

        Returns:
            dict: lrc_url, srt_url, lrc_content, srt_content and video_url
            (None unless the tier is pro)

        Raises:
            ProcessingError: On missing credentials, transport errors, non-2xx
            responses, or a response without the expected outputs
        """
        if not self.workflow_url or not self.api_key:
            raise ProcessingError(
                "Processing workflow not configured. Set GUMLOOP_WORKFLOW_URL and GUMLOOP_API_KEY in .env"
            )

        include_video = tier == 'pro'
        payload = {
            'audioUrl': audio_url,
            'lyrics': lyrics,
            'email': email,
            'tier': tier,
            'includeLrc': True,
            'includeSrt': True,
            'includeVideo': include_video,
        }

        try:
            response = requests.post(
                self.workflow_url,
                json=payload,
                headers={'Authorization': f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Processing workflow request failed: {e}")
            raise ProcessingError(f"Failed to reach processing workflow: {e}") from e

        if not response.ok:
            raise ProcessingError(f"Processing API error ({response.status_code}): {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProcessingError("Processing API returned invalid JSON") from e

        outputs = data.get('outputs') if isinstance(data, dict) else None
        if (not isinstance(data, dict) or data.get('status') == 'error'
                or not outputs or not isinstance(outputs, dict)):
            message = data.get('error') if isinstance(data, dict) else None
            raise ProcessingError(message or "Processing failed")

        missing = [key for key in ('lrc_url', 'srt_url') if not outputs.get(key)]
        if missing:
            raise ProcessingError(f"Processing output is missing {', '.join(missing)}")

        return {
            'lrc_url': outputs['lrc_url'],
            'srt_url': outputs['srt_url'],
            'lrc_content': outputs.get('lrc_content') or '',
            'srt_content': outputs.get('srt_content') or '',
            'video_url': outputs.get('video_url') if include_video else None,
        }

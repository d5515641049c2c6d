"""
Client side polling of the status endpoint.
"""
import time
import logging

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 2.0
MAX_POLL_ATTEMPTS = 60
TERMINAL_STATUSES = ('done', 'failed')


def poll_order_status(fetch, interval=POLL_INTERVAL_SECONDS, max_attempts=MAX_POLL_ATTEMPTS, sleep=time.sleep):
    """
    Poll until the order reaches a terminal status or attempts run out.

    Args:
        fetch (callable): Returns the decoded status payload; may raise
        interval (float): Seconds between attempts
        max_attempts (int): Attempts before giving up
        sleep (callable): Used to wait between attempts

    Returns:
        dict: The terminal payload, or a failed payload after exhausting
        the attempts. The timeout is the client's own, not a server state.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            data = fetch()
        except Exception as e:
            logger.warning(f"Status poll attempt {attempt} failed: {e}")
        else:
            if data.get('status') in TERMINAL_STATUSES:
                return data
        if attempt < max_attempts:
            sleep(interval)

    return {'status': 'failed', 'error': 'timed out'}

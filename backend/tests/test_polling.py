from unittest import TestCase
from unittest.mock import MagicMock

from orders.fulfillment.polling import poll_order_status


class PollOrderStatusTest(TestCase):
    """Client side polling with a bounded number of attempts."""

    def setUp(self):
        self.sleep = MagicMock()

    def test_returns_first_terminal_payload(self):
        fetch = MagicMock(side_effect=[
            {'status': 'pending'},
            {'status': 'processing'},
            {'status': 'done', 'urls': {'lrc_url': 'a', 'srt_url': 'b'}},
        ])

        result = poll_order_status(fetch, interval=2.0, max_attempts=10, sleep=self.sleep)

        self.assertEqual(result['status'], 'done')
        self.assertEqual(fetch.call_count, 3)
        self.sleep.assert_called_with(2.0)
        self.assertEqual(self.sleep.call_count, 2)

    def test_failed_is_terminal(self):
        fetch = MagicMock(return_value={'status': 'failed', 'error': 'bad audio'})
        result = poll_order_status(fetch, sleep=self.sleep)
        self.assertEqual(result, {'status': 'failed', 'error': 'bad audio'})
        self.sleep.assert_not_called()

    def test_gives_up_after_max_attempts(self):
        fetch = MagicMock(return_value={'status': 'processing'})

        result = poll_order_status(fetch, max_attempts=4, sleep=self.sleep)

        self.assertEqual(result, {'status': 'failed', 'error': 'timed out'})
        self.assertEqual(fetch.call_count, 4)
        self.assertEqual(self.sleep.call_count, 3)

    def test_fetch_errors_count_as_attempts(self):
        fetch = MagicMock(side_effect=[ConnectionError('offline'), {'status': 'done'}])
        result = poll_order_status(fetch, max_attempts=3, sleep=self.sleep)
        self.assertEqual(result['status'], 'done')
        self.assertEqual(fetch.call_count, 2)

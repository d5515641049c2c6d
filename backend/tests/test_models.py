from django.test import TestCase

from orders.fulfillment.exceptions import InvalidTransition
from orders.models import Order


class OrderTransitionTest(TestCase):
    """Status changes only ever move forward."""

    def setUp(self):
        self.order = Order.objects.create(email='fan@example.com', tier=Order.STANDARD)

    def test_new_order_is_pending(self):
        self.assertEqual(self.order.status, Order.PENDING)
        self.assertFalse(self.order.is_terminal)

    def test_happy_path(self):
        """pending -> processing -> done persists each step."""
        self.assertTrue(self.order.mark_processing(payment_intent_id='pi_123'))
        self.assertTrue(self.order.mark_done(
            lrc_url='https://files.test/a.lrc',
            srt_url='https://files.test/a.srt',
        ))

        stored = Order.objects.get(pk=self.order.pk)
        self.assertEqual(stored.status, Order.DONE)
        self.assertEqual(stored.stripe_payment_intent_id, 'pi_123')
        self.assertIsNotNone(stored.paid_at)
        self.assertIsNotNone(stored.completed_at)
        self.assertEqual(stored.lrc_url, 'https://files.test/a.lrc')

    def test_done_requires_processing(self):
        with self.assertRaises(InvalidTransition):
            self.order.mark_done(lrc_url='https://x/a.lrc', srt_url='https://x/a.srt')
        self.assertEqual(Order.objects.get(pk=self.order.pk).status, Order.PENDING)

    def test_terminal_states_do_not_revert(self):
        self.order.mark_processing()
        self.order.mark_failed('boom')

        with self.assertRaises(InvalidTransition):
            self.order.mark_processing()
        with self.assertRaises(InvalidTransition):
            self.order.transition(Order.DONE)

        # a second failure is a no-op, not an error
        self.assertFalse(self.order.mark_failed('again'))
        stored = Order.objects.get(pk=self.order.pk)
        self.assertEqual(stored.status, Order.FAILED)
        self.assertEqual(stored.error_message, 'boom')

    def test_stale_instance_loses_the_race(self):
        """A second copy loaded before the update cannot transition again."""
        stale = Order.objects.get(pk=self.order.pk)
        self.assertTrue(self.order.mark_processing())
        self.assertFalse(stale.mark_processing())
        self.assertEqual(Order.objects.filter(status=Order.PROCESSING).count(), 1)

    def test_mark_failed_on_stale_instance(self):
        stale = Order.objects.get(pk=self.order.pk)
        self.order.mark_processing()

        self.assertTrue(stale.mark_failed('workflow crashed'))
        stored = Order.objects.get(pk=self.order.pk)
        self.assertEqual(stored.status, Order.FAILED)
        self.assertEqual(stored.error_message, 'workflow crashed')

    def test_mark_failed_without_message(self):
        self.order.mark_failed('')
        self.assertEqual(Order.objects.get(pk=self.order.pk).error_message, 'Unknown error')

# billing/tests/test_retry.py

from unittest import mock

from django.db import OperationalError
from django.test import TestCase, override_settings

from billing.models import InvoiceLine
from billing.services import create_invoice, reconciliation, remove_line
from billing.services.exceptions import ConflictError
from products.models import Product

FAST_RETRY = {
    "DEFAULT_PAYMENT_METHOD": "CASH",
    "DEFAULT_GST": 18,
    "MAX_ATTEMPTS": 3,
    "RETRY_BACKOFF_SECONDS": 0.01,
}


@override_settings(BILLING=FAST_RETRY)
class RetryOnConflictTests(TestCase):
    """
    GUARANTEES:
    - A lock conflict is retried and the operation still completes once
    - Attempts are bounded; exhaustion surfaces ConflictError
    - A failed attempt leaves no partial writes behind
    """

    def setUp(self):
        self.product = Product.objects.create(product_name="Widget", quantity=10)
        result = create_invoice(line_requests=[{"product_name": "Widget", "quantity": 4}])
        self.number = result.invoice_number
        self.line = result.lines[0]

    @mock.patch("billing.services.locking.time.sleep")
    def test_transient_conflict_is_retried(self, sleep):
        real_product = Product.objects.get(product_name="Widget")

        with mock.patch(
            "billing.services.reconciliation.lock_product",
            side_effect=[OperationalError("database is locked"), real_product],
        ):
            removal = remove_line(invoice_number=self.number, line_id=self.line.id)

        self.assertTrue(removal.restocked)
        self.assertEqual(Product.objects.get(product_name="Widget").quantity, 10)
        sleep.assert_called_once_with(0.01)

    @mock.patch("billing.services.locking.time.sleep")
    def test_exhausted_retries_raise_conflict(self, sleep):
        with mock.patch(
            "billing.services.reconciliation.lock_product",
            side_effect=OperationalError("deadlock detected"),
        ):
            with self.assertLogs("billing.services.locking", level="ERROR"):
                with self.assertRaises(ConflictError):
                    remove_line(invoice_number=self.number, line_id=self.line.id)

        self.assertEqual(sleep.call_count, 2)
        self.line.refresh_from_db()
        self.assertEqual(self.line.quantity, 4)
        self.assertEqual(Product.objects.get(product_name="Widget").quantity, 6)

    @mock.patch("billing.services.locking.time.sleep")
    def test_rolled_back_attempt_does_not_book_twice(self, sleep):
        real_book_line = reconciliation._book_line
        calls = {"n": 0}

        def flaky_book_line(**kwargs):
            line = real_book_line(**kwargs)
            calls["n"] += 1
            if calls["n"] == 1:
                raise OperationalError("could not serialize access")
            return line

        with mock.patch.object(reconciliation, "_book_line", side_effect=flaky_book_line):
            result = create_invoice(line_requests=[{"product_name": "Widget", "quantity": 2}])

        self.assertEqual(len(result.lines), 1)
        self.assertEqual(Product.objects.get(product_name="Widget").quantity, 4)
        self.assertEqual(
            InvoiceLine.objects.filter(invoice_number=result.invoice_number).count(), 1
        )

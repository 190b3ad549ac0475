# reports/tests/test_reports.py

import datetime

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from billing.models import InvoiceLine
from reports.services import lines_in_range, summarize_invoices

User = get_user_model()


def add_line(number, product, day, name="", payment_method="CASH"):
    return InvoiceLine.objects.create(
        invoice_number=number,
        product_name=product,
        quantity=1,
        date=day,
        name=name,
        payment_method=payment_method,
    )


class ReportsTestCase(TestCase):
    def setUp(self):
        self.today = timezone.localdate()
        self.last_week = self.today - datetime.timedelta(days=7)

        self.first = add_line(1, "Widget", self.last_week, name="Asha Traders", payment_method="UPI")
        add_line(1, "Gadget", self.last_week, name="Asha Traders", payment_method="UPI")
        add_line(2, "Widget", self.today, name="Ravi")
        add_line(3, "Gadget", self.today, name="Meera")


class InvoiceSummaryTests(ReportsTestCase):
    """
    GUARANTEES:
    - One entry per invoice, ordered by invoice number
    - Header comes from the invoice's first line
    """

    def test_grouping(self):
        summary = summarize_invoices(InvoiceLine.objects.all())

        self.assertEqual([row["invoice_number"] for row in summary], [1, 2, 3])
        self.assertEqual(summary[0]["line_count"], 2)
        self.assertEqual(summary[0]["header"]["id"], self.first.id)
        self.assertEqual(summary[0]["header"]["payment_method"], "UPI")
        self.assertEqual(summary[0]["header"]["name"], "Asha Traders")

    def test_range_is_inclusive(self):
        summary = summarize_invoices(lines_in_range(self.last_week, self.last_week))
        self.assertEqual([row["invoice_number"] for row in summary], [1])


class ReportAPITests(ReportsTestCase):
    """
    GUARANTEES:
    - Listings are paginated and grouped
    - Missing or malformed parameters are 400, empty results 404
    - Export is unpaginated
    """

    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.client.force_authenticate(
            user=User.objects.create_user(email="cashier@example.com", password="password123")
        )

    def test_today(self):
        response = self.client.get("/api/reports/invoices/today/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual([r["invoice_number"] for r in response.data["results"]], [2, 3])

    def test_range(self):
        response = self.client.get(
            "/api/reports/invoices/range/",
            {"start_date": self.last_week.isoformat(), "end_date": self.today.isoformat()},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 3)

    def test_range_validation(self):
        url = "/api/reports/invoices/range/"
        for params in (
            {},
            {"start_date": self.today.isoformat()},
            {"start_date": "yesterday", "end_date": "today"},
            {"start_date": self.today.isoformat(), "end_date": self.last_week.isoformat()},
        ):
            with self.subTest(params=params):
                self.assertEqual(self.client.get(url, params).status_code, 400)

    def test_empty_range_is_404(self):
        response = self.client.get(
            "/api/reports/invoices/range/",
            {"start_date": "2000-01-01", "end_date": "2000-01-31"},
        )
        self.assertEqual(response.status_code, 404)

    def test_by_name(self):
        response = self.client.get("/api/reports/invoices/by-name/", {"name": "asha"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([r["invoice_number"] for r in response.data["results"]], [1])
        self.assertEqual(self.client.get("/api/reports/invoices/by-name/").status_code, 400)

    def test_invoice_lines(self):
        response = self.client.get("/api/reports/invoices/1/lines/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 2)

        self.assertEqual(self.client.get("/api/reports/invoices/99/lines/").status_code, 404)

    def test_export(self):
        response = self.client.get(
            "/api/reports/export/",
            {"start_date": self.last_week.isoformat(), "end_date": self.today.isoformat()},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 3)
        self.assertNotIn("next", response.data)

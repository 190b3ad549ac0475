# products/tests/test_products.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.test import TestCase
from rest_framework.test import APIClient

from billing.models import InvoiceLine
from billing.services import create_invoice
from products.models import Product
from products.serializers import ProductSerializer

User = get_user_model()


class ProductModelTests(TestCase):
    """
    Product model tests.

    GUARANTEES:
    - Products can be created safely
    - product_name uniqueness is enforced
    - Pricing and stock are never negative
    """

    def test_product_creation(self):
        """A valid product should be created successfully."""
        product = Product.objects.create(
            product_name="Steel Bolt M8",
            quantity=40,
            mrp=Decimal("12.50"),
            category="hardware",
        )

        self.assertEqual(product.product_name, "Steel Bolt M8")
        self.assertEqual(product.quantity, 40)
        self.assertIn("Steel Bolt M8", str(product))

    def test_product_name_must_be_unique(self):
        """Name duplication must be rejected."""
        Product.objects.create(product_name="Hex Nut", quantity=1)

        with self.assertRaises(IntegrityError):
            Product.objects.create(product_name="Hex Nut", quantity=5)

    def test_clean_rejects_negative_pricing(self):
        product = Product(product_name="Washer", quantity=1, mrp=Decimal("-1.00"))

        with self.assertRaises(ValidationError):
            product.full_clean()


class ProductAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(
            email="manager@example.com", password="password123", role=User.ROLE_MANAGER
        )
        self.cashier = User.objects.create_user(
            email="cashier@example.com", password="password123", role=User.ROLE_CASHIER
        )
        self.bolt = Product.objects.create(product_name="Steel Bolt", quantity=10, category="hardware")
        Product.objects.create(product_name="Paint Brush", quantity=4, category="paint")


class ProductAPITests(ProductAPITestCase):
    """
    GUARANTEES:
    - Managers can create, update and delete products
    - Duplicate names are rejected with a clear message
    - Renaming a product already on invoices is refused
    """

    def setUp(self):
        super().setUp()
        self.client.force_authenticate(user=self.manager)

    def test_create_product(self):
        response = self.client.post(
            "/api/products/products/",
            {"product_name": "  Hammer  ", "quantity": 3, "mrp": "250.00"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["product_name"], "Hammer")

    def test_duplicate_name(self):
        response = self.client.post(
            "/api/products/products/",
            {"product_name": "Steel Bolt", "quantity": 1},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("Product already exists.", response.data["product_name"])

    def test_negative_values_rejected(self):
        response = self.client.post(
            "/api/products/products/",
            {"product_name": "Chisel", "quantity": 1, "discount": "-5"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_restock_via_update(self):
        response = self.client.patch(
            f"/api/products/products/{self.bolt.id}/", {"quantity": 25}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        self.bolt.refresh_from_db()
        self.assertEqual(self.bolt.quantity, 25)

    def test_price_update_keeps_concurrent_sales(self):
        """A price edit must not write back the stock it read before a sale."""
        serializer = ProductSerializer(self.bolt, data={"mrp": "50.00"}, partial=True)
        self.assertTrue(serializer.is_valid(), serializer.errors)

        create_invoice(line_requests=[{"product_name": "Steel Bolt", "quantity": 4}])
        serializer.save()

        self.bolt.refresh_from_db()
        self.assertEqual(self.bolt.mrp, Decimal("50.00"))
        self.assertEqual(self.bolt.quantity, 6)
        sold = InvoiceLine.objects.get(product_name="Steel Bolt").quantity
        self.assertEqual(self.bolt.quantity + sold, 10)

    def test_rename_refused_when_invoiced(self):
        InvoiceLine.objects.create(invoice_number=1, product_name="Steel Bolt", quantity=2)

        response = self.client.patch(
            f"/api/products/products/{self.bolt.id}/",
            {"product_name": "Zinc Bolt"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.bolt.refresh_from_db()
        self.assertEqual(self.bolt.product_name, "Steel Bolt")

    def test_delete_product(self):
        response = self.client.delete(f"/api/products/products/{self.bolt.id}/")

        self.assertEqual(response.status_code, 204)
        self.assertFalse(Product.objects.filter(id=self.bolt.id).exists())

    def test_filters(self):
        response = self.client.get("/api/products/products/", {"category": "paint"})
        self.assertEqual([p["product_name"] for p in response.data["results"]], ["Paint Brush"])

        response = self.client.get("/api/products/products/", {"product_name": "bolt"})
        self.assertEqual([p["product_name"] for p in response.data["results"]], ["Steel Bolt"])


class ProductPermissionTests(ProductAPITestCase):
    """
    Permission & access tests.

    GUARANTEES:
    - Anonymous users have no access
    - Cashiers can read and search but not write
    """

    def test_anonymous_user_cannot_list(self):
        self.assertEqual(self.client.get("/api/products/products/").status_code, 401)

    def test_cashier_can_read_and_search(self):
        self.client.force_authenticate(user=self.cashier)

        self.assertEqual(self.client.get("/api/products/products/").status_code, 200)

        response = self.client.get("/api/products/products/search/", {"q": "BRUSH"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 1)

    def test_cashier_cannot_write(self):
        self.client.force_authenticate(user=self.cashier)

        response = self.client.post(
            "/api/products/products/", {"product_name": "Saw", "quantity": 1}, format="json"
        )
        self.assertEqual(response.status_code, 403)

        response = self.client.delete(f"/api/products/products/{self.bolt.id}/")
        self.assertEqual(response.status_code, 403)

    def test_search_requires_q_and_matches(self):
        self.client.force_authenticate(user=self.cashier)

        self.assertEqual(self.client.get("/api/products/products/search/").status_code, 400)
        self.assertEqual(
            self.client.get("/api/products/products/search/", {"q": "zzz"}).status_code, 404
        )

# billing/services/locking.py

"""
STOCK ROW LOCKING + BOUNDED RETRY

Purpose:
- Serialize read-then-write of Product.quantity across concurrent requests.
- Retry an engine operation when the database reports a lock conflict
  (deadlock, lock wait timeout, "database is locked").

Rules:
- Product rows are locked with select_for_update() BEFORE quantity is read.
- Multiple product rows are locked in ascending id order (no lock cycles).
- Each attempt runs in its own atomic block; a failed attempt rolls back fully.
- Attempts are bounded by settings.BILLING["MAX_ATTEMPTS"]; when exhausted the
  caller gets ConflictError (transient failure), never a partial write.
"""

from __future__ import annotations

import functools
import logging
import time

from django.conf import settings
from django.db import OperationalError, transaction

from billing.services.exceptions import ConflictError
from products.models import Product

logger = logging.getLogger(__name__)


def _billing_setting(key: str, default):
    return getattr(settings, "BILLING", {}).get(key, default)


def retry_on_conflict(func):
    """
    Run `func` atomically, re-running it on OperationalError.

    Usage:
        @retry_on_conflict
        def remove_line(...): ...
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        attempts = max(1, int(_billing_setting("MAX_ATTEMPTS", 3)))
        backoff = float(_billing_setting("RETRY_BACKOFF_SECONDS", 0.05))

        for attempt in range(1, attempts + 1):
            try:
                with transaction.atomic():
                    return func(*args, **kwargs)
            except OperationalError as exc:
                if attempt >= attempts:
                    logger.error(
                        "Stock update conflict persisted; giving up",
                        extra={"operation": func.__name__, "attempts": attempts},
                    )
                    raise ConflictError(
                        "The stock ledger is busy. Please retry the request."
                    ) from exc

                logger.warning(
                    "Stock update conflict; retrying",
                    extra={
                        "operation": func.__name__,
                        "attempt": attempt,
                        "error": str(exc),
                    },
                )
                if backoff > 0:
                    time.sleep(backoff * attempt)

    return wrapper


def lock_product(product_name: str) -> Product | None:
    """
    Lock and return the Product with this name, or None.
    Must be called inside an atomic block.
    """
    return Product.objects.select_for_update().filter(product_name=product_name).first()


def lock_products(product_names) -> dict[str, Product]:
    """
    Lock every existing Product among `product_names` (ascending id order).
    Returns {product_name: Product}; missing names are simply absent.
    """
    names = sorted(set(product_names))
    if not names:
        return {}

    products = (
        Product.objects.select_for_update()
        .filter(product_name__in=names)
        .order_by("id")
    )
    return {p.product_name: p for p in products}

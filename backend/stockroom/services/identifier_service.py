# Overview: Human-readable identifier generation for products, suppliers, transactions and tenants.

"""
Identifier format: PREFIX [+ category hint] + epoch millis + random 0..999

Uniqueness is probabilistic only. Two creations in the same millisecond with
the same random draw collide; the unique column on each table is what actually
enforces uniqueness (see concurrency.commit_new_record).

All generators are pure given `now_ms` and `rand`, which tests pin down.
"""

from __future__ import annotations

import random

from ..time_utils import epoch_millis

PRODUCT_PREFIX = "PRD"
SUPPLIER_PREFIX = "SUP"
TRANSACTION_PREFIX = "TRN"
TENANT_PREFIX = "INV"

# Category hint used when a product has no usable category
FALLBACK_CATEGORY_HINT = "PRD"

RANDOM_SUFFIX_BOUND = 1000


def category_hint(category: str | None) -> str:
    """First three letters of the category, upper-cased."""
    category = (category or "").strip()
    if not category:
        return FALLBACK_CATEGORY_HINT
    return category[:3].upper()


def _compose(prefix: str, now_ms: int | None, rand: int | None) -> str:
    if now_ms is None:
        now_ms = epoch_millis()
    if rand is None:
        rand = random.randrange(RANDOM_SUFFIX_BOUND)
    return f"{prefix}{now_ms}{rand}"


def generate_product_id(category: str | None, *, now_ms: int | None = None, rand: int | None = None) -> str:
    return _compose(f"{PRODUCT_PREFIX}{category_hint(category)}", now_ms, rand)


def generate_supplier_id(*, now_ms: int | None = None, rand: int | None = None) -> str:
    return _compose(SUPPLIER_PREFIX, now_ms, rand)


def generate_transaction_id(*, now_ms: int | None = None, rand: int | None = None) -> str:
    return _compose(TRANSACTION_PREFIX, now_ms, rand)


def generate_tenant_id(*, now_ms: int | None = None, rand: int | None = None) -> str:
    return _compose(TENANT_PREFIX, now_ms, rand)

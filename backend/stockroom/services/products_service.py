# backend/stockroom/services/products_service.py
"""
Product Catalog Service

MULTI-TENANT: Every operation is scoped by inventory_id (the tenant string).
A product is located by (inventory_id, product_id); a product id from another
tenant is reported as not found.

Side effects recorded in the activity feed, inside the same DB transaction:
- create -> "Product Added"
- update -> "Product Updated" (plus "Low Stock Alert" when stock is set low)
- delete -> "Product Deleted"
"""
from __future__ import annotations

from ..extensions import db
from ..models import Product
from ..validation import NotFoundError
from .activity_service import record_activity, record_low_stock_if_needed
from .concurrency import commit_changes, commit_new_record, run_with_retry
from .identifier_service import generate_product_id
from .supplier_service import link_product_to_supplier
from ..time_utils import utcnow

PRODUCT_MUTABLE_FIELDS = {
    "name",
    "description",
    "original_price",
    "price",
    "stock",
    "category",
    "supplier_id",
    "image_url",
}

PRODUCT_NOT_FOUND = "Product not found in the specified inventory"


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def list_products(inventory_id: str) -> list[Product]:
    return (
        db.session.query(Product)
        .filter(Product.inventory_id == inventory_id)
        .order_by(Product.created_at.asc(), Product.id.asc())
        .all()
    )


def find_product(inventory_id: str, product_id: str) -> Product | None:
    return (
        db.session.query(Product)
        .filter(Product.inventory_id == inventory_id, Product.product_id == product_id)
        .first()
    )


def get_product(inventory_id: str, product_id: str) -> Product:
    p = find_product(inventory_id, product_id)
    if p is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return p


def create_product(*, patch: dict) -> Product:
    """
    Create product using a validated patch dict (column keys).

    The product id is generated here, before persistence, from the category.
    A collision on the unique product_id column surfaces as a ValidationError.
    """
    now = utcnow()
    p = Product(
        inventory_id=patch["inventory_id"],
        product_id=generate_product_id(patch.get("category")),
        created_at=now,
        updated_at=now,
    )
    apply_product_patch(p, patch)

    # Supplier lookup runs before add() so autoflush cannot insert the product early
    link_product_to_supplier(p.supplier_id, p.product_id)
    db.session.add(p)
    record_activity(action="Product Added", item=p.name, activity_type="success")

    commit_new_record("product")
    return p


def update_product(*, inventory_id: str, product_id: str, patch: dict) -> Product:
    """
    Apply an allow-listed patch.

    Retried on version conflicts, e.g. a sale moving stock between our read
    and our write. A changed supplier_id is linked on the new supplier.
    """
    def _op():
        p = get_product(inventory_id, product_id)

        apply_product_patch(p, patch)
        p.updated_at = utcnow()

        if "supplier_id" in patch:
            link_product_to_supplier(p.supplier_id, p.product_id)

        record_activity(action="Product Updated", item=p.name, activity_type="info")
        if "stock" in patch:
            record_low_stock_if_needed(p)

        commit_changes("product")
        return p

    return run_with_retry(_op)


def delete_product(*, inventory_id: str, product_id: str) -> None:
    """
    Hard-delete a product.

    No cascade: transactions referencing it and supplier back-references stay.
    """
    p = get_product(inventory_id, product_id)

    record_activity(action="Product Deleted", item=p.name, activity_type="warning")
    db.session.delete(p)
    db.session.commit()

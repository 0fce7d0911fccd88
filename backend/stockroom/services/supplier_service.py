# Overview: Service-layer operations for suppliers; encapsulates business logic and database work.

"""
Supplier Service

MULTI-TENANT: Suppliers are located by (inventory_id, supplier_id) for
reads and writes. Name and email uniqueness is global, not per tenant.

DESIGN:
- Email is normalized to lower-case before comparison and storage
- Uniqueness is checked up front for a readable message; the unique columns
  still back it up against races
- Supplier -> product links are loose: product_ids is appended on product
  creation and never pruned; get_supplier_products queries products directly
"""

from __future__ import annotations

from ..extensions import db
from ..models import Supplier, Product
from ..validation import NotFoundError, ValidationError
from .activity_service import record_activity
from .concurrency import commit_changes, commit_new_record
from .identifier_service import generate_supplier_id
from ..time_utils import utcnow

SUPPLIER_MUTABLE_FIELDS = {"name", "email", "phone", "address", "status"}

SUPPLIER_NOT_FOUND = "Supplier not found in the specified inventory"


def apply_supplier_patch(s: Supplier, patch: dict) -> None:
    for k, v in patch.items():
        if k not in SUPPLIER_MUTABLE_FIELDS:
            continue
        setattr(s, k, v)


def _ensure_unique(*, name: str | None, email: str | None, exclude_supplier_id: str | None = None) -> None:
    """Raise ValidationError when another supplier already uses the email or name."""
    def _others():
        q = db.session.query(Supplier)
        if exclude_supplier_id is not None:
            q = q.filter(Supplier.supplier_id != exclude_supplier_id)
        return q

    if email:
        if _others().filter(Supplier.email == email.lower()).first():
            raise ValidationError("Email already exists")

    if name:
        if _others().filter(Supplier.name == name).first():
            raise ValidationError("Supplier name already exists")


def create_supplier(*, patch: dict) -> Supplier:
    """
    Create a new supplier from a validated patch (column keys).

    Raises:
        ValidationError: duplicate email or name, or identifier collision
    """
    _ensure_unique(name=patch.get("name"), email=patch.get("email"))

    now = utcnow()
    supplier = Supplier(
        inventory_id=patch["inventory_id"],
        supplier_id=generate_supplier_id(),
        status="active",
        product_ids=[],
        created_at=now,
        updated_at=now,
    )
    apply_supplier_patch(supplier, patch)

    db.session.add(supplier)
    commit_new_record("supplier")
    return supplier


def list_suppliers(inventory_id: str) -> list[Supplier]:
    return (
        db.session.query(Supplier)
        .filter(Supplier.inventory_id == inventory_id)
        .order_by(Supplier.name.asc(), Supplier.id.asc())
        .all()
    )


def find_supplier(supplier_id: str) -> Supplier | None:
    return db.session.query(Supplier).filter(Supplier.supplier_id == supplier_id).first()


def get_supplier(inventory_id: str, supplier_id: str) -> Supplier:
    supplier = (
        db.session.query(Supplier)
        .filter(Supplier.inventory_id == inventory_id, Supplier.supplier_id == supplier_id)
        .first()
    )
    if supplier is None:
        raise NotFoundError(SUPPLIER_NOT_FOUND)
    return supplier


def update_supplier(*, inventory_id: str, supplier_id: str, patch: dict) -> Supplier:
    supplier = get_supplier(inventory_id, supplier_id)

    _ensure_unique(
        name=patch.get("name"),
        email=patch.get("email"),
        exclude_supplier_id=supplier.supplier_id,
    )

    apply_supplier_patch(supplier, patch)
    supplier.updated_at = utcnow()
    record_activity(action="Supplier Updated", item=supplier.name, activity_type="info")

    commit_changes("supplier")
    return supplier


def delete_supplier(*, inventory_id: str, supplier_id: str) -> None:
    """Remove a supplier. Products keep their supplier_id."""
    supplier = get_supplier(inventory_id, supplier_id)
    db.session.delete(supplier)
    db.session.commit()


def get_supplier_products(supplier_id: str) -> tuple[Supplier, list[Product]]:
    """
    All products referencing supplier_id, regardless of tenant.

    Raises NotFoundError if the supplier itself does not exist.
    """
    supplier = find_supplier(supplier_id)
    if supplier is None:
        raise NotFoundError("Supplier not found")

    products = (
        db.session.query(Product)
        .filter(Product.supplier_id == supplier_id)
        .order_by(Product.created_at.asc(), Product.id.asc())
        .all()
    )
    return supplier, products


def link_product_to_supplier(supplier_id: str, product_id: str) -> None:
    """Append product_id to the supplier's back-reference list; no-op for unknown suppliers."""
    supplier = find_supplier(supplier_id)
    if supplier is None:
        return
    existing = list(supplier.product_ids or [])
    if product_id in existing:
        return
    # Reassign so the JSON column is flagged dirty
    supplier.product_ids = existing + [product_id]

# Overview: Service-layer operations for the transaction ledger; keeps product stock consistent with movements.

# backend/stockroom/services/transaction_service.py

from __future__ import annotations

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import Product, Transaction
from ..validation import InsufficientStockError, NotFoundError, ValidationError
from .activity_service import record_activity, record_low_stock_if_needed
from .concurrency import commit_new_record, lock_for_update, run_with_retry
from .identifier_service import generate_transaction_id
from ..time_utils import utcnow
"""
Stock Ledger Invariants (authoritative)

Stock model:
- Product.stock is a mutable on-hand quantity, kept in step with the ledger.
- Every movement's stock effect is applied when the entry is CREATED, not when
  it is completed:
    SALE      -> stock - quantity
    PURCHASE  -> stock + quantity
    RETURN    -> stock + quantity
    ADJUSTMENT, TRANSFER -> no automatic effect
- total_amount = quantity * unit_price, recomputed on every write.

Business invariants:
- Stock may never go negative. A SALE larger than stock is rejected before
  anything is written.
- The ledger entry and the stock change are committed in ONE DB transaction.
- The product row is read FOR UPDATE and is version-checked on write; a
  concurrent writer makes the commit fail with StaleDataError and the whole
  operation is retried from a fresh read (run_with_retry).

Status lifecycle:
- PENDING (initial), COMPLETED, CANCELLED, REFUNDED. Any declared status may
  follow any other; there is no transition table.
- ONLY COMPLETED -> CANCELLED reverses the creation-time stock effect.
  PENDING -> CANCELLED keeps it, even though the stock was already moved at
  creation. This asymmetry is existing behavior, kept until the business rule
  is settled.
- A reversal whose product has been deleted is skipped (logged, not an error).
"""

TRANSACTION_TYPES = ("SALE", "PURCHASE", "RETURN", "ADJUSTMENT", "TRANSFER")
TRANSACTION_STATUSES = ("PENDING", "COMPLETED", "CANCELLED", "REFUNDED")
PAYMENT_METHODS = ("CASH", "CARD", "UPI", "BANK_TRANSFER", "CREDIT")
PAYMENT_STATUSES = ("PENDING", "PAID", "PARTIALLY_PAID", "REFUNDED")

# Sign of the creation-time stock effect per movement type
STOCK_DIRECTION = {
    "SALE": -1,
    "PURCHASE": 1,
    "RETURN": 1,
    "ADJUSTMENT": 0,
    "TRANSFER": 0,
}

TRANSACTION_MUTABLE_FIELDS = {
    "type",
    "quantity",
    "unit_price",
    "status",
    "payment_method",
    "payment_status",
    "customer_details",
    "notes",
    "reference_number",
}


def stock_effect(tx_type: str, quantity: int) -> int:
    """Signed stock change applied when a movement of tx_type is created."""
    return STOCK_DIRECTION[tx_type] * quantity


def reverses_stock(old_status: str, new_status: str) -> bool:
    return old_status == "COMPLETED" and new_status == "CANCELLED"


def compute_total_amount(quantity: int, unit_price: float) -> float:
    return quantity * unit_price


def apply_transaction_patch(tx: Transaction, patch: dict) -> None:
    for k, v in patch.items():
        if k not in TRANSACTION_MUTABLE_FIELDS:
            continue
        setattr(tx, k, v)


def _locked_product(inventory_id: str, product_id: str) -> Product | None:
    query = db.session.query(Product).filter(
        Product.inventory_id == inventory_id,
        Product.product_id == product_id,
    )
    return lock_for_update(query).first()


def _apply_stock_delta(product: Product, delta: int) -> None:
    if delta == 0:
        return
    new_stock = product.stock + delta
    if new_stock < 0:
        raise InsufficientStockError("Insufficient stock available")
    product.stock = new_stock
    product.updated_at = utcnow()


def create_transaction(*, patch: dict) -> Transaction:
    """
    Record a movement and apply its stock effect atomically.

    patch is a validated dict (column keys) holding at least inventory_id,
    product_id, type, quantity and unit_price. Any client totalAmount has
    already been dropped by the route policy; it is derived here.

    Raises:
        NotFoundError: product not in the tenant's inventory
        InsufficientStockError: SALE quantity exceeds current stock
        ValidationError: generated transaction id collided
    """
    inventory_id = patch["inventory_id"]
    product_id = patch["product_id"]
    tx_type = patch["type"]
    quantity = patch["quantity"]

    if tx_type not in STOCK_DIRECTION:
        raise ValidationError(f"type must be one of: {', '.join(TRANSACTION_TYPES)}")

    def _op():
        product = _locked_product(inventory_id, product_id)
        if product is None:
            raise NotFoundError("Product not found in the specified inventory")

        if tx_type == "SALE" and product.stock < quantity:
            raise InsufficientStockError("Insufficient stock available")

        now = utcnow()
        tx = Transaction(
            transaction_id=generate_transaction_id(),
            inventory_id=inventory_id,
            product_id=product_id,
            status="PENDING",
            payment_method="CASH",
            payment_status="PENDING",
            created_at=now,
            updated_at=now,
        )
        apply_transaction_patch(tx, patch)
        tx.total_amount = compute_total_amount(tx.quantity, tx.unit_price)

        _apply_stock_delta(product, stock_effect(tx_type, quantity))
        db.session.add(tx)

        if tx_type == "SALE":
            record_activity(action="Sale Recorded", item=product.name, activity_type="success")
        if STOCK_DIRECTION[tx_type] < 0:
            record_low_stock_if_needed(product)

        commit_new_record("transaction")
        return tx

    return run_with_retry(_op)


def update_transaction_status(
    *,
    transaction_id: str,
    status: str,
    payment_status: str | None = None,
) -> Transaction:
    """
    Move a transaction to a new status, reversing stock for COMPLETED -> CANCELLED.

    Raises:
        ValidationError: unknown status/payment status
        NotFoundError: no such transaction
        InsufficientStockError: reversal would take stock below zero
    """
    if status not in TRANSACTION_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(TRANSACTION_STATUSES)}")
    if payment_status is not None and payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"paymentStatus must be one of: {', '.join(PAYMENT_STATUSES)}")

    def _op():
        tx = get_transaction(transaction_id)

        if reverses_stock(tx.status, status):
            product = _locked_product(tx.inventory_id, tx.product_id)
            if product is None:
                current_app.logger.warning(
                    "Skipping stock reversal for %s: product %s no longer exists in %s",
                    tx.transaction_id, tx.product_id, tx.inventory_id,
                )
            else:
                _apply_stock_delta(product, -stock_effect(tx.type, tx.quantity))

        tx.status = status
        if payment_status:
            tx.payment_status = payment_status
        tx.total_amount = compute_total_amount(tx.quantity, tx.unit_price)
        tx.updated_at = utcnow()

        db.session.commit()
        return tx

    return run_with_retry(_op)


def get_transaction(transaction_id: str) -> Transaction:
    tx = db.session.query(Transaction).filter(Transaction.transaction_id == transaction_id).first()
    if tx is None:
        raise NotFoundError("Transaction not found")
    return tx


def list_transactions(inventory_id: str) -> list[Transaction]:
    """Tenant ledger, newest first."""
    return (
        db.session.query(Transaction)
        .filter(Transaction.inventory_id == inventory_id)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .all()
    )


def transaction_stats(inventory_id: str) -> list[dict]:
    """Per movement type: count, summed total_amount, summed quantity. No time window."""
    rows = (
        db.session.query(
            Transaction.type,
            func.count(Transaction.id).label("total_transactions"),
            func.coalesce(func.sum(Transaction.total_amount), 0).label("total_amount"),
            func.coalesce(func.sum(Transaction.quantity), 0).label("total_quantity"),
        )
        .filter(Transaction.inventory_id == inventory_id)
        .group_by(Transaction.type)
        .order_by(Transaction.type.asc())
        .all()
    )
    return [
        {
            "type": row.type,
            "totalTransactions": int(row.total_transactions),
            "totalAmount": float(row.total_amount),
            "totalQuantity": int(row.total_quantity),
        }
        for row in rows
    ]

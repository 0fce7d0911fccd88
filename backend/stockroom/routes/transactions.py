# Overview: Flask API routes for transaction ledger operations; parses input and returns JSON responses.

"""
Transaction Routes

Creating a transaction moves product stock immediately (SALE down,
PURCHASE/RETURN up). Cancelling a COMPLETED transaction moves it back.
See services/transaction_service.py for the invariants.
"""

from flask import Blueprint

from ..decorators import envelope_errors
from ..models import Transaction
from ..responses import envelope, json_body
from ..services import transaction_service
from ..services.transaction_service import (
    PAYMENT_METHODS,
    PAYMENT_STATUSES,
    TRANSACTION_STATUSES,
    TRANSACTION_TYPES,
)
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_transaction,
    normalize_tenant_key,
    validate_payload,
)

# totalAmount is deliberately absent: it is always quantity * unitPrice
TRANSACTION_CREATE_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({
        "inventoryId", "productId", "type", "quantity", "unitPrice", "status",
        "paymentMethod", "paymentStatus", "customerDetails", "notes", "referenceNumber",
    }),
    required_on_create=("inventoryId", "productId", "type", "quantity", "unitPrice"),
    aliases={
        "inventoryId": "inventory_id",
        "productId": "product_id",
        "unitPrice": "unit_price",
        "paymentMethod": "payment_method",
        "paymentStatus": "payment_status",
        "customerDetails": "customer_details",
        "referenceNumber": "reference_number",
    },
    choices={
        "type": TRANSACTION_TYPES,
        "status": TRANSACTION_STATUSES,
        "paymentMethod": PAYMENT_METHODS,
        "paymentStatus": PAYMENT_STATUSES,
    },
)


transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


@transactions_bp.get("/inventory/<inventory_id>")
@envelope_errors("Failed to list transactions")
def list_transactions_route(inventory_id: str):
    """Tenant ledger, newest first."""
    transactions = transaction_service.list_transactions(inventory_id)
    return envelope(
        True,
        "Transactions retrieved successfully" if transactions else "No transactions found",
        data=[t.to_dict() for t in transactions],
        count=len(transactions),
    )


@transactions_bp.get("/stats/<inventory_id>")
@envelope_errors("Failed to load transaction statistics")
def transaction_stats_route(inventory_id: str):
    stats = transaction_service.transaction_stats(inventory_id)
    return envelope(True, "Transaction statistics retrieved successfully", data=stats)


@transactions_bp.get("/<transaction_id>")
@envelope_errors("Failed to load transaction")
def get_transaction_route(transaction_id: str):
    tx = transaction_service.get_transaction(transaction_id)
    return envelope(True, "Transaction retrieved successfully", data=tx.to_dict())


@transactions_bp.post("")
@envelope_errors("Failed to create transaction")
def create_transaction_route():
    """
    Record an inventory movement.

    Request body:
    {
        "InventoryId": "INV...",      // required
        "productId": "PRD...",        // required
        "type": "SALE",               // SALE | PURCHASE | RETURN | ADJUSTMENT | TRANSFER
        "quantity": 3,                // integer >= 1
        "unitPrice": 19.99,           // >= 0
        "paymentMethod": "CASH",      // optional
        "paymentStatus": "PENDING",   // optional
        "customerDetails": {...},     // optional: name, email, phone, address
        "notes": "...",               // optional
        "referenceNumber": "..."      // optional
    }

    Returns 400 "Insufficient stock available" when a SALE exceeds stock.
    """
    payload = normalize_tenant_key(json_body())

    patch = validate_payload(model=Transaction, payload=payload, policy=TRANSACTION_CREATE_POLICY, partial=False)
    enforce_rules_transaction(patch)

    tx = transaction_service.create_transaction(patch=patch)
    return envelope(True, "Transaction created successfully", data=tx.to_dict()), 201


@transactions_bp.patch("/<transaction_id>/status")
@envelope_errors("Failed to update transaction status")
def update_transaction_status_route(transaction_id: str):
    """Body: {"status": "...", "paymentStatus": "..." (optional)}."""
    payload = json_body()
    status = payload.get("status")
    if not status:
        raise ValidationError("Status is required")

    tx = transaction_service.update_transaction_status(
        transaction_id=transaction_id,
        status=status,
        payment_status=payload.get("paymentStatus") or None,
    )
    return envelope(True, "Transaction status updated successfully", data=tx.to_dict())

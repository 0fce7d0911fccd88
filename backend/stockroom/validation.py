from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta


# Maximum price: 9,999,999.99
# This prevents nonsensical prices from reaching the ledger totals
MAX_PRICE = 9_999_999.99


class ValidationError(ValueError):
    """400-level input problem."""


class InsufficientStockError(ValidationError):
    """Stock movement would take a product below zero."""


class ConflictError(ValueError):
    """Duplicate registration (reported as 400 like any bad request)."""


class NotFoundError(LookupError):
    """404-level: entity absent for the given tenant + identifier."""


class UnauthorizedError(Exception):
    """401-level credential failure."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: wire names clients are allowed to set (security boundary);
      anything else in the payload is ignored
    - required_on_create: wire names required for POST, in message order
    - aliases: wire name -> column key where they differ (e.g. supplierId -> supplier_id)
    - choices: wire name -> closed set of accepted values
    """
    writable_fields: frozenset[str]
    required_on_create: tuple[str, ...] = ()
    aliases: dict[str, str] | None = None
    choices: dict[str, tuple[str, ...]] | None = None

    def column_for(self, field: str) -> str:
        return (self.aliases or {}).get(field, field)


def get_tenant_id(data) -> str | None:
    """
    Tenant key as sent by clients.

    The product and transaction endpoints historically spell it "InventoryId",
    suppliers and accounts use "inventoryId"; both are accepted everywhere.
    """
    if not data:
        return None
    value = data.get("InventoryId") or data.get("inventoryId")
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def normalize_tenant_key(payload: dict) -> dict:
    """Fold "InventoryId" into "inventoryId" so policies only name one spelling."""
    if "InventoryId" not in payload:
        return payload
    normalized = {k: v for k, v in payload.items() if k != "InventoryId"}
    normalized.setdefault("inventoryId", payload["InventoryId"])
    return normalized


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ""


def _coerce_value(col, value: Any, label: str):
    coltype = col.type

    if value is None:
        return None

    # Booleans
    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        # fallback: truthiness
        return bool(value)

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        # String input - must be plain digits (with optional leading minus)
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{label} must be an integer")
            # Reject scientific notation (e.g., "1e15", "1E10")
            if 'e' in stripped.lower():
                raise ValidationError(f"{label} must be a plain integer (scientific notation not allowed)")
            # Reject decimal points (e.g., "12.5")
            if '.' in stripped:
                raise ValidationError(f"{label} must be an integer (no decimals)")
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{label} must be an integer")
        # Reject floats explicitly
        if isinstance(value, float):
            raise ValidationError(f"{label} must be an integer, not a decimal")
        # Other types
        raise ValidationError(f"{label} must be an integer")

    # Floats (prices)
    if isinstance(coltype, Float):
        if isinstance(value, bool):
            raise ValidationError(f"{label} must be a number")
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                raise ValidationError(f"{label} must be a number")
        else:
            raise ValidationError(f"{label} must be a number")
        if not math.isfinite(number):
            raise ValidationError(f"{label} must be a finite number")
        return number

    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        raise ValidationError(f"{label} must be a datetime")

    # Structured sub-documents (address, customer details)
    if isinstance(coltype, JSON):
        if not isinstance(value, dict):
            raise ValidationError(f"{label} must be an object")
        return value

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    # Default: leave as-is
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict keyed by column key, with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = [f for f in policy.required_on_create if _is_blank(payload.get(f))]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)
    choices = policy.choices or {}

    patch: dict = {}

    for k, raw in payload.items():
        if k not in policy.writable_fields:
            continue
        key = policy.column_for(k)
        col = cols[key]

        # NULL handling
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[key] = None
            continue

        val = _coerce_value(col, raw, k)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        allowed = choices.get(k)
        if allowed and val not in allowed:
            raise ValidationError(f"{k} must be one of: {', '.join(allowed)}")

        patch[key] = val

    return patch


def _check_price(label: str, value: float) -> None:
    if value > MAX_PRICE:
        raise ValidationError(f"{label} cannot exceed {MAX_PRICE:,.2f}")


def enforce_rules_product(patch: dict, *, partial: bool) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    numeric = {
        "original_price": "Original price",
        "price": "Price",
        "stock": "Stock",
    }
    negative = [k for k in numeric if patch.get(k) is not None and patch[k] < 0]
    if negative:
        if not partial:
            raise ValidationError("Original price, price, and stock must be non-negative numbers")
        raise ValidationError(f"{numeric[negative[0]]} must be a non-negative number")

    for k in ("original_price", "price"):
        if patch.get(k) is not None:
            _check_price(k, patch[k])


ADDRESS_FIELDS = ("street", "city", "state", "country", "zipCode")
# Customer details also carry an address: free text, or an object of ADDRESS_FIELDS
CUSTOMER_FIELDS = ("name", "email", "phone")


def _clean_subdocument(value: dict | None, fields: tuple[str, ...]) -> dict | None:
    # Unknown keys are dropped; known keys are kept as trimmed strings
    if value is None:
        return None
    cleaned = {}
    for field in fields:
        raw = value.get(field)
        if raw is None:
            continue
        cleaned[field] = str(raw).strip()
    return cleaned


def enforce_rules_supplier(patch: dict) -> None:
    if patch.get("email"):
        patch["email"] = patch["email"].lower()
    if "address" in patch:
        patch["address"] = _clean_subdocument(patch["address"], ADDRESS_FIELDS)


def enforce_rules_transaction(patch: dict) -> None:
    # quantity >= 1 and unit price >= 0; totalAmount is never taken from the client
    if "quantity" in patch and patch["quantity"] is not None and patch["quantity"] < 1:
        raise ValidationError("quantity must be at least 1")

    if "unit_price" in patch and patch["unit_price"] is not None:
        if patch["unit_price"] < 0:
            raise ValidationError("unitPrice must be a non-negative number")
        _check_price("unitPrice", patch["unit_price"])

    if "customer_details" in patch:
        details = patch["customer_details"]
        cleaned = _clean_subdocument(details, CUSTOMER_FIELDS)
        if cleaned is not None:
            if cleaned.get("email"):
                cleaned["email"] = cleaned["email"].lower()
            address = details.get("address")
            if isinstance(address, dict):
                cleaned["address"] = _clean_subdocument(address, ADDRESS_FIELDS)
            elif address is not None and str(address).strip():
                cleaned["address"] = str(address).strip()
        patch["customer_details"] = cleaned

# Overview: Flask API routes for supplier operations; parses input and returns JSON responses.

"""
Supplier Routes

Suppliers belong to one inventory (inventoryId) but their name and email
are unique across all inventories. Email is stored lower-cased.
"""

from flask import Blueprint, request

from ..decorators import envelope_errors
from ..models import Supplier
from ..responses import envelope, json_body
from ..services import supplier_service
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_supplier,
    get_tenant_id,
    normalize_tenant_key,
    validate_payload,
)

SUPPLIER_STATUSES = ("active", "inactive")

SUPPLIER_CREATE_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"inventoryId", "name", "email", "phone", "address", "status"}),
    required_on_create=("inventoryId", "name", "email", "phone"),
    aliases={"inventoryId": "inventory_id"},
    choices={"status": SUPPLIER_STATUSES},
)

SUPPLIER_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"name", "email", "phone", "address", "status"}),
    choices={"status": SUPPLIER_STATUSES},
)


suppliers_bp = Blueprint("suppliers", __name__, url_prefix="/api/suppliers")


@suppliers_bp.post("")
@envelope_errors("Failed to create supplier")
def create_supplier_route():
    """
    Create a new supplier.

    Request body:
    {
        "inventoryId": "INV...",  // required
        "name": "Acme Wholesale", // required, unique
        "email": "Orders@Acme.io",// required, unique (case-insensitive)
        "phone": "...",           // required
        "address": {"street", "city", "state", "country", "zipCode"},
        "status": "active"        // optional: active | inactive
    }
    """
    payload = normalize_tenant_key(json_body())

    patch = validate_payload(model=Supplier, payload=payload, policy=SUPPLIER_CREATE_POLICY, partial=False)
    enforce_rules_supplier(patch)

    supplier = supplier_service.create_supplier(patch=patch)
    return envelope(True, "Supplier created successfully", data=supplier.to_dict()), 201


@suppliers_bp.get("/inventory/<inventory_id>")
@envelope_errors("Failed to list suppliers")
def list_suppliers_route(inventory_id: str):
    suppliers = supplier_service.list_suppliers(inventory_id)
    return envelope(
        True,
        "Suppliers retrieved successfully" if suppliers else "No suppliers found",
        data=[s.to_dict() for s in suppliers],
        count=len(suppliers),
    )


@suppliers_bp.get("/supplier")
@envelope_errors("Failed to load supplier")
def get_supplier_route():
    """Query params: inventoryId, supplierId (both required)."""
    inventory_id = get_tenant_id(request.args)
    supplier_id = request.args.get("supplierId")
    if not inventory_id or not supplier_id:
        raise ValidationError("Both inventoryId and supplierId are required")

    supplier = supplier_service.get_supplier(inventory_id, supplier_id)
    return envelope(True, "Supplier retrieved successfully", data=supplier.to_dict())


@suppliers_bp.get("/products/<supplier_id>")
@envelope_errors("Failed to list supplier products")
def supplier_products_route(supplier_id: str):
    """Every product referencing this supplier, across all inventories."""
    supplier, products = supplier_service.get_supplier_products(supplier_id)
    return envelope(
        True,
        "Products retrieved successfully" if products else "No products found for this supplier",
        supplier=supplier.to_summary(),
        data=[p.to_dict() for p in products],
        count=len(products),
    )


@suppliers_bp.patch("/update")
@envelope_errors("Failed to update supplier")
def update_supplier_route():
    """Body requires inventoryId and supplierId; name, email, phone, address, status may change."""
    payload = json_body()
    inventory_id = get_tenant_id(payload)
    supplier_id = payload.get("supplierId")
    if not inventory_id or not supplier_id:
        raise ValidationError("Both inventoryId and supplierId are required for update")

    patch = validate_payload(model=Supplier, payload=payload, policy=SUPPLIER_UPDATE_POLICY, partial=True)
    enforce_rules_supplier(patch)

    supplier = supplier_service.update_supplier(
        inventory_id=inventory_id,
        supplier_id=str(supplier_id),
        patch=patch,
    )
    return envelope(True, "Supplier updated successfully", data=supplier.to_dict())


@suppliers_bp.delete("/delete")
@envelope_errors("Failed to delete supplier")
def delete_supplier_route():
    payload = json_body()
    inventory_id = get_tenant_id(payload)
    supplier_id = payload.get("supplierId")
    if not inventory_id or not supplier_id:
        raise ValidationError("Both inventoryId and supplierId are required for deletion")

    supplier_service.delete_supplier(inventory_id=inventory_id, supplier_id=str(supplier_id))
    return envelope(True, "Supplier deleted successfully")

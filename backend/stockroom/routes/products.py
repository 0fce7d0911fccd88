# Overview: Flask API routes for product operations; parses input and returns JSON responses.

# backend/stockroom/routes/products.py
"""
Product catalog routes.

MULTI-TENANT: Every route names the tenant explicitly (InventoryId in the
path, query string or body). Products are looked up by (InventoryId, productId).
"""
from flask import Blueprint, request

from ..services import products_service
from ..models import Product
from ..responses import envelope, json_body
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_product,
    get_tenant_id,
    normalize_tenant_key,
    validate_payload,
)
from ..decorators import envelope_errors

PRODUCT_ALIASES = {
    "inventoryId": "inventory_id",
    "supplierId": "supplier_id",
    "imageUrl": "image_url",
}

PRODUCT_CREATE_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({
        "inventoryId", "name", "description", "original_price", "price",
        "stock", "category", "supplierId", "imageUrl",
    }),
    required_on_create=(
        "inventoryId", "name", "description", "original_price", "price",
        "stock", "category", "supplierId",
    ),
    aliases=PRODUCT_ALIASES,
)

# InventoryId + productId locate the product; they are never rewritten
PRODUCT_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({
        "name", "description", "original_price", "price",
        "stock", "category", "supplierId", "imageUrl",
    }),
    aliases=PRODUCT_ALIASES,
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("/inventory/<inventory_id>")
@envelope_errors("Failed to list products")
def list_products_route(inventory_id: str):
    """List every product in one inventory."""
    products = products_service.list_products(inventory_id)
    return envelope(
        True,
        "Products retrieved successfully" if products else "No products found in this inventory",
        data=[p.to_dict() for p in products],
        count=len(products),
    )


@products_bp.get("/product")
@envelope_errors("Failed to load product")
def get_product_route():
    """
    Single product lookup.

    Query params:
    - InventoryId: str (required)
    - productId: str (required)
    """
    inventory_id = get_tenant_id(request.args)
    product_id = request.args.get("productId")
    if not inventory_id or not product_id:
        raise ValidationError("Both InventoryId and productId are required")

    product = products_service.get_product(inventory_id, product_id)
    return envelope(True, "Product retrieved successfully", data=product.to_dict())


@products_bp.post("")
@envelope_errors("Failed to create product")
def create_product_route():
    """
    Create a new product; productId is generated from the category.

    Body requires InventoryId, name, description, original_price, price,
    stock, category, supplierId; imageUrl is optional.
    """
    payload = normalize_tenant_key(json_body())

    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_CREATE_POLICY, partial=False)
    enforce_rules_product(patch, partial=False)

    product = products_service.create_product(patch=patch)
    return envelope(True, "Product created successfully", data=product.to_dict()), 201


@products_bp.patch("/update")
@envelope_errors("Failed to update product")
def update_product_route():
    """
    Update allow-listed fields of a product.

    Body requires InventoryId and productId; other keys outside the
    allow-list are ignored.
    """
    payload = json_body()
    inventory_id = get_tenant_id(payload)
    product_id = payload.get("productId")
    if not inventory_id or not product_id:
        raise ValidationError("Both InventoryId and productId are required for update")

    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_UPDATE_POLICY, partial=True)
    enforce_rules_product(patch, partial=True)

    product = products_service.update_product(
        inventory_id=inventory_id,
        product_id=str(product_id),
        patch=patch,
    )
    return envelope(True, "Product updated successfully", data=product.to_dict())


@products_bp.delete("/delete")
@envelope_errors("Failed to delete product")
def delete_product_route():
    """Delete a product. Body requires InventoryId and productId."""
    payload = json_body()
    inventory_id = get_tenant_id(payload)
    product_id = payload.get("productId")
    if not inventory_id or not product_id:
        raise ValidationError("Both InventoryId and productId are required for deletion")

    products_service.delete_product(inventory_id=inventory_id, product_id=str(product_id))
    return envelope(True, "Product deleted successfully")

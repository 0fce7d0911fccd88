from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class Product(db.Model):
    """
    Product master data.

    MULTI-TENANT: Products are scoped by inventory_id, an opaque tenant string
    minted at account registration. It is compared for equality only.

    STOCK: `stock` is the mutable on-hand quantity. Transactions adjust it in
    the same DB transaction that records the movement; the check constraint
    keeps it non-negative even if a caller forgets the service-level check.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_inventory_product", "inventory_id", "product_id"),
        db.CheckConstraint("stock >= 0", name="ck_products_stock_nonnegative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    inventory_id = db.Column(db.String(64), nullable=False, index=True)

    # Generated (PRD + category hint + millis + random); uniqueness enforced here
    product_id = db.Column(db.String(64), nullable=False, unique=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    original_price = db.Column(db.Float, nullable=False)
    price = db.Column(db.Float, nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    category = db.Column(db.String(64), nullable=False)

    # Loose reference: not a foreign key, suppliers may be deleted independently
    supplier_id = db.Column(db.String(64), nullable=False, index=True)
    image_url = db.Column(db.String(1024), nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product product_id={self.product_id!r} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "inventoryId": self.inventory_id,
            "productId": self.product_id,
            "name": self.name,
            "description": self.description,
            "original_price": self.original_price,
            "price": self.price,
            "stock": self.stock,
            "category": self.category,
            "supplierId": self.supplier_id,
            "imageUrl": self.image_url,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }


class Supplier(db.Model):
    """
    Supplier directory entry.

    Name and email are unique across all tenants (email stored lower-cased).
    product_ids is a loose back-reference list: appended when a product naming
    this supplier is created, never cleaned up on product deletion.
    """
    __tablename__ = "suppliers"
    __table_args__ = (
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    inventory_id = db.Column(db.String(64), nullable=False, index=True)
    supplier_id = db.Column(db.String(64), nullable=False, unique=True)

    name = db.Column(db.String(255), nullable=False, unique=True)
    email = db.Column(db.String(255), nullable=False, unique=True)
    phone = db.Column(db.String(64), nullable=False)

    # {street, city, state, country, zipCode}
    address = db.Column(db.JSON, nullable=True)

    status = db.Column(db.String(16), nullable=False, default="active")

    product_ids = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Supplier supplier_id={self.supplier_id!r} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "inventoryId": self.inventory_id,
            "supplierId": self.supplier_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "status": self.status,
            "products": list(self.product_ids or []),
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }

    def to_summary(self) -> dict:
        return {
            "supplierId": self.supplier_id,
            "name": self.name,
            "email": self.email,
        }


class Transaction(db.Model):
    """
    Inventory movement (ledger entry).

    total_amount is derived: the transaction service recomputes
    quantity * unit_price whenever it writes the row. Clients never set it.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.Index("ix_transactions_inventory_product", "inventory_id", "product_id"),
        db.Index("ix_transactions_type_status", "type", "status"),
        db.CheckConstraint("quantity >= 1", name="ck_transactions_quantity_positive"),
        db.CheckConstraint("unit_price >= 0", name="ck_transactions_unit_price_nonnegative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    transaction_id = db.Column(db.String(64), nullable=False, unique=True)
    inventory_id = db.Column(db.String(64), nullable=False)
    product_id = db.Column(db.String(64), nullable=False)

    type = db.Column(db.String(16), nullable=False, default="SALE")
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Float, nullable=False)
    total_amount = db.Column(db.Float, nullable=False)

    status = db.Column(db.String(16), nullable=False, default="PENDING")
    payment_method = db.Column(db.String(16), nullable=False, default="CASH")
    payment_status = db.Column(db.String(16), nullable=False, default="PENDING")

    # {name, email, phone, address}
    customer_details = db.Column(db.JSON, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    # External reference (invoice number, receipt number)
    reference_number = db.Column(db.String(128), nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return (
            f"<Transaction transaction_id={self.transaction_id!r} type={self.type} "
            f"quantity={self.quantity} status={self.status}>"
        )

    def to_dict(self) -> dict:
        return {
            "transactionId": self.transaction_id,
            "inventoryId": self.inventory_id,
            "productId": self.product_id,
            "type": self.type,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "totalAmount": self.total_amount,
            "status": self.status,
            "paymentMethod": self.payment_method,
            "paymentStatus": self.payment_status,
            "customerDetails": self.customer_details,
            "notes": self.notes,
            "referenceNumber": self.reference_number,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }

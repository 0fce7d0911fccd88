from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class User(db.Model):
    """
    Account owning exactly one inventory (tenant).

    inventory_id is minted at registration and is the only tenant boundary:
    every product, supplier and transaction carries it as a plain string.
    """
    __tablename__ = "users"
    __table_args__ = (
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Stored lower-cased; uniqueness is therefore case-insensitive
    email = db.Column(db.String(255), nullable=False, unique=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    inventory_id = db.Column(db.String(64), nullable=False, unique=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<User email={self.email!r} inventory_id={self.inventory_id!r}>"

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "inventoryId": self.inventory_id,
            "createdAt": to_utc_z(self.created_at),
        }

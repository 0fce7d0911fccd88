from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class Activity(db.Model):
    """Append-only recent-events feed. Rows are never updated or deleted by the API."""
    __tablename__ = "activities"
    __table_args__ = (
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    action = db.Column(db.String(32), nullable=False)
    item = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(16), nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "action": self.action,
            "item": self.item,
            "type": self.type,
            "timestamp": to_utc_z(self.timestamp),
        }

# Overview: Service-layer operations for the activity feed; append-only recent events.

"""
Activity Feed

- Append-only: rows are inserted, never updated or deleted through the API.
- Other services record activities inside their own DB transaction
  (commit=False), so the event and the change it describes land together.
- Reads are capped to the most recent RECENT_LIMIT entries, newest first.
"""

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Activity, Product
from ..validation import ValidationError
from ..time_utils import utcnow

ACTIVITY_ACTIONS = (
    "Product Added",
    "Product Updated",
    "Product Deleted",
    "Low Stock Alert",
    "Sale Recorded",
    "Supplier Updated",
)
ACTIVITY_TYPES = ("success", "warning", "info")

RECENT_LIMIT = 10


def record_activity(*, action: str, item: str, activity_type: str, commit: bool = False) -> Activity:
    if action not in ACTIVITY_ACTIONS:
        raise ValidationError(f"action must be one of: {', '.join(ACTIVITY_ACTIONS)}")
    if activity_type not in ACTIVITY_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(ACTIVITY_TYPES)}")
    if not item or not str(item).strip():
        raise ValidationError("item is required")

    activity = Activity(
        action=action,
        item=str(item).strip()[:255],
        type=activity_type,
        timestamp=utcnow(),
    )
    db.session.add(activity)
    if commit:
        db.session.commit()
    return activity


def record_low_stock_if_needed(product: Product) -> Activity | None:
    """Record a warning when product stock is at or below LOW_STOCK_THRESHOLD."""
    threshold = current_app.config.get("LOW_STOCK_THRESHOLD", 5)
    if product.stock > threshold:
        return None
    current_app.logger.warning(
        "Low stock for product %s (%s): %s left", product.product_id, product.name, product.stock
    )
    return record_activity(action="Low Stock Alert", item=product.name, activity_type="warning")


def list_recent_activities(limit: int = RECENT_LIMIT) -> list[Activity]:
    return (
        db.session.query(Activity)
        .order_by(Activity.timestamp.desc(), Activity.id.desc())
        .limit(limit)
        .all()
    )

# Overview: Flask API routes for the activity feed.

from flask import Blueprint

from ..decorators import envelope_errors
from ..models import Activity
from ..responses import envelope, json_body
from ..services import activity_service
from ..services.activity_service import ACTIVITY_ACTIONS, ACTIVITY_TYPES
from ..validation import ModelValidationPolicy, validate_payload

ACTIVITY_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({"action", "item", "type"}),
    required_on_create=("action", "item", "type"),
    choices={"action": ACTIVITY_ACTIONS, "type": ACTIVITY_TYPES},
)

activities_bp = Blueprint("activities", __name__, url_prefix="/api/activities")


@activities_bp.get("")
@envelope_errors("Failed to list activities")
def list_activities_route():
    """Most recent activities, newest first (capped)."""
    activities = activity_service.list_recent_activities()
    return envelope(
        True,
        "Activities retrieved successfully" if activities else "No activities found",
        data=[a.to_dict() for a in activities],
        count=len(activities),
    )


@activities_bp.post("")
@envelope_errors("Failed to record activity")
def create_activity_route():
    patch = validate_payload(model=Activity, payload=json_body(), policy=ACTIVITY_POLICY, partial=False)
    activity = activity_service.record_activity(
        action=patch["action"],
        item=patch["item"],
        activity_type=patch["type"],
        commit=True,
    )
    return envelope(True, "Activity recorded successfully", data=activity.to_dict()), 201

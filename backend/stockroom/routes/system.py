# backend/stockroom/routes/system.py
"""
Welcome and health endpoints.

The health check touches every table so a missing migration shows up as
"unhealthy" instead of as 500s on the first real request.
"""

import time
from flask import Blueprint, current_app
from ..extensions import db
from ..models import Activity, Product, Supplier, Transaction, User
from ..responses import display_timestamp

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        details = {
            "products": db.session.query(Product).count(),
            "suppliers": db.session.query(Supplier).count(),
            "transactions": db.session.query(Transaction).count(),
            "activities": db.session.query(Activity).count(),
            "users": db.session.query(User).count(),
        }
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": details,
        }
    except Exception:
        db.session.rollback()
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/")
def welcome():
    return {"message": "Welcome to Inventory Management API"}


@system_bp.get("/api/health")
def health():
    database = check_database_health()
    status_code = 200 if database["status"] == "healthy" else 503
    return {
        "status": database["status"],
        "checks": {"database": database},
        "timestamp": display_timestamp(),
    }, status_code

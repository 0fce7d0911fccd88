# Overview: Flask API routes for account operations; parses input and returns JSON responses.

# backend/stockroom/routes/auth.py
"""
Account API routes

- register mints the inventoryId that scopes all of the account's data
- login returns that inventoryId; there are no session tokens

Bodies use {success, message, data: {email, inventoryId}}, without the
timestamp the other blueprints add.
"""

from flask import Blueprint

from ..decorators import envelope_errors
from ..responses import auth_body, json_body
from ..services import auth_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/register")
@envelope_errors("Failed to register user", auth=True)
def register_route():
    data = json_body()
    user = auth_service.register(data.get("email"), data.get("password"))
    return auth_body(
        True,
        "User registered successfully",
        data={"email": user.email, "inventoryId": user.inventory_id},
    ), 201


@auth_bp.post("/login")
@envelope_errors("Failed to login user", auth=True)
def login_route():
    """
    Check credentials and return the account's inventoryId.

    401 for an unknown email or a wrong password (same message for both).
    """
    data = json_body()
    user = auth_service.authenticate(data.get("email"), data.get("password"))
    return auth_body(
        True,
        "Login successful",
        data={"email": user.email, "inventoryId": user.inventory_id},
    ), 200

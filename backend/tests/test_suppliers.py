# Overview: Pytest coverage for the supplier directory API.

"""
Supplier API Tests

Name and email are unique across every inventory; email comparison is
case-insensitive because it is stored lower-cased.
"""

from stockroom.extensions import db
from stockroom.models import Activity, Supplier
from stockroom.services import supplier_service

from conftest import TENANT_A, TENANT_B


def _payload(**overrides):
    payload = {
        "inventoryId": TENANT_A,
        "name": "Acme Wholesale",
        "email": "Orders@Acme.TEST",
        "phone": "+1 555 0100",
        "address": {"street": "1 Main St", "city": "Springfield", "zipCode": "12345"},
    }
    payload.update(overrides)
    return payload


class TestCreateSupplier:

    def test_create(self, client):
        resp = client.post("/api/suppliers", json=_payload())
        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["supplierId"].startswith("SUP")
        assert data["email"] == "orders@acme.test"
        assert data["status"] == "active"
        assert data["products"] == []
        assert data["address"]["city"] == "Springfield"

    def test_duplicate_email_any_case(self, client):
        client.post("/api/suppliers", json=_payload())
        resp = client.post("/api/suppliers", json=_payload(name="Other Name", email="ORDERS@acme.test"))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Email already exists"
        assert db.session.query(Supplier).count() == 1

    def test_duplicate_name_across_tenants(self, client):
        client.post("/api/suppliers", json=_payload())
        resp = client.post("/api/suppliers", json=_payload(inventoryId=TENANT_B, email="other@acme.test"))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Supplier name already exists"

    def test_invalid_status(self, client):
        resp = client.post("/api/suppliers", json=_payload(status="paused"))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "status must be one of: active, inactive"

    def test_missing_phone(self, client):
        payload = _payload()
        del payload["phone"]
        resp = client.post("/api/suppliers", json=payload)
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Missing required fields: phone"


class TestReadSuppliers:

    def test_list_scoped_to_tenant(self, client, make_supplier):
        make_supplier()
        make_supplier(inventory_id=TENANT_B, name="Beta Supply", email="beta@supply.test")

        body = client.get(f"/api/suppliers/inventory/{TENANT_A}").get_json()
        assert body["count"] == 1
        assert body["data"][0]["name"] == "Acme Wholesale"

    def test_get_single(self, client, make_supplier):
        supplier = make_supplier()
        resp = client.get(
            "/api/suppliers/supplier",
            query_string={"inventoryId": TENANT_A, "supplierId": supplier.supplier_id},
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["supplierId"] == supplier.supplier_id

    def test_get_from_other_tenant(self, client, make_supplier):
        supplier = make_supplier()
        resp = client.get(
            "/api/suppliers/supplier",
            query_string={"inventoryId": TENANT_B, "supplierId": supplier.supplier_id},
        )
        assert resp.status_code == 404

    def test_products_for_supplier_span_tenants(self, client, make_supplier, make_product):
        supplier = make_supplier()
        p1 = make_product(supplier_id=supplier.supplier_id)
        p2 = make_product(inventory_id=TENANT_B, supplier_id=supplier.supplier_id)
        make_product(supplier_id="SUP-ELSEWHERE")

        resp = client.get(f"/api/suppliers/products/{supplier.supplier_id}")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["supplier"] == {
            "supplierId": supplier.supplier_id,
            "name": "Acme Wholesale",
            "email": "orders@acme.test",
        }
        assert body["count"] == 2
        assert {p["productId"] for p in body["data"]} == {p1.product_id, p2.product_id}

    def test_products_for_unknown_supplier(self, client):
        resp = client.get("/api/suppliers/products/SUPNOPE")
        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Supplier not found"


class TestUpdateSupplier:

    def test_update_keeps_own_email(self, client, make_supplier):
        supplier = make_supplier()
        resp = client.patch("/api/suppliers/update", json={
            "inventoryId": TENANT_A,
            "supplierId": supplier.supplier_id,
            "email": "ORDERS@ACME.TEST",
            "phone": "+1 555 0199",
        })
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["phone"] == "+1 555 0199"
        assert data["email"] == "orders@acme.test"

        activity = db.session.query(Activity).filter_by(action="Supplier Updated").one()
        assert activity.item == "Acme Wholesale"

    def test_update_to_taken_email(self, client, make_supplier):
        make_supplier()
        other = make_supplier(name="Beta Supply", email="beta@supply.test")
        resp = client.patch("/api/suppliers/update", json={
            "inventoryId": TENANT_A,
            "supplierId": other.supplier_id,
            "email": "orders@acme.test",
        })
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Email already exists"

        db.session.refresh(other)
        assert other.email == "beta@supply.test"

    def test_unique_race_at_commit_is_rejected(self, client, make_supplier, monkeypatch):
        """Another writer taking the email after the up-front check still yields a 400."""
        make_supplier()
        other = make_supplier(name="Beta Supply", email="beta@supply.test")
        monkeypatch.setattr(supplier_service, "_ensure_unique", lambda **_kw: None)

        resp = client.patch("/api/suppliers/update", json={
            "inventoryId": TENANT_A,
            "supplierId": other.supplier_id,
            "email": "orders@acme.test",
        })
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Could not update supplier: a unique field is already in use"

        db.session.refresh(other)
        assert other.email == "beta@supply.test"
        assert db.session.query(Activity).filter_by(action="Supplier Updated").count() == 0

    def test_update_unknown(self, client):
        resp = client.patch("/api/suppliers/update", json={
            "inventoryId": TENANT_A, "supplierId": "SUPNOPE", "phone": "1",
        })
        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Supplier not found in the specified inventory"


class TestDeleteSupplier:

    def test_delete(self, client, make_supplier):
        supplier = make_supplier()
        supplier_id = supplier.supplier_id
        resp = client.delete("/api/suppliers/delete", json={
            "inventoryId": TENANT_A, "supplierId": supplier_id,
        })
        assert resp.status_code == 200
        assert db.session.query(Supplier).filter_by(supplier_id=supplier_id).first() is None

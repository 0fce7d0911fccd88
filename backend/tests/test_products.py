# Overview: Pytest coverage for the product catalog API.

"""
Product API Tests

- Creation generates a category-based productId and records "Product Added"
- Every lookup is scoped by (InventoryId, productId)
- Updates only touch allow-listed fields
"""

from sqlalchemy.orm.exc import StaleDataError

from stockroom.extensions import db
from stockroom.models import Activity, Product
from stockroom.services import concurrency, products_service

from conftest import TENANT_A, TENANT_B, product_payload


def _actions():
    return [a.action for a in db.session.query(Activity).order_by(Activity.id.asc()).all()]


class TestCreateProduct:

    def test_create_returns_envelope(self, client):
        resp = client.post("/api/products", json=product_payload())
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["success"] is True
        assert body["message"] == "Product created successfully"
        assert isinstance(body["timestamp"], str)

        data = body["data"]
        assert data["productId"].startswith("PRDHAR")
        assert data["inventoryId"] == TENANT_A
        assert data["stock"] == 10
        assert data["supplierId"] == "SUP-NONE"

    def test_create_records_activity(self, client):
        client.post("/api/products", json=product_payload(name="Angle Grinder"))
        activity = db.session.query(Activity).one()
        assert activity.action == "Product Added"
        assert activity.item == "Angle Grinder"
        assert activity.type == "success"

    def test_lowercase_inventory_key_accepted(self, client):
        payload = product_payload()
        payload["inventoryId"] = payload.pop("InventoryId")
        resp = client.post("/api/products", json=payload)
        assert resp.status_code == 201
        assert resp.get_json()["data"]["inventoryId"] == TENANT_A

    def test_zero_stock_allowed(self, client):
        resp = client.post("/api/products", json=product_payload(stock=0))
        assert resp.status_code == 201
        assert resp.get_json()["data"]["stock"] == 0

    def test_missing_fields(self, client):
        resp = client.post("/api/products", json={"InventoryId": TENANT_A, "name": "Drill"})
        assert resp.status_code == 400
        body = resp.get_json()
        assert body["success"] is False
        assert body["message"].startswith("Missing required fields: description")
        assert db.session.query(Product).count() == 0

    def test_negative_values_rejected(self, client):
        resp = client.post("/api/products", json=product_payload(stock=-1))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Original price, price, and stock must be non-negative numbers"

    def test_client_cannot_choose_product_id(self, client):
        resp = client.post("/api/products", json=product_payload(productId="PRDMINE"))
        assert resp.status_code == 201
        assert resp.get_json()["data"]["productId"] != "PRDMINE"

    def test_links_product_to_existing_supplier(self, client, make_supplier):
        supplier = make_supplier()
        resp = client.post("/api/products", json=product_payload(supplierId=supplier.supplier_id))
        product_id = resp.get_json()["data"]["productId"]

        db.session.refresh(supplier)
        assert supplier.product_ids == [product_id]

    def test_non_object_body(self, client):
        resp = client.post("/api/products", json=["not", "an", "object"])
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Invalid JSON payload"


class TestReadProducts:

    def test_list_scoped_to_tenant(self, client, make_product):
        make_product(name="A")
        make_product(name="B")
        make_product(inventory_id=TENANT_B, name="C")

        body = client.get(f"/api/products/inventory/{TENANT_A}").get_json()
        assert body["message"] == "Products retrieved successfully"
        assert body["count"] == 2
        assert sorted(p["name"] for p in body["data"]) == ["A", "B"]

    def test_empty_list(self, client):
        resp = client.get("/api/products/inventory/INV-EMPTY")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["message"] == "No products found in this inventory"
        assert body["data"] == []
        assert body["count"] == 0

    def test_get_single(self, client, product_a):
        resp = client.get(
            "/api/products/product",
            query_string={"InventoryId": TENANT_A, "productId": product_a.product_id},
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["productId"] == product_a.product_id

    def test_get_requires_both_keys(self, client, product_a):
        resp = client.get("/api/products/product", query_string={"productId": product_a.product_id})
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Both InventoryId and productId are required"

    def test_other_tenant_sees_not_found(self, client, product_a):
        resp = client.get(
            "/api/products/product",
            query_string={"InventoryId": TENANT_B, "productId": product_a.product_id},
        )
        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Product not found in the specified inventory"


class TestUpdateProduct:

    def test_update_allow_listed_fields(self, client, product_a):
        resp = client.patch("/api/products/update", json={
            "InventoryId": TENANT_A,
            "productId": product_a.product_id,
            "price": 89.0,
            "stock": 15,
        })
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["price"] == 89.0
        assert data["stock"] == 15
        assert "Product Updated" in _actions()

    def test_identity_fields_are_not_rewritten(self, client, product_a):
        original_id = product_a.product_id
        client.patch("/api/products/update", json={
            "InventoryId": TENANT_A,
            "productId": original_id,
            "name": "Renamed",
            "createdAt": "2000-01-01T00:00:00Z",
        })
        db.session.refresh(product_a)
        assert product_a.product_id == original_id
        assert product_a.inventory_id == TENANT_A
        assert product_a.name == "Renamed"

    def test_update_negative_price(self, client, product_a):
        resp = client.patch("/api/products/update", json={
            "InventoryId": TENANT_A, "productId": product_a.product_id, "price": -5,
        })
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Price must be a non-negative number"

    def test_update_requires_keys(self, client):
        resp = client.patch("/api/products/update", json={"price": 5})
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Both InventoryId and productId are required for update"

    def test_update_unknown_product(self, client):
        resp = client.patch("/api/products/update", json={
            "InventoryId": TENANT_A, "productId": "PRDNOPE", "price": 5,
        })
        assert resp.status_code == 404

    def test_low_stock_update_raises_alert(self, client, product_a):
        client.patch("/api/products/update", json={
            "InventoryId": TENANT_A, "productId": product_a.product_id, "stock": 1,
        })
        alerts = db.session.query(Activity).filter_by(action="Low Stock Alert").all()
        assert len(alerts) == 1
        assert alerts[0].type == "warning"


    def test_changing_supplier_links_new_supplier(self, client, product_a, make_supplier):
        supplier = make_supplier()
        resp = client.patch("/api/products/update", json={
            "InventoryId": TENANT_A,
            "productId": product_a.product_id,
            "supplierId": supplier.supplier_id,
        })
        assert resp.status_code == 200

        db.session.refresh(supplier)
        assert supplier.product_ids == [product_a.product_id]
        body = client.get(f"/api/suppliers/products/{supplier.supplier_id}").get_json()
        assert body["count"] == 1

    def test_update_retried_after_version_conflict(self, client, product_a, monkeypatch):
        """A concurrent write between read and commit is retried from a fresh read."""
        monkeypatch.setattr(concurrency.time, "sleep", lambda _s: None)
        calls = []
        real_apply = products_service.apply_product_patch

        def _conflict_once(p, patch):
            calls.append(1)
            if len(calls) == 1:
                raise StaleDataError("row changed")
            real_apply(p, patch)

        monkeypatch.setattr(products_service, "apply_product_patch", _conflict_once)
        resp = client.patch("/api/products/update", json={
            "InventoryId": TENANT_A, "productId": product_a.product_id, "price": 79.0,
        })
        assert resp.status_code == 200
        assert resp.get_json()["data"]["price"] == 79.0
        assert len(calls) == 2
        assert _actions().count("Product Updated") == 1


class TestDeleteProduct:

    def test_delete_then_lookup_fails(self, client, product_a):
        body = {"InventoryId": TENANT_A, "productId": product_a.product_id}
        resp = client.delete("/api/products/delete", json=body)
        assert resp.status_code == 200
        assert resp.get_json()["message"] == "Product deleted successfully"
        assert "Product Deleted" in _actions()

        resp = client.delete("/api/products/delete", json=body)
        assert resp.status_code == 404

    def test_delete_requires_keys(self, client):
        resp = client.delete("/api/products/delete", json={"InventoryId": TENANT_A})
        assert resp.status_code == 400

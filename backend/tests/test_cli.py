# Overview: Pytest coverage for the flask CLI command groups.

from stockroom.extensions import db
from stockroom.models import Product, Transaction, User


def test_init_db(app, db_session):
    result = app.test_cli_runner().invoke(args=["system", "init-db"])
    assert result.exit_code == 0
    assert "OK Tables created" in result.output


def test_wipe_requires_confirmation(app, db_session, product_a):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["system", "wipe"])
    assert result.exit_code == 1
    assert db.session.query(Product).count() == 1

    result = runner.invoke(args=["system", "wipe", "--yes"])
    assert result.exit_code == 0
    assert db.session.query(Product).count() == 0


def test_accounts_create_and_list(app, db_session):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["accounts", "create", "--email", "Ops@Shop.test", "--password", "pw-123456"])
    assert result.exit_code == 0
    assert "OK Created ops@shop.test" in result.output

    result = runner.invoke(args=["accounts", "list"])
    user = db.session.query(User).one()
    assert f"ops@shop.test\t{user.inventory_id}" in result.output


def test_accounts_create_duplicate(app, db_session):
    runner = app.test_cli_runner()
    args = ["accounts", "create", "--email", "ops@shop.test", "--password", "pw-123456"]
    runner.invoke(args=args)
    result = runner.invoke(args=args)
    assert result.exit_code == 1
    assert "ERROR User already exists" in result.output


def test_ledger_check_clean(app, client, product_a):
    client.post("/api/transactions", json={
        "InventoryId": product_a.inventory_id, "productId": product_a.product_id,
        "type": "SALE", "quantity": 2, "unitPrice": 3,
    })
    result = app.test_cli_runner().invoke(args=["ledger", "check"])
    assert result.exit_code == 0
    assert "OK Ledger consistent" in result.output


def test_ledger_check_reports_mismatch(app, client, product_a):
    client.post("/api/transactions", json={
        "InventoryId": product_a.inventory_id, "productId": product_a.product_id,
        "type": "SALE", "quantity": 2, "unitPrice": 3,
    })
    tx = db.session.query(Transaction).one()
    db.session.query(Transaction).filter_by(id=tx.id).update({"total_amount": 1.0})
    db.session.commit()

    result = app.test_cli_runner().invoke(args=["ledger", "check", "--inventory-id", product_a.inventory_id])
    assert result.exit_code == 1
    assert f"TOTAL MISMATCH {tx.transaction_id}" in result.output

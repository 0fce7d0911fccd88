# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/stockroom/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# Schema bootstrap/repair:
# - python -m flask system init-db
#   Create missing tables and report (without failing) missing unique constraints.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system wipe --yes
#   Delete all rows but keep the schema.
#
# Accounts:
# - python -m flask accounts list
#   List accounts with their inventory ids.
# - python -m flask accounts create --email owner@shop.test --password "secret"
#   Register an account (prompts if options are omitted).
#
# Ledger consistency:
# - python -m flask ledger check [--inventory-id INV...]
#   Report negative stock and transactions whose totalAmount != quantity * unitPrice.

import math

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy import inspect

from .extensions import db
from .models import Activity, Product, Supplier, Transaction, User
from .services import auth_service
from .validation import ConflictError, ValidationError

# table -> columns that must carry a unique constraint or unique index
EXPECTED_UNIQUE_COLUMNS = {
    "products": ["product_id"],
    "suppliers": ["supplier_id", "name", "email"],
    "transactions": ["transaction_id"],
    "users": ["email", "inventory_id"],
}


def _unique_columns(inspector, table: str) -> set[str]:
    found = set()
    for constraint in inspector.get_unique_constraints(table):
        if len(constraint["column_names"]) == 1:
            found.add(constraint["column_names"][0])
    for index in inspector.get_indexes(table):
        if index.get("unique") and len(index["column_names"]) == 1:
            found.add(index["column_names"][0])
    return found


def verify_unique_constraints() -> list[str]:
    """
    Compare the live schema with EXPECTED_UNIQUE_COLUMNS.

    Returns one warning per missing constraint; each is also logged. Missing
    constraints never stop startup, but identifier collisions will then go
    undetected until they are added by a migration.
    """
    inspector = inspect(db.engine)
    tables = set(inspector.get_table_names())
    warnings = []
    for table, columns in EXPECTED_UNIQUE_COLUMNS.items():
        if table not in tables:
            warnings.append(f"table {table} is missing")
            continue
        present = _unique_columns(inspector, table)
        for column in columns:
            if column not in present:
                warnings.append(f"{table}.{column} has no unique constraint")
    for message in warnings:
        current_app.logger.warning("Schema check: %s", message)
    return warnings


@click.group('system')
def system_group():
    """Schema bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet, then verify unique constraints."""
    db.create_all()
    click.echo("OK Tables created")

    warnings = verify_unique_constraints()
    if warnings:
        for message in warnings:
            click.echo(f"WARN {message}")
    else:
        click.echo("OK Unique constraints present")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm dropping every table')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.echo("Refusing to reset without --yes")
        raise SystemExit(1)
    db.drop_all()
    db.create_all()
    click.echo("OK Database reset")


@system_group.command('wipe')
@click.option('--yes', is_flag=True, help='Confirm deleting every row')
@with_appcontext
def wipe(yes):
    """Delete all rows from every table, keeping the schema."""
    if not yes:
        click.echo("Refusing to wipe without --yes")
        raise SystemExit(1)
    for model in (Activity, Transaction, Product, Supplier, User):
        deleted = db.session.query(model).delete()
        click.echo(f"  {model.__tablename__}: {deleted} rows deleted")
    db.session.commit()
    click.echo("OK Data wiped")


@click.group('accounts')
def accounts_group():
    """Account inspection and bootstrap."""


@accounts_group.command('list')
@with_appcontext
def list_accounts():
    users = auth_service.list_users()
    if not users:
        click.echo("No accounts")
        return
    for user in users:
        click.echo(f"{user.email}\t{user.inventory_id}")


@accounts_group.command('create')
@click.option('--email', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@with_appcontext
def create_account(email, password):
    try:
        user = auth_service.register(email, password)
    except (ValidationError, ConflictError) as e:
        db.session.rollback()
        click.echo(f"ERROR {e}")
        raise SystemExit(1)
    click.echo(f"OK Created {user.email} with inventory {user.inventory_id}")


@click.group('ledger')
def ledger_group():
    """Stock ledger consistency checks."""


@ledger_group.command('check')
@click.option('--inventory-id', default=None, help='Limit the check to one inventory')
@with_appcontext
def check_ledger(inventory_id):
    """Report negative stock and transactions whose total is not quantity * unitPrice."""
    products = db.session.query(Product).filter(Product.stock < 0)
    transactions = db.session.query(Transaction)
    if inventory_id:
        products = products.filter(Product.inventory_id == inventory_id)
        transactions = transactions.filter(Transaction.inventory_id == inventory_id)

    problems = 0
    for p in products.all():
        problems += 1
        click.echo(f"NEGATIVE STOCK {p.inventory_id} {p.product_id}: {p.stock}")

    for tx in transactions.all():
        expected = tx.quantity * tx.unit_price
        if not math.isclose(tx.total_amount, expected, rel_tol=1e-9, abs_tol=1e-9):
            problems += 1
            click.echo(f"TOTAL MISMATCH {tx.transaction_id}: {tx.total_amount} != {expected}")

    if problems:
        click.echo(f"FAIL {problems} problem(s) found")
        raise SystemExit(1)
    click.echo("OK Ledger consistent")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(accounts_group)
    app.cli.add_command(ledger_group)

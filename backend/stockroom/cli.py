# Overview: Flask CLI command groups for bootstrap, demo data, and stock inspection.

# backend/stockroom/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create all tables (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system seed-demo
#   Load the demo catalog (3 containers, 2 vendors, 2 kitchens) and its
#   opening movements. Existing ids are skipped.
#
# Stock inspection:
# - python -m flask stock on-hand --item cnt_200ml [--chef chef_aabha]
#   Print the derived on-hand for one item under one owner (default: warehouse).
# - python -m flask stock overview
#   Print every owner's totals, including low-stock flags.

import click
from flask.cli import with_appcontext

from .extensions import db
from .services.access_policy import CurrentUser, FOUNDER
from .services.inventory_service import InventoryService


# Identity used for audit entries written by CLI commands
SYSTEM_USER = CurrentUser(id="system", role=FOUNDER)

DEMO_ITEMS = [
    {"id": "cnt_100ml", "name": "100 ml Container", "unit": "pcs", "sku": "CNT-100", "min_stock": 50},
    {"id": "cnt_200ml", "name": "200 ml Container", "unit": "pcs", "sku": "CNT-200", "min_stock": 40},
    {"id": "cnt_300ml", "name": "300 ml Container", "unit": "pcs", "sku": "CNT-300", "min_stock": 30},
]

DEMO_VENDORS = [
    {"id": "vendor_alpha", "name": "Alpha Packaging", "phone": "9876543210"},
    {"id": "vendor_beta", "name": "Beta Box Co.", "phone": "9123456780"},
]

DEMO_CHEFS = [
    {"id": "chef_aabha", "name": "Chef Aabha - South Delhi", "email": "aabha.chef@example.com"},
    {"id": "chef_riya", "name": "Chef Riya - Gurgaon", "email": "riya.chef@example.com"},
]

DEMO_MOVEMENTS = [
    {"item_id": "cnt_200ml", "vendor_id": "vendor_alpha", "kind": "IN", "quantity": 120,
     "chef_id": None, "note": "Opening stock received at warehouse"},
    {"item_id": "cnt_200ml", "vendor_id": "vendor_alpha", "kind": "OUT", "quantity": 30,
     "chef_id": "chef_aabha", "note": "Dispatched for Sunday brunch service"},
    {"item_id": "cnt_100ml", "vendor_id": "vendor_beta", "kind": "OUT", "quantity": 40,
     "chef_id": "chef_riya", "note": "Packed tasting menu kits"},
]


def _owner_option(value):
    if value is None or value.strip().lower() in ("", "warehouse"):
        return None
    return value.strip()


def _fmt_qty(value: float) -> str:
    return f"{value:g}"


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create every table that does not exist yet."""
    click.echo("START Initializing stockroom database...")
    db.create_all()
    click.echo("PASS Tables ready.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    Drop and recreate all tables.

    DEV/TEST only: every item, vendor, kitchen, movement and audit entry is lost.
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system seed-demo' to load demo data.")


@system_group.command('seed-demo')
@with_appcontext
def seed_demo():
    """
    Load the demo catalog and opening movements.

    Catalog rows are created with fixed ids and skipped when the id exists.
    Movements are only appended to an empty ledger, so running this twice
    never doubles the opening stock.
    """
    svc = InventoryService(db.session)

    seeded = [
        (DEMO_ITEMS, svc.catalog.items_by_id, svc.create_item, "item"),
        (DEMO_VENDORS, svc.catalog.vendors_by_id, svc.create_vendor, "vendor"),
        (DEMO_CHEFS, svc.catalog.chefs_by_id, svc.create_chef, "kitchen"),
    ]
    for rows, existing, create, label in seeded:
        for fields in rows:
            if fields["id"] in existing():
                click.echo(f"WARN  {label.capitalize()} '{fields['id']}' already exists, skipping...")
                continue
            row = create(SYSTEM_USER, dict(fields))
            click.echo(f"PASS Created {label}: {row.name} ({row.id})")

    if svc.ledger.on_hand_by_key():
        click.echo("WARN  Ledger already has movements, skipping opening stock.")
        return

    for fields in DEMO_MOVEMENTS:
        mv = svc.record_movement(SYSTEM_USER, **fields)
        owner = svc.catalog.owner_label(mv.chef_id)
        click.echo(f"PASS Recorded {mv.kind} {_fmt_qty(mv.quantity)} x {mv.item_id} for {owner}")


@click.group('stock')
def stock_group():
    """Derived stock inspection commands."""


@stock_group.command('on-hand')
@click.option('--item', 'item_id', required=True, help='Item id')
@click.option('--chef', 'chef_id', default=None, help='Kitchen id (omit or "warehouse" for the warehouse)')
@with_appcontext
def stock_on_hand(item_id, chef_id):
    """Print the on-hand quantity for one item under one owner."""
    svc = InventoryService(db.session)
    owner = _owner_option(chef_id)
    qty = svc.on_hand(SYSTEM_USER, item_id, chef_id=owner)
    click.echo(
        f"{svc.catalog.item_label(item_id)} @ {svc.catalog.owner_label(owner)}: {_fmt_qty(qty)}"
    )


@stock_group.command('overview')
@with_appcontext
def stock_overview():
    """Print every owner's totals (warehouse first)."""
    svc = InventoryService(db.session)
    data = svc.overview(SYSTEM_USER)

    for summary in data["owners"]:
        click.echo(f"\n{summary['name']} ({summary['chef_id'] or 'warehouse'})")
        click.echo(f"  shipments in: {summary['shipments_in']}  out: {summary['shipments_out']}")
        click.echo(f"  {'Item':<30} {'On hand':>10} {'Min':>8}")
        for row in summary["totals"]:
            flag = "  LOW" if row["low_stock"] else ""
            min_stock = "-" if row["min_stock"] is None else _fmt_qty(row["min_stock"])
            click.echo(f"  {row['item']:<30} {_fmt_qty(row['quantity']):>10} {min_stock:>8}{flag}")

    click.echo(
        f"\nTotal on hand: {_fmt_qty(data['total_on_hand'])}  "
        f"Low-stock rows: {data['low_stock_count']}"
    )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(stock_group)

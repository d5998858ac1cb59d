# payrecon/cli.py
import click

from .clients import get_clients
from .errors import ReconcileError
from .extensions import db
from .services import payments
from .services.orders import sync_order


@click.command("init-db")
def init_db():
    db.create_all()
    click.echo("Database ready")


@click.command("sync-order")
@click.argument("order_number")
def sync_order_cmd(order_number):
    try:
        o = sync_order(order_number, get_clients().order_source)
    except ReconcileError as e:
        raise click.ClickException(e.message)
    click.echo(f"Order {o.order_number}: total {o.total_amount} {o.currency}, {o.payment_status.value}")


@click.command("cash-payment")
@click.argument("order_number")
@click.argument("amount")
@click.option("--by", "recorded_by", default="system")
@click.option("--note", default=None)
def cash_payment(order_number, amount, recorded_by, note):
    try:
        p, summary = payments.register_cash_payment(order_number, amount, recorded_by, note)
    except ReconcileError as e:
        raise click.ClickException(e.message)
    click.echo(f"Cash payment {p.id}: paid {summary.paid}, balance {summary.balance}, {summary.status.value}")


def register_cli(app):
    app.cli.add_command(init_db)
    app.cli.add_command(sync_order_cmd)
    app.cli.add_command(cash_payment)

"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import DEFAULT_STATUS, Order, OrderItem
from storefront.domain.model.value_objects import Money, Quantity


def _parse_items(raw: str) -> list[OrderItem]:
    """Parse 'P1:3,P2:5' into OrderItems (prices are set by the store)."""
    items: list[OrderItem] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = Quantity(int(qty_str))
        except (ValueError, DomainException):
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        items.append(
            OrderItem(product_id=product_id.strip(), quantity=qty, unit_price=Money.zero())
        )
    return items


def _display_order(order: Order) -> None:
    created = order.created_at.strftime("%Y-%m-%d %H:%M UTC") if order.created_at else "-"
    click.echo(f"Order {order.id}  (status={order.status})")
    click.echo(f"Customer: {order.customer_id}")
    click.echo(f"Created:  {created}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in order.items:
        click.echo(
            f"  {item.product_id:<20} {item.quantity.value:>5} "
            f"{str(item.unit_price):>10} {str(item.line_total):>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {str(order.total_amount):>20}")


@click.command("add")
@click.option("--customer", "customer_id", required=True, help="Customer ID.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option("--status", default=DEFAULT_STATUS, show_default=True, help="Initial status.")
@click.pass_obj
def order_add(repos, customer_id: str, items: str, status: str) -> None:
    """Place a new order."""
    candidate = Order(
        id="", customer_id=customer_id, items=_parse_items(items), status=status
    )
    try:
        order = repos.orders.add(candidate)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(order)


@click.command("list")
@click.option("--customer", "customer_id", default=None, help="Only this customer's orders.")
@click.option("--status", default=None, help="Only orders with this status.")
@click.pass_obj
def order_list(repos, customer_id: str | None, status: str | None) -> None:
    """List orders."""
    try:
        if customer_id is not None:
            orders = repos.orders.get_by_customer_id(customer_id)
        else:
            orders = repos.orders.list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if status is not None:
        orders = [o for o in orders if o.has_status(status)]
    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<38} {'Customer':<38} {'Status':<12} {'Total':>10}")
    click.echo("-" * 101)
    for o in orders:
        click.echo(
            f"{o.id:<38} {o.customer_id:<38} {o.status:<12} {str(o.total_amount):>10}"
        )


@click.command("show")
@click.argument("order_id")
@click.pass_obj
def order_show(repos, order_id: str) -> None:
    """Display an order's details."""
    try:
        order = repos.orders.get_by_id(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    if order is None:
        raise click.ClickException(f"Order '{order_id}' not found")
    _display_order(order)


@click.command("set-status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--status", required=True, help="New status.")
@click.pass_obj
def order_set_status(repos, order_id: str, status: str) -> None:
    """Change an order's status, keeping its items."""
    try:
        order = repos.orders.update_status(order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order.id} status set to {order.status}")

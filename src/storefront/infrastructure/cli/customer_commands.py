"""CLI commands for the Customer aggregate."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.customer import Address, Customer


def _display_customer(customer: Customer) -> None:
    address = customer.address
    click.echo(f"Customer {customer.id}")
    click.echo(f"Name:    {customer.name}")
    click.echo(f"Email:   {customer.email}")
    click.echo(f"Address: {address.street}, {address.city}, {address.state} {address.zip}")


@click.command("add")
@click.option("--name", required=True, help="Customer name.")
@click.option("--email", required=True, help="Email address (must be unique).")
@click.option("--street", default="", help="Street.")
@click.option("--city", default="", help="City.")
@click.option("--state", default="", help="State.")
@click.option("--zip", "zip_code", default="", help="ZIP code.")
@click.pass_obj
def customer_add(
    repos, name: str, email: str, street: str, city: str, state: str, zip_code: str
) -> None:
    """Register a new customer."""
    candidate = Customer(
        id="",
        name=name,
        email=email,
        address=Address(street=street, city=city, state=state, zip=zip_code),
    )
    try:
        customer = repos.customers.add(candidate)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Customer {customer.id} '{customer.name}' added")


@click.command("list")
@click.pass_obj
def customer_list(repos) -> None:
    """List all customers."""
    try:
        customers = repos.customers.list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not customers:
        click.echo("No customers found.")
        return

    click.echo(f"{'ID':<40} {'Name':<24} {'Email'}")
    click.echo("-" * 90)
    for c in customers:
        click.echo(f"{c.id:<40} {c.name:<24} {c.email}")


@click.command("show")
@click.option("--id", "customer_id", default=None, help="Customer ID.")
@click.option("--email", default=None, help="Customer email.")
@click.pass_obj
def customer_show(repos, customer_id: str | None, email: str | None) -> None:
    """Show a customer, looked up by ID or email."""
    if (customer_id is None) == (email is None):
        raise click.UsageError("Pass exactly one of --id or --email.")
    try:
        if customer_id is not None:
            customer = repos.customers.get_by_id(customer_id)
        else:
            customer = repos.customers.get_by_email(email)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    if customer is None:
        raise click.ClickException(f"Customer '{customer_id or email}' not found")
    _display_customer(customer)


@click.command("update")
@click.option("--id", "customer_id", required=True, help="Customer ID.")
@click.option("--name", required=True, help="New name.")
@click.option("--email", required=True, help="New email address.")
@click.pass_obj
def customer_update(repos, customer_id: str, name: str, email: str) -> None:
    """Replace a customer's name and email."""
    try:
        customer = repos.customers.update(Customer(id=customer_id, name=name, email=email))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Customer {customer.id} updated")

import json
import logging
from pathlib import Path

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure import bootstrap
from storefront.infrastructure.cli.customer_commands import (
    customer_add,
    customer_list,
    customer_show,
    customer_update,
)
from storefront.infrastructure.cli.order_commands import (
    order_add,
    order_list,
    order_set_status,
    order_show,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_low_stock,
    product_set_stock,
    product_show,
)
from storefront.infrastructure.config import StoreSettings
from storefront.infrastructure.persistence.json_codec import parse_json


@click.group()
@click.option(
    "--store",
    "store_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="STOREFRONT_DATA_PATH",
    help="Path of the JSON store document.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, store_path: Path | None, verbose: bool) -> None:
    """Storefront: products, orders and customers in one JSON document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = StoreSettings.from_env()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    if store_path is not None:
        settings = settings.with_data_path(store_path)
    ctx.obj = bootstrap.repositories(bootstrap.document_store(settings))


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def customer() -> None:
    """Manage customers."""


@cli.command("call")
@click.argument("entity")
@click.argument("operation")
@click.option("--params", default="{}", help="Operation parameters as a JSON object.")
@click.pass_obj
def call(repos: bootstrap.Repositories, entity: str, operation: str, params: str) -> None:
    """Run OPERATION on ENTITY and print the result as JSON."""
    try:
        parsed = parse_json(params)
    except ValueError as exc:
        raise click.BadParameter(f"Invalid JSON: {exc}", param_hint="--params")
    if not isinstance(parsed, dict):
        raise click.BadParameter("Expected a JSON object", param_hint="--params")

    operations = bootstrap.catalog_operations(repos)
    try:
        result = operations.dispatch(entity, operation, parsed)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(json.dumps(operations.render(result), indent=2))


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_low_stock)
product.add_command(product_set_stock)
product.add_command(product_show)
order.add_command(order_add)
order.add_command(order_list)
order.add_command(order_set_status)
order.add_command(order_show)
customer.add_command(customer_add)
customer.add_command(customer_list)
customer.add_command(customer_show)
customer.add_command(customer_update)

"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import DEFAULT_LOW_STOCK_THRESHOLD


def _print_products(products: list[Product]) -> None:
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<10} {'Name':<24} {'Category':<14} {'Retail':>10} {'Stock':>6}")
    click.echo("-" * 68)
    for p in products:
        click.echo(
            f"{p.id:<10} {p.name:<24} {p.category:<14} {str(p.retail_price):>10} {p.stock:>6}"
        )


@click.command("add")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", required=True, help="Product name.")
@click.option("--category", default="", help="Category.")
@click.option("--retail-price", required=True, help="Retail price (e.g. 15.00).")
@click.option("--wholesale-price", default="0", help="Wholesale price.")
@click.option("--stock", type=int, default=0, help="Units in stock.")
@click.pass_obj
def product_add(
    repos,
    product_id: str,
    name: str,
    category: str,
    retail_price: str,
    wholesale_price: str,
    stock: int,
) -> None:
    """Add a new product to the catalog."""
    try:
        product = repos.products.add(
            Product(
                id=product_id,
                name=name,
                category=category,
                retail_price=Money.of(retail_price),
                wholesale_price=Money.of(wholesale_price),
                stock=stock,
            )
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' added at {product.retail_price}")


@click.command("list")
@click.option("--category", default=None, help="Only products in this category.")
@click.option("--in-stock", is_flag=True, help="Only products with stock.")
@click.pass_obj
def product_list(repos, category: str | None, in_stock: bool) -> None:
    """List products in the catalog."""
    try:
        if category is not None:
            products = repos.products.get_by_category(category)
        else:
            products = repos.products.list_all()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if in_stock:
        products = [p for p in products if p.in_stock]
    _print_products(products)


@click.command("low-stock")
@click.option(
    "--threshold", type=int, default=DEFAULT_LOW_STOCK_THRESHOLD, show_default=True,
    help="Highest stock level that counts as low.",
)
@click.pass_obj
def product_low_stock(repos, threshold: int) -> None:
    """List products that are running low (but not out of stock)."""
    try:
        products = repos.products.get_low_stock(threshold)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _print_products(products)


@click.command("show")
@click.argument("product_id")
@click.pass_obj
def product_show(repos, product_id: str) -> None:
    """Show a single product."""
    try:
        product = repos.products.get_by_id(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    if product is None:
        raise click.ClickException(f"Product '{product_id}' not found")

    click.echo(f"Product {product.id}: {product.name}")
    click.echo(f"Category:   {product.category}")
    click.echo(f"Retail:     {product.retail_price}")
    click.echo(f"Wholesale:  {product.wholesale_price}")
    click.echo(f"Stock:      {product.stock}")


@click.command("set-stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--stock", type=int, required=True, help="New stock level.")
@click.pass_obj
def product_set_stock(repos, product_id: str, stock: int) -> None:
    """Set a product's stock level."""
    try:
        product = repos.products.update_stock(product_id, stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} stock set to {product.stock}")

import logging

import click

from commerce.infrastructure.cli.inventory_commands import inventory_low, inventory_set, inventory_show
from commerce.infrastructure.cli.order_commands import (
    order_create,
    order_pay,
    order_show,
    order_status,
)
from commerce.infrastructure.cli.post_commands import post_comment, post_create, post_like, post_uncomment
from commerce.infrastructure.cli.product_commands import product_add, product_list, product_update
from commerce.infrastructure.cli.review_commands import review_approve, review_reject, review_submit


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool) -> None:
    """Commerce — orders, inventory and ratings"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def inventory() -> None:
    """Manage inventory."""


@cli.group()
def review() -> None:
    """Moderate product reviews."""


@cli.group()
def post() -> None:
    """Manage posts, likes and comments."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_pay)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
inventory.add_command(inventory_low)
inventory.add_command(inventory_set)
inventory.add_command(inventory_show)
post.add_command(post_comment)
post.add_command(post_create)
post.add_command(post_like)
post.add_command(post_uncomment)
review.add_command(review_approve)
review.add_command(review_reject)
review.add_command(review_submit)

"""Product commands -- the catalogue of one-off and recurring items.

Provides ``streampay products create|get|list|update|delete``. Prices are
given as a JSON array (``--prices '[{"currency":"SAR","amount":299}]'``);
the single ``--price``/``--currency`` pair is still accepted for older
scripts.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from streampay_cli.commands.common import (
    cli_errors,
    data_option,
    format_option,
    open_client,
    resolve_fmt,
)
from streampay_cli.exceptions import InvalidUsageError
from streampay_cli.formatters import PRODUCT, show
from streampay_cli.models import Currency, ProductType, RecurringInterval, ResponseFormat, SortDirection
from streampay_cli.output import extract_items, format_response, info, success
from streampay_cli.params import compact, parse_json_array, parse_json_object, require, require_fields

products_app = typer.Typer(no_args_is_help=True)


def _enum_value(member: Any) -> Optional[str]:
    return member.value if member is not None else None


def _price_fields(
    prices: Optional[str],
    price: Optional[float],
    currency: Optional[Currency],
    description: Optional[str],
    recurring_interval: Optional[RecurringInterval],
    recurring_interval_count: Optional[int],
    is_price_inclusive_of_vat: bool,
    is_price_exempt_from_vat: bool,
) -> dict[str, Any]:
    return compact(
        {
            "prices": parse_json_array(prices, "--prices") if prices is not None else None,
            "price": price,
            "currency": _enum_value(currency),
            "description": description,
            "recurring_interval": _enum_value(recurring_interval),
            "recurring_interval_count": recurring_interval_count,
            "is_price_inclusive_of_vat": True if is_price_inclusive_of_vat else None,
            "is_price_exempt_from_vat": True if is_price_exempt_from_vat else None,
        }
    )


@products_app.command("create")
def products_create(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Product name."),
    product_type: Optional[ProductType] = typer.Option(
        None, "--type", "-t", case_sensitive=False, help="RECURRING or ONE_OFF."
    ),
    prices: Optional[str] = typer.Option(
        None, "--prices", help='Prices as a JSON array, e.g. \'[{"currency":"SAR","amount":299}]\'.'
    ),
    price: Optional[float] = typer.Option(None, "--price", "-p", help="Single price (prefer --prices)."),
    currency: Optional[Currency] = typer.Option(
        None, "--currency", "-c", case_sensitive=False, help="Currency for --price."
    ),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Product description."),
    recurring_interval: Optional[RecurringInterval] = typer.Option(
        None, "--recurring-interval", case_sensitive=False, help="WEEK, MONTH, SEMESTER or YEAR."
    ),
    recurring_interval_count: Optional[int] = typer.Option(
        None, "--recurring-interval-count", help="Intervals per billing cycle (default 1)."
    ),
    is_one_time: bool = typer.Option(False, "--is-one-time", help="Mark the product as one-time."),
    is_price_inclusive_of_vat: bool = typer.Option(
        False, "--is-price-inclusive-of-vat", help="Price includes VAT."
    ),
    is_price_exempt_from_vat: bool = typer.Option(
        False, "--is-price-exempt-from-vat", help="Price is exempt from VAT."
    ),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Create a product."""
    with cli_errors("Failed to create product"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            require(name, "--name")
            require(product_type, "--type")
            if product_type == ProductType.RECURRING and recurring_interval is None:
                raise InvalidUsageError(
                    "RECURRING products require --recurring-interval (WEEK, MONTH, SEMESTER, or YEAR)"
                )
            body = {"name": name, "type": _enum_value(product_type)}
            body.update(
                _price_fields(
                    prices, price, currency, description, recurring_interval,
                    recurring_interval_count, is_price_inclusive_of_vat, is_price_exempt_from_vat,
                )
            )
            if is_one_time:
                body["is_one_time"] = True
        with open_client(ctx) as client:
            result = client.products.create(body)
    success("Product created successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), PRODUCT)


@products_app.command("get")
def products_get(
    ctx: typer.Context,
    product_id: str = typer.Argument(help="Product ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Get a product by ID."""
    with cli_errors("Failed to get product"):
        with open_client(ctx) as client:
            result = client.products.get(product_id)
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), PRODUCT)


@products_app.command("list")
def products_list(
    ctx: typer.Context,
    page: Optional[int] = typer.Option(None, "--page", help="Page number."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Results per page."),
    sort_field: Optional[str] = typer.Option(None, "--sort-field", help="Field to sort by."),
    sort_direction: Optional[SortDirection] = typer.Option(
        None, "--sort-direction", case_sensitive=False, help="asc or desc."
    ),
    search: Optional[str] = typer.Option(None, "--search", help="Search term."),
    active: bool = typer.Option(False, "--active", help="Only active products."),
    inactive: bool = typer.Option(False, "--inactive", help="Only inactive products."),
    product_type: Optional[ProductType] = typer.Option(
        None, "--type", case_sensitive=False, help="RECURRING or ONE_OFF."
    ),
    currency: Optional[Currency] = typer.Option(
        None, "--currency", case_sensitive=False, help="Only products priced in this currency."
    ),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """List products."""
    with cli_errors("Failed to list products"):
        if active and inactive:
            raise InvalidUsageError("--active and --inactive are mutually exclusive")
        params = {
            "page": page,
            "limit": limit,
            "sort_field": sort_field,
            "sort_direction": _enum_value(sort_direction),
            "search_term": search,
            "active": True if active else False if inactive else None,
            "type": _enum_value(product_type),
            "currency": _enum_value(currency),
        }
        with open_client(ctx) as client:
            result = client.products.list(params)

    items = extract_items(result)
    if isinstance(items, list) and not items:
        info("No products found matching the given filters")
        return
    show(result, resolve_fmt(fmt, ResponseFormat.TABLE), PRODUCT)


@products_app.command("update")
def products_update(
    ctx: typer.Context,
    product_id: str = typer.Argument(help="Product ID."),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Product name."),
    product_type: Optional[ProductType] = typer.Option(
        None, "--type", "-t", case_sensitive=False, help="RECURRING or ONE_OFF."
    ),
    prices: Optional[str] = typer.Option(None, "--prices", help="Prices as a JSON array."),
    price: Optional[float] = typer.Option(None, "--price", "-p", help="Single price (prefer --prices)."),
    currency: Optional[Currency] = typer.Option(
        None, "--currency", "-c", case_sensitive=False, help="Currency for --price."
    ),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Product description."),
    recurring_interval: Optional[RecurringInterval] = typer.Option(
        None, "--recurring-interval", case_sensitive=False, help="WEEK, MONTH, SEMESTER or YEAR."
    ),
    recurring_interval_count: Optional[int] = typer.Option(
        None, "--recurring-interval-count", help="Intervals per billing cycle."
    ),
    is_active: Optional[bool] = typer.Option(
        None, "--is-active/--no-is-active", help="Activate or deactivate the product."
    ),
    is_price_inclusive_of_vat: bool = typer.Option(
        False, "--is-price-inclusive-of-vat", help="Price includes VAT."
    ),
    is_price_exempt_from_vat: bool = typer.Option(
        False, "--is-price-exempt-from-vat", help="Price is exempt from VAT."
    ),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Update a product by ID."""
    with cli_errors("Failed to update product"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            body = compact({"name": name, "type": _enum_value(product_type), "is_active": is_active})
            body.update(
                _price_fields(
                    prices, price, currency, description, recurring_interval,
                    recurring_interval_count, is_price_inclusive_of_vat, is_price_exempt_from_vat,
                )
            )
            require_fields("At least one field must be provided when not using --data", body)
        with open_client(ctx) as client:
            result = client.products.update(product_id, body)
    success("Product updated successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), PRODUCT)


@products_app.command("delete")
def products_delete(
    ctx: typer.Context,
    product_id: str = typer.Argument(help="Product ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Delete a product by ID."""
    with cli_errors("Failed to delete product"):
        with open_client(ctx) as client:
            result = client.products.delete(product_id)
    success(f"Product {product_id} deleted successfully")
    if result is not None:
        format_response(result, resolve_fmt(fmt, ResponseFormat.PRETTY))

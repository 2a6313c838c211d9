"""Coupon commands.

Boolean flags take an explicit value (``--is-percentage true``) so that
``false`` can be sent on update.
"""

from __future__ import annotations

from typing import Optional

import typer

from streampay_cli.commands.common import (
    cli_errors,
    data_option,
    format_option,
    open_client,
    resolve_fmt,
)
from streampay_cli.formatters import COUPON, show
from streampay_cli.models import Currency, ResponseFormat, SortDirection
from streampay_cli.output import success, warning
from streampay_cli.params import (
    compact,
    parse_choice,
    parse_discount_value,
    parse_json_object,
    parse_optional_bool,
    require,
    require_fields,
)

coupons_app = typer.Typer(no_args_is_help=True)


@coupons_app.command("create")
def coupons_create(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Coupon name (1-80 characters)."),
    discount_value: Optional[str] = typer.Option(
        None, "--discount-value", help="Discount value >= 0 (e.g. 10, 10.5, 0.25)."
    ),
    is_percentage: Optional[str] = typer.Option(
        None, "--is-percentage", help="true for a percentage discount, false for a fixed amount (default)."
    ),
    currency: Optional[str] = typer.Option(None, "--currency", help="Currency code, required for fixed discounts."),
    is_active: Optional[str] = typer.Option(None, "--is-active", help="true or false (default: true)."),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Create a coupon."""
    with cli_errors("Failed to create coupon"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            require(name, "--name")
            value = parse_discount_value(require(discount_value, "--discount-value"))
            percentage = parse_optional_bool(is_percentage) or False
            code = parse_choice(currency, Currency, "--currency")
            if percentage and code:
                warning("--currency is ignored for percentage coupons and will not be sent")
            if not percentage and not code:
                warning("--currency is recommended for fixed-amount coupons")
            body = {"name": name, "discount_value": value, "is_percentage": percentage}
            if not percentage and code:
                body["currency"] = code
            active = parse_optional_bool(is_active)
            if active is not None:
                body["is_active"] = active
        with open_client(ctx) as client:
            result = client.coupons.create(body)
    success("Coupon created successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), COUPON)


@coupons_app.command("get")
def coupons_get(
    ctx: typer.Context,
    coupon_id: str = typer.Argument(help="Coupon ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Get a coupon by ID."""
    with cli_errors("Failed to get coupon"):
        with open_client(ctx) as client:
            result = client.coupons.get(coupon_id)
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), COUPON)


@coupons_app.command("list")
def coupons_list(
    ctx: typer.Context,
    page: Optional[int] = typer.Option(None, "--page", help="Page number (min 1)."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Items per page (1-100)."),
    search: Optional[str] = typer.Option(None, "--search", help="Search by coupon name."),
    active: Optional[str] = typer.Option(None, "--active", help="Filter by active status (true|false)."),
    is_percentage: Optional[str] = typer.Option(
        None, "--is-percentage", help="Filter by discount type (true|false)."
    ),
    sort_field: Optional[str] = typer.Option(None, "--sort-field", help="Field to sort by."),
    sort_direction: Optional[SortDirection] = typer.Option(
        None, "--sort-direction", case_sensitive=False, help="asc or desc."
    ),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """List coupons."""
    with cli_errors("Failed to list coupons"):
        params = {
            "page": page,
            "limit": limit,
            "search_term": search,
            "active": parse_optional_bool(active),
            "is_percentage": parse_optional_bool(is_percentage),
            "sort_field": sort_field,
            "sort_direction": sort_direction.value if sort_direction else None,
        }
        with open_client(ctx) as client:
            result = client.coupons.list(params)
    show(result, resolve_fmt(fmt, ResponseFormat.TABLE), COUPON)


@coupons_app.command("update")
def coupons_update(
    ctx: typer.Context,
    coupon_id: str = typer.Argument(help="Coupon ID."),
    name: Optional[str] = typer.Option(None, "--name", help="Coupon name (1-80 characters)."),
    discount_value: Optional[str] = typer.Option(None, "--discount-value", help="Discount value >= 0."),
    is_percentage: Optional[str] = typer.Option(None, "--is-percentage", help="true or false."),
    currency: Optional[str] = typer.Option(None, "--currency", help="Currency code."),
    is_active: Optional[str] = typer.Option(None, "--is-active", help="true or false."),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Update a coupon by ID."""
    with cli_errors("Failed to update coupon"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            body = require_fields(
                "At least one field must be provided to update",
                compact(
                    {
                        "name": name,
                        "discount_value": (
                            parse_discount_value(discount_value) if discount_value is not None else None
                        ),
                        "is_percentage": parse_optional_bool(is_percentage),
                        "currency": parse_choice(currency, Currency, "--currency"),
                        "is_active": parse_optional_bool(is_active),
                    }
                ),
            )
        with open_client(ctx) as client:
            result = client.coupons.update(coupon_id, body)
    success("Coupon updated successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), COUPON)


@coupons_app.command("delete")
def coupons_delete(
    ctx: typer.Context,
    coupon_id: str = typer.Argument(help="Coupon ID."),
) -> None:
    """Delete a coupon by ID."""
    with cli_errors("Failed to delete coupon"):
        with open_client(ctx) as client:
            client.coupons.delete(coupon_id)
    success("Coupon deleted successfully")

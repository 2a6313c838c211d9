"""Checkout commands -- shareable payment links.

Provides ``streampay checkout create|get|list|activate|deactivate|update-status``.
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
from streampay_cli.formatters import CHECKOUT, show
from streampay_cli.models import (
    ContactInformationType,
    Currency,
    PaymentLinkStatus,
    ResponseFormat,
    SortDirection,
)
from streampay_cli.output import success
from streampay_cli.params import (
    compact,
    parse_choice,
    parse_choices,
    parse_json,
    parse_json_array,
    parse_json_object,
    require,
    split_csv,
)

checkout_app = typer.Typer(no_args_is_help=True)


def _parse_items(text: str) -> list[Any]:
    items = parse_json_array(text, "--items")
    for item in items:
        if not isinstance(item, dict) or not item.get("product_id"):
            raise InvalidUsageError("Each item in --items must have a product_id")
    return items


@checkout_app.command("create")
def checkout_create(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Payment link name."),
    items: Optional[str] = typer.Option(
        None, "--items", help='Items as a JSON array, e.g. \'[{"product_id":"...","quantity":1}]\'.'
    ),
    description: Optional[str] = typer.Option(None, "--description", help="Payment link description."),
    currency: Optional[str] = typer.Option(None, "--currency", help="Currency code."),
    coupons: Optional[str] = typer.Option(None, "--coupons", help="Comma-separated coupon IDs."),
    max_number_of_payments: Optional[int] = typer.Option(
        None, "--max-number-of-payments", help="Maximum number of payments."
    ),
    valid_until: Optional[str] = typer.Option(None, "--valid-until", help="Expiry date-time."),
    confirmation_message: Optional[str] = typer.Option(
        None, "--confirmation-message", help="Message shown after payment confirmation."
    ),
    payment_methods: Optional[str] = typer.Option(
        None, "--payment-methods", help='Payment methods as a JSON object, e.g. \'{"visa":true}\'.'
    ),
    success_redirect_url: Optional[str] = typer.Option(
        None, "--success-redirect-url", help="Redirect URL after a successful payment."
    ),
    failure_redirect_url: Optional[str] = typer.Option(
        None, "--failure-redirect-url", help="Redirect URL after a failed payment."
    ),
    organization_consumer_id: Optional[str] = typer.Option(
        None, "--organization-consumer-id", help="Restrict the link to one consumer."
    ),
    custom_metadata: Optional[str] = typer.Option(
        None, "--custom-metadata", help="Custom metadata as a JSON object."
    ),
    contact_information_type: Optional[str] = typer.Option(
        None, "--contact-information-type", help="PHONE or EMAIL."
    ),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Create a payment link."""
    with cli_errors("Failed to create payment link"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            require(name, "--name")
            body = {"name": name, "items": _parse_items(require(items, "--items"))}
            body.update(
                compact(
                    {
                        "description": description,
                        "currency": parse_choice(currency, Currency, "--currency"),
                        "coupons": split_csv(coupons) or None,
                        "max_number_of_payments": max_number_of_payments,
                        "valid_until": valid_until,
                        "confirmation_message": confirmation_message,
                        "payment_methods": parse_json(payment_methods) if payment_methods else None,
                        "success_redirect_url": success_redirect_url,
                        "failure_redirect_url": failure_redirect_url,
                        "organization_consumer_id": organization_consumer_id,
                        "custom_metadata": (
                            parse_json_object(custom_metadata, "--custom-metadata") if custom_metadata else None
                        ),
                        "contact_information_type": parse_choice(
                            contact_information_type, ContactInformationType, "--contact-information-type"
                        ),
                    }
                )
            )
        with open_client(ctx) as client:
            result = client.payment_links.create(body)
    success("Payment link created successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), CHECKOUT)


@checkout_app.command("get")
def checkout_get(
    ctx: typer.Context,
    link_id: str = typer.Argument(help="Payment link ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Get a payment link by ID."""
    with cli_errors("Failed to get payment link"):
        with open_client(ctx) as client:
            result = client.payment_links.get(link_id)
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), CHECKOUT)


@checkout_app.command("list")
def checkout_list(
    ctx: typer.Context,
    page: Optional[int] = typer.Option(None, "--page", help="Page number."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Results per page (max 100)."),
    sort_field: Optional[str] = typer.Option(None, "--sort-field", help="Field to sort by."),
    sort_direction: Optional[SortDirection] = typer.Option(
        None, "--sort-direction", case_sensitive=False, help="asc or desc."
    ),
    statuses: Optional[str] = typer.Option(
        None, "--statuses", help="Comma-separated statuses (ACTIVE,INACTIVE,COMPLETED)."
    ),
    from_date: Optional[str] = typer.Option(None, "--from-date", help="Created on or after."),
    to_date: Optional[str] = typer.Option(None, "--to-date", help="Created on or before."),
    from_price: Optional[float] = typer.Option(None, "--from-price", help="Minimum price."),
    to_price: Optional[float] = typer.Option(None, "--to-price", help="Maximum price."),
    product_ids: Optional[str] = typer.Option(None, "--product-ids", help="Comma-separated product IDs."),
    currencies: Optional[str] = typer.Option(None, "--currencies", help="Comma-separated currency codes."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """List payment links."""
    with cli_errors("Failed to list payment links"):
        params = {
            "page": page,
            "limit": limit,
            "sort_field": sort_field,
            "sort_direction": sort_direction.value if sort_direction else None,
            "statuses": parse_choices(statuses, PaymentLinkStatus, "--statuses"),
            "from_date": from_date,
            "to_date": to_date,
            "from_price": from_price,
            "to_price": to_price,
            "product_ids": split_csv(product_ids) or None,
            "currencies": parse_choices(currencies, Currency, "--currencies"),
        }
        with open_client(ctx) as client:
            result = client.payment_links.list(params)
    show(result, resolve_fmt(fmt, ResponseFormat.TABLE), CHECKOUT)


def _set_status(ctx: typer.Context, link_id: str, body: dict[str, Any], summary: str) -> Any:
    with cli_errors(summary):
        with open_client(ctx) as client:
            return client.payment_links.update_status(link_id, body)


@checkout_app.command("activate")
def checkout_activate(
    ctx: typer.Context,
    link_id: str = typer.Argument(help="Payment link ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Activate a payment link."""
    result = _set_status(ctx, link_id, {"status": "ACTIVE"}, "Failed to activate payment link")
    success("Payment link activated successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), CHECKOUT)


@checkout_app.command("deactivate")
def checkout_deactivate(
    ctx: typer.Context,
    link_id: str = typer.Argument(help="Payment link ID."),
    deactivate_message: Optional[str] = typer.Option(
        None, "--deactivate-message", help="Message shown on the deactivated link."
    ),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Deactivate a payment link."""
    body = compact({"status": "INACTIVE", "deactivate_message": deactivate_message})
    result = _set_status(ctx, link_id, body, "Failed to deactivate payment link")
    success("Payment link deactivated successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), CHECKOUT)


@checkout_app.command("update-status")
def checkout_update_status(
    ctx: typer.Context,
    link_id: str = typer.Argument(help="Payment link ID."),
    status: Optional[str] = typer.Option(None, "--status", help="ACTIVE, INACTIVE or COMPLETED."),
    deactivate_message: Optional[str] = typer.Option(
        None, "--deactivate-message", help="Optional deactivation message."
    ),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Set the status of a payment link."""
    with cli_errors("Failed to update payment link status"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            body = compact(
                {
                    "status": parse_choice(require(status, "--status"), PaymentLinkStatus, "--status"),
                    "deactivate_message": deactivate_message,
                }
            )
    result = _set_status(ctx, link_id, body, "Failed to update payment link status")
    success("Payment link status updated successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), CHECKOUT)

"""Invoice commands -- one-off bills and their lifecycle transitions.

Provides ``streampay invoices create|get|list|update`` plus the state
transitions ``send``, ``accept``, ``reject``, ``complete`` and ``cancel``,
each a bodiless POST to ``/invoices/{id}/<action>``.
"""

from __future__ import annotations

from typing import Callable, Optional

import typer

from streampay_cli.commands.common import (
    cli_errors,
    data_option,
    format_option,
    open_client,
    resolve_fmt,
)
from streampay_cli.formatters import INVOICE, show
from streampay_cli.models import Currency, InvoiceStatus, PaymentStatus, ResponseFormat, SortDirection
from streampay_cli.output import success
from streampay_cli.params import (
    compact,
    parse_choice,
    parse_choices,
    parse_json_array,
    parse_json_object,
    require,
    require_fields,
)

invoices_app = typer.Typer(no_args_is_help=True)


@invoices_app.command("create")
def invoices_create(
    ctx: typer.Context,
    consumer_id: Optional[str] = typer.Option(None, "--consumer-id", help="Consumer ID."),
    scheduled_on: Optional[str] = typer.Option(
        None, "--scheduled-on", help="Payment due date (ISO 8601, e.g. 2026-04-01T00:00:00Z)."
    ),
    items: Optional[str] = typer.Option(
        None, "--items", help='Items as a JSON array, e.g. \'[{"product_id":"...","quantity":1}]\'.'
    ),
    payment_methods: Optional[str] = typer.Option(
        None, "--payment-methods", help='Payment methods as a JSON object, e.g. \'{"mada":true,"visa":true}\'.'
    ),
    description: Optional[str] = typer.Option(None, "--description", help="Description (max 500 chars)."),
    notify_consumer: bool = typer.Option(
        True, "--notify-consumer/--no-notify-consumer", help="Send the invoice to the consumer."
    ),
    coupons: Optional[str] = typer.Option(None, "--coupons", help="Invoice-level coupon IDs as a JSON array."),
    exclude_coupons_if_installments: bool = typer.Option(
        False, "--exclude-coupons-if-installments", help="Drop coupons when paying in installments."
    ),
    currency: str = typer.Option("SAR", "--currency", help="Currency code."),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Create an invoice."""
    with cli_errors("Failed to create invoice"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            body = {
                "organization_consumer_id": require(consumer_id, "--consumer-id"),
                "scheduled_on": require(scheduled_on, "--scheduled-on"),
                "items": parse_json_array(require(items, "--items"), "--items"),
                "payment_methods": parse_json_object(
                    require(payment_methods, "--payment-methods"), "--payment-methods"
                ),
            }
            body.update(
                compact(
                    {
                        "description": description,
                        "notify_consumer": None if notify_consumer else False,
                        "coupons": parse_json_array(coupons, "--coupons") if coupons is not None else None,
                        "exclude_coupons_if_installments": True if exclude_coupons_if_installments else None,
                        "currency": parse_choice(currency, Currency, "--currency"),
                    }
                )
            )
        with open_client(ctx) as client:
            result = client.invoices.create(body)
    success("Invoice created successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), INVOICE)


@invoices_app.command("get")
def invoices_get(
    ctx: typer.Context,
    invoice_id: str = typer.Argument(help="Invoice ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Get an invoice by ID."""
    with cli_errors("Failed to get invoice"):
        with open_client(ctx) as client:
            result = client.invoices.get(invoice_id)
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), INVOICE)


@invoices_app.command("list")
def invoices_list(
    ctx: typer.Context,
    page: Optional[int] = typer.Option(None, "--page", help="Page number (default: 1)."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Items per page, max 100 (default: 10)."),
    sort_field: Optional[str] = typer.Option(None, "--sort-field", help="Field to sort by."),
    sort_direction: Optional[SortDirection] = typer.Option(
        None, "--sort-direction", case_sensitive=False, help="asc or desc."
    ),
    search_term: Optional[str] = typer.Option(None, "--search-term", help="Free-text search."),
    include_payments: bool = typer.Option(False, "--include-payments", help="Embed payment objects."),
    payment_link_id: Optional[str] = typer.Option(None, "--payment-link-id", help="Payment link ID."),
    statuses: Optional[str] = typer.Option(None, "--statuses", help="Comma-separated invoice statuses."),
    payment_statuses: Optional[str] = typer.Option(
        None, "--payment-statuses", help="Comma-separated payment statuses."
    ),
    from_date: Optional[str] = typer.Option(None, "--from-date", help="Created on or after (ISO 8601)."),
    to_date: Optional[str] = typer.Option(None, "--to-date", help="Created on or before (ISO 8601)."),
    due_date_from: Optional[str] = typer.Option(None, "--due-date-from", help="Due on or after (ISO 8601)."),
    due_date_to: Optional[str] = typer.Option(None, "--due-date-to", help="Due on or before (ISO 8601)."),
    from_price: Optional[float] = typer.Option(None, "--from-price", help="Total amount >= this value."),
    to_price: Optional[float] = typer.Option(None, "--to-price", help="Total amount <= this value."),
    consumer_id: Optional[str] = typer.Option(None, "--consumer-id", help="Consumer ID."),
    subscription_id: Optional[str] = typer.Option(None, "--subscription-id", help="Subscription ID."),
    currencies: Optional[str] = typer.Option(None, "--currencies", help="Comma-separated currency codes."),
    payments_not_settled: bool = typer.Option(
        False, "--payments-not-settled", help="Only invoices with unsettled card/wallet payments."
    ),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """List invoices."""
    with cli_errors("Failed to list invoices"):
        params = {
            "page": page,
            "limit": limit,
            "sort_field": sort_field,
            "sort_direction": sort_direction.value if sort_direction else None,
            "search_term": search_term,
            "include_payments": True if include_payments else None,
            "payment_link_id": payment_link_id,
            "statuses": parse_choices(statuses, InvoiceStatus, "--statuses"),
            "payment_statuses": parse_choices(payment_statuses, PaymentStatus, "--payment-statuses"),
            "from_date": from_date,
            "to_date": to_date,
            "due_date_from": due_date_from,
            "due_date_to": due_date_to,
            "from_price": from_price,
            "to_price": to_price,
            "organization_consumer_id": consumer_id,
            "subscription_id": subscription_id,
            "currencies": parse_choices(currencies, Currency, "--currencies"),
            "payments_not_settled": True if payments_not_settled else None,
        }
        with open_client(ctx) as client:
            result = client.invoices.list(params)
    show(result, resolve_fmt(fmt, ResponseFormat.TABLE), INVOICE)


@invoices_app.command("update")
def invoices_update(
    ctx: typer.Context,
    invoice_id: str = typer.Argument(help="Invoice ID."),
    scheduled_on: Optional[str] = typer.Option(
        None, "--scheduled-on", help="New due date (ISO 8601, must be in the future)."
    ),
    description: Optional[str] = typer.Option(None, "--description", help="New description (max 500 chars)."),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Edit an invoice in place."""
    with cli_errors("Failed to update invoice"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            body = require_fields(
                "At least one field must be provided to update (--scheduled-on or --description)",
                compact({"scheduled_on": scheduled_on, "description": description}),
            )
        with open_client(ctx) as client:
            result = client.invoices.update(invoice_id, body)
    success("Invoice updated successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), INVOICE)


def _register_transition(action: str, past: str, help_text: str) -> None:
    """Register ``invoices <action> ID``, a bodiless state transition."""

    def command(
        ctx: typer.Context,
        invoice_id: str = typer.Argument(help="Invoice ID."),
        fmt: Optional[ResponseFormat] = format_option(),
    ) -> None:
        with cli_errors(f"Failed to {action} invoice"):
            with open_client(ctx) as client:
                transition: Callable[[str], object] = getattr(client.invoices, action)
                result = transition(invoice_id)
        success(f"Invoice {past} successfully")
        show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), INVOICE)

    command.__doc__ = help_text
    command.__name__ = f"invoices_{action}"
    invoices_app.command(action)(command)


_register_transition("send", "sent", "Send an invoice to the consumer.")
_register_transition("accept", "accepted", "Accept an invoice.")
_register_transition("reject", "rejected", "Reject an invoice.")
_register_transition("complete", "completed", "Mark an invoice as completed.")
_register_transition("cancel", "cancelled", "Cancel an invoice.")

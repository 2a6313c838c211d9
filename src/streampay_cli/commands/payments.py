"""Payment commands -- the individual charges behind an invoice.

Provides ``streampay payments get|list|mark-paid|refund|auto-charge``.
``--invoice-id`` and ``--status`` on ``list`` may be repeated.
"""

from __future__ import annotations

from typing import Optional

import typer

from streampay_cli.commands.common import cli_errors, format_option, open_client, resolve_fmt
from streampay_cli.formatters import PAYMENT, show
from streampay_cli.models import ManualPaymentMethod, PaymentStatus, RefundReason, ResponseFormat, SortDirection
from streampay_cli.output import success
from streampay_cli.params import compact, parse_choice, parse_choices

payments_app = typer.Typer(no_args_is_help=True)


@payments_app.command("get")
def payments_get(
    ctx: typer.Context,
    payment_id: str = typer.Argument(help="Payment ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Get a payment by ID."""
    with cli_errors("Failed to get payment"):
        with open_client(ctx) as client:
            result = client.payments.get(payment_id)
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), PAYMENT)


@payments_app.command("list")
def payments_list(
    ctx: typer.Context,
    invoice_id: Optional[list[str]] = typer.Option(None, "--invoice-id", help="Invoice ID (repeatable)."),
    status: Optional[list[str]] = typer.Option(None, "--status", help="Payment status (repeatable)."),
    search: Optional[str] = typer.Option(None, "--search", help="Search term."),
    from_date: Optional[str] = typer.Option(None, "--from-date", help="From date (ISO 8601)."),
    to_date: Optional[str] = typer.Option(None, "--to-date", help="To date (ISO 8601)."),
    page: Optional[int] = typer.Option(None, "--page", help="Page number (starts at 1)."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Items per page, max 100."),
    sort_field: Optional[str] = typer.Option(None, "--sort-field", help="Sort by field (e.g. amount)."),
    sort_direction: Optional[str] = typer.Option(None, "--sort-direction", help="asc or desc."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """List payments."""
    with cli_errors("Failed to list payments"):
        params = {
            "invoice_id": invoice_id or None,
            "statuses": parse_choices(status, PaymentStatus, "--status"),
            "search_term": search,
            "from_date": from_date,
            "to_date": to_date,
            "page": page,
            "limit": limit,
            "sort_field": sort_field,
            "sort_direction": parse_choice(sort_direction, SortDirection, "--sort-direction", upper=False),
        }
        with open_client(ctx) as client:
            result = client.payments.list(params)
    show(result, resolve_fmt(fmt, ResponseFormat.TABLE), PAYMENT)


@payments_app.command("mark-paid")
def payments_mark_paid(
    ctx: typer.Context,
    payment_id: str = typer.Argument(help="Payment ID."),
    payment_method: str = typer.Option(
        ..., "--payment-method", help="Manual method: CASH, BANK_TRANSFER, CARD or QURRAH."
    ),
    note: Optional[str] = typer.Option(None, "--note", help="Note or reference (e.g. receipt number)."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Record a payment collected outside StreamPay."""
    with cli_errors("Failed to mark payment as paid"):
        body = compact(
            {
                "payment_method": parse_choice(payment_method, ManualPaymentMethod, "--payment-method"),
                "note": note,
            }
        )
        with open_client(ctx) as client:
            result = client.payments.mark_paid(payment_id, body)
    success("Payment marked as paid successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), PAYMENT)


@payments_app.command("refund")
def payments_refund(
    ctx: typer.Context,
    payment_id: str = typer.Argument(help="Payment ID."),
    refund_reason: str = typer.Option(
        ..., "--refund-reason", help="REQUESTED_BY_CUSTOMER, DUPLICATE, FRAUDULENT or OTHER."
    ),
    refund_note: Optional[str] = typer.Option(None, "--refund-note", help="Note explaining the refund."),
    allow_multiple: bool = typer.Option(
        False, "--allow-multiple", help="Also allow refunding related payments."
    ),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Refund a payment."""
    with cli_errors("Failed to refund payment"):
        body = compact(
            {
                "refund_reason": parse_choice(refund_reason, RefundReason, "--refund-reason"),
                "refund_note": refund_note,
                "allow_refund_multiple_related_payments": True if allow_multiple else None,
            }
        )
        with open_client(ctx) as client:
            result = client.payments.refund(payment_id, body)
    success("Payment refunded successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), PAYMENT)


@payments_app.command("auto-charge")
def payments_auto_charge(
    ctx: typer.Context,
    payment_id: str = typer.Argument(help="Payment ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Charge the consumer's saved card for a payment now."""
    with cli_errors("Failed to charge payment"):
        with open_client(ctx) as client:
            result = client.payments.auto_charge(payment_id)
    success("Payment charged successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), PAYMENT)

"""Subscription commands -- recurring billing for a consumer.

Provides ``streampay subs create|get|list|update|cancel`` plus the freeze
period workflow: ``freeze``, ``freeze-list``, ``freeze-update``,
``freeze-delete`` and ``unfreeze``.

Example::

    streampay subs create --consumer-id c_1 --period-start 2025-01-01T00:00:00Z \\
        --items '[{"product_id": "p_1", "quantity": 1}]'
    streampay subs freeze sub_1 --freeze-start 2025-03-01T00:00:00Z --notes "Travel"
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
from streampay_cli.formatters import FREEZE, SUBSCRIPTION, show
from streampay_cli.models import Currency, ResponseFormat, SortDirection, SubscriptionStatus
from streampay_cli.output import format_response, success
from streampay_cli.params import (
    compact,
    parse_choices,
    parse_json,
    parse_json_array,
    parse_json_object,
    require,
    split_csv,
)

subscriptions_app = typer.Typer(no_args_is_help=True)


def _sort_value(direction: Optional[SortDirection]) -> Optional[str]:
    return direction.value if direction else None


@subscriptions_app.command("create")
def subs_create(
    ctx: typer.Context,
    consumer_id: Optional[str] = typer.Option(None, "--consumer-id", help="Consumer ID."),
    period_start: Optional[str] = typer.Option(None, "--period-start", help="Period start (ISO 8601)."),
    items: Optional[str] = typer.Option(
        None, "--items", help='Items as a JSON array, e.g. \'[{"product_id":"...","quantity":1}]\'.'
    ),
    notify_consumer: Optional[bool] = typer.Option(
        None, "--notify-consumer/--no-notify-consumer", help="Notify the consumer (API default: yes)."
    ),
    description: Optional[str] = typer.Option(None, "--description", help="Subscription description."),
    coupons: Optional[str] = typer.Option(None, "--coupons", help="Coupon IDs as a JSON array."),
    until_cycle_number: Optional[int] = typer.Option(
        None, "--until-cycle-number", help="Stop after N billing cycles."
    ),
    currency: Optional[Currency] = typer.Option(None, "--currency", case_sensitive=False, help="Currency code."),
    exclude_coupons_if_installments: bool = typer.Option(
        False, "--exclude-coupons-if-installments", help="Drop coupons when paying in installments."
    ),
    override_payment_methods: Optional[str] = typer.Option(
        None, "--override-payment-methods", help="Payment methods as a JSON object."
    ),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Create a subscription."""
    with cli_errors("Failed to create subscription"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            body = {
                "organization_consumer_id": require(consumer_id, "--consumer-id"),
                "period_start": require(period_start, "--period-start"),
                "items": parse_json_array(require(items, "--items"), "--items"),
            }
            body.update(
                compact(
                    {
                        "notify_consumer": notify_consumer,
                        "description": description,
                        "coupons": parse_json_array(coupons, "--coupons") if coupons is not None else None,
                        "until_cycle_number": until_cycle_number,
                        "currency": currency.value if currency else None,
                        "exclude_coupons_if_installments": True if exclude_coupons_if_installments else None,
                        "override_payment_methods": (
                            parse_json_object(override_payment_methods, "--override-payment-methods")
                            if override_payment_methods is not None
                            else None
                        ),
                    }
                )
            )
        with open_client(ctx) as client:
            result = client.subscriptions.create(body)
    success("Subscription created successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), SUBSCRIPTION)


@subscriptions_app.command("get")
def subs_get(
    ctx: typer.Context,
    subscription_id: str = typer.Argument(help="Subscription ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Get a subscription by ID."""
    with cli_errors("Failed to get subscription"):
        with open_client(ctx) as client:
            result = client.subscriptions.get(subscription_id)
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), SUBSCRIPTION)


@subscriptions_app.command("list")
def subs_list(
    ctx: typer.Context,
    page: Optional[int] = typer.Option(None, "--page", help="Page number."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Results per page."),
    sort_field: Optional[str] = typer.Option(None, "--sort-field", help="Field to sort by."),
    sort_direction: Optional[SortDirection] = typer.Option(
        None, "--sort-direction", case_sensitive=False, help="asc or desc."
    ),
    search: Optional[str] = typer.Option(None, "--search", help="Search term."),
    statuses: Optional[str] = typer.Option(
        None, "--statuses", help="Comma-separated: INACTIVE, ACTIVE, EXPIRED, CANCELED, FROZEN."
    ),
    latest_invoice_paid: Optional[bool] = typer.Option(
        None, "--latest-invoice-paid/--latest-invoice-unpaid", help="Filter by the latest invoice's payment state."
    ),
    from_date: Optional[str] = typer.Option(None, "--from-date", help="Created on or after."),
    to_date: Optional[str] = typer.Option(None, "--to-date", help="Created on or before."),
    from_price: Optional[str] = typer.Option(None, "--from-price", help="Minimum price."),
    to_price: Optional[str] = typer.Option(None, "--to-price", help="Maximum price."),
    consumer_id: Optional[str] = typer.Option(None, "--consumer-id", help="Consumer ID."),
    product_ids: Optional[str] = typer.Option(None, "--product-ids", help="Comma-separated product IDs."),
    currencies: Optional[str] = typer.Option(None, "--currencies", help="Comma-separated currency codes."),
    period_start_from: Optional[str] = typer.Option(None, "--period-start-from", help="Current period starts after."),
    period_start_to: Optional[str] = typer.Option(None, "--period-start-to", help="Current period starts before."),
    period_end_from: Optional[str] = typer.Option(None, "--period-end-from", help="Current period ends after."),
    period_end_to: Optional[str] = typer.Option(None, "--period-end-to", help="Current period ends before."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """List subscriptions."""
    with cli_errors("Failed to list subscriptions"):
        params: dict[str, Any] = {
            "page": page,
            "limit": limit,
            "sort_field": sort_field,
            "sort_direction": _sort_value(sort_direction),
            "search_term": search,
            "statuses": parse_choices(statuses, SubscriptionStatus, "--statuses"),
            "latest_invoice_is_paid": latest_invoice_paid,
            "from_date": from_date,
            "to_date": to_date,
            "from_price": from_price,
            "to_price": to_price,
            "organization_consumer_id": consumer_id,
            "product_ids": split_csv(product_ids),
            "currencies": parse_choices(currencies, Currency, "--currencies"),
            "current_period_start_from_date": period_start_from,
            "current_period_start_to_date": period_start_to,
            "current_period_end_from_date": period_end_from,
            "current_period_end_to_date": period_end_to,
        }
        with open_client(ctx) as client:
            result = client.subscriptions.list(params)
    show(result, resolve_fmt(fmt, ResponseFormat.TABLE), SUBSCRIPTION)


@subscriptions_app.command("update")
def subs_update(
    ctx: typer.Context,
    subscription_id: str = typer.Argument(help="Subscription ID."),
    items: Optional[str] = typer.Option(None, "--items", help="Full replacement items JSON array."),
    coupons: Optional[str] = typer.Option(None, "--coupons", help="Full replacement coupon IDs JSON array."),
    description: Optional[str] = typer.Option(None, "--description", help="Subscription description."),
    until_cycle_number: Optional[int] = typer.Option(
        None, "--until-cycle-number", help="Stop after N billing cycles."
    ),
    override_payment_methods: Optional[str] = typer.Option(
        None, "--override-payment-methods", help="Payment methods as a JSON object."
    ),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Update a subscription; --items and --coupons replace the current lists."""
    with cli_errors("Failed to update subscription"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            body = {
                "items": parse_json_array(require(items, "--items"), "--items"),
                "coupons": parse_json_array(require(coupons, "--coupons"), "--coupons"),
            }
            body.update(
                compact(
                    {
                        "description": description,
                        "until_cycle_number": until_cycle_number,
                        "override_payment_methods": (
                            parse_json_object(override_payment_methods, "--override-payment-methods")
                            if override_payment_methods is not None
                            else None
                        ),
                    }
                )
            )
        with open_client(ctx) as client:
            result = client.subscriptions.update(subscription_id, body)
    success("Subscription updated successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), SUBSCRIPTION)


@subscriptions_app.command("cancel")
def subs_cancel(
    ctx: typer.Context,
    subscription_id: str = typer.Argument(help="Subscription ID."),
    cancel_invoices: bool = typer.Option(
        False, "--cancel-invoices", help="Also cancel the related invoices."
    ),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Cancel a subscription."""
    with cli_errors("Failed to cancel subscription"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            body = {"cancel_related_invoices": True} if cancel_invoices else {}
        with open_client(ctx) as client:
            result = client.subscriptions.cancel(subscription_id, body)
    success(f"Subscription {subscription_id} cancelled successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), SUBSCRIPTION)


@subscriptions_app.command("freeze")
def subs_freeze(
    ctx: typer.Context,
    subscription_id: str = typer.Argument(help="Subscription ID."),
    freeze_start: Optional[str] = typer.Option(None, "--freeze-start", help="Freeze start (ISO 8601)."),
    freeze_end: Optional[str] = typer.Option(
        None, "--freeze-end", help="Freeze end (ISO 8601); omit for an indefinite freeze."
    ),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes for the freeze period."),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Freeze a subscription for a period."""
    with cli_errors("Failed to freeze subscription"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            body = {"freeze_start_datetime": require(freeze_start, "--freeze-start")}
            body.update(compact({"freeze_end_datetime": freeze_end, "notes": notes}))
        with open_client(ctx) as client:
            result = client.subscriptions.freeze(subscription_id, body)
    success("Subscription frozen successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), FREEZE)


@subscriptions_app.command("freeze-list")
def subs_freeze_list(
    ctx: typer.Context,
    subscription_id: str = typer.Argument(help="Subscription ID."),
    page: Optional[int] = typer.Option(None, "--page", help="Page number."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Results per page."),
    sort_field: Optional[str] = typer.Option(None, "--sort-field", help="Field to sort by."),
    sort_direction: Optional[SortDirection] = typer.Option(
        None, "--sort-direction", case_sensitive=False, help="asc or desc."
    ),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """List the freeze periods of a subscription."""
    params = {
        "page": page,
        "limit": limit,
        "sort_field": sort_field,
        "sort_direction": _sort_value(sort_direction),
    }
    with cli_errors("Failed to list subscription freeze periods"):
        with open_client(ctx) as client:
            result = client.subscriptions.list_freezes(subscription_id, params)
    show(result, resolve_fmt(fmt, ResponseFormat.TABLE), FREEZE)


@subscriptions_app.command("freeze-update")
def subs_freeze_update(
    ctx: typer.Context,
    subscription_id: str = typer.Argument(help="Subscription ID."),
    freeze_id: str = typer.Argument(help="Freeze period ID."),
    freeze_start: Optional[str] = typer.Option(
        None, "--freeze-start", help="Freeze start (ISO 8601); required even if unchanged."
    ),
    freeze_end: Optional[str] = typer.Option(None, "--freeze-end", help="Freeze end (ISO 8601)."),
    no_freeze_end: bool = typer.Option(False, "--no-freeze-end", help="Make the freeze indefinite."),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes for the freeze period."),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Update a freeze period; the end is cleared unless --freeze-end is given."""
    with cli_errors("Failed to update freeze period"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            if freeze_end is not None and no_freeze_end:
                raise InvalidUsageError("--freeze-end and --no-freeze-end are mutually exclusive")
            body = {
                "freeze_start_datetime": require(freeze_start, "--freeze-start"),
                "freeze_end_datetime": None if no_freeze_end else freeze_end,
            }
            if notes is not None:
                body["notes"] = notes
        with open_client(ctx) as client:
            result = client.subscriptions.update_freeze(subscription_id, freeze_id, body)
    success("Freeze period updated successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), FREEZE)


@subscriptions_app.command("freeze-delete")
def subs_freeze_delete(
    ctx: typer.Context,
    subscription_id: str = typer.Argument(help="Subscription ID."),
    freeze_id: str = typer.Argument(help="Freeze period ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Delete a freeze period from a subscription."""
    with cli_errors("Failed to delete freeze period"):
        with open_client(ctx) as client:
            result = client.subscriptions.delete_freeze(subscription_id, freeze_id)
    success(f"Freeze period {freeze_id} deleted from subscription {subscription_id}")
    if result is not None:
        format_response(result, resolve_fmt(fmt, ResponseFormat.PRETTY))


@subscriptions_app.command("unfreeze")
def subs_unfreeze(
    ctx: typer.Context,
    subscription_id: str = typer.Argument(help="Subscription ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Lift the active freeze of a subscription now."""
    with cli_errors("Failed to unfreeze subscription"):
        with open_client(ctx) as client:
            result = client.subscriptions.unfreeze(subscription_id)
    success(f"Subscription {subscription_id} unfrozen successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), SUBSCRIPTION)

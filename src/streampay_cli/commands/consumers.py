"""Consumer commands -- manage the organization's customers.

Provides ``streampay consumers create|get|list|update|delete``. Create
and update accept either individual field flags or a raw ``--data`` JSON
body.

Example::

    streampay consumers create --name "Sara" --phone-number +966500000000 \\
        --preferred-language ar --communication-methods whatsapp,sms
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
from streampay_cli.formatters import CONSUMER, show
from streampay_cli.models import CommunicationMethod, PreferredLanguage, ResponseFormat, SortDirection
from streampay_cli.output import success
from streampay_cli.params import (
    compact,
    parse_choice,
    parse_choices,
    parse_json_object,
    require,
    require_fields,
)

consumers_app = typer.Typer(no_args_is_help=True)


def _consumer_fields(
    name: Optional[str],
    phone_number: Optional[str],
    email: Optional[str],
    external_id: Optional[str],
    iban: Optional[str],
    alias: Optional[str],
    comment: Optional[str],
    preferred_language: Optional[str],
    communication_methods: Optional[str],
) -> dict[str, Any]:
    return compact(
        {
            "name": name,
            "phone_number": phone_number,
            "email": email,
            "external_id": external_id,
            "iban": iban,
            "alias": alias,
            "comment": comment,
            "preferred_language": parse_choice(preferred_language, PreferredLanguage, "--preferred-language"),
            "communication_methods": parse_choices(
                communication_methods, CommunicationMethod, "--communication-methods"
            ),
        }
    )


@consumers_app.command("create")
def consumers_create(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Consumer name (required unless --data is used)."),
    phone_number: Optional[str] = typer.Option(None, "--phone-number", help="Phone number."),
    email: Optional[str] = typer.Option(None, "--email", help="Email address."),
    external_id: Optional[str] = typer.Option(None, "--external-id", help="Your own reference for the consumer."),
    iban: Optional[str] = typer.Option(None, "--iban", help="IBAN (max 34 chars)."),
    alias: Optional[str] = typer.Option(None, "--alias", help="Alias."),
    comment: Optional[str] = typer.Option(None, "--comment", help="Comment."),
    preferred_language: Optional[str] = typer.Option(None, "--preferred-language", help="AR or EN."),
    communication_methods: Optional[str] = typer.Option(
        None, "--communication-methods", help="Comma-separated: WHATSAPP, EMAIL, SMS."
    ),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Create a new consumer."""
    with cli_errors("Failed to create consumer"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            require(name, "--name")
            body = _consumer_fields(
                name, phone_number, email, external_id, iban, alias, comment,
                preferred_language, communication_methods,
            )
        with open_client(ctx) as client:
            result = client.consumers.create(body)
    success("Consumer created successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), CONSUMER)


@consumers_app.command("get")
def consumers_get(
    ctx: typer.Context,
    consumer_id: str = typer.Argument(help="Consumer ID."),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Get a consumer by ID."""
    with cli_errors("Failed to get consumer"):
        with open_client(ctx) as client:
            result = client.consumers.get(consumer_id)
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), CONSUMER)


@consumers_app.command("list")
def consumers_list(
    ctx: typer.Context,
    page: Optional[int] = typer.Option(None, "--page", help="Page number."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Results per page (max 100)."),
    search: Optional[str] = typer.Option(None, "--search", help="Search term."),
    sort_field: Optional[str] = typer.Option(None, "--sort-field", help="Field to sort by."),
    sort_direction: Optional[SortDirection] = typer.Option(
        None, "--sort-direction", case_sensitive=False, help="asc or desc."
    ),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """List consumers."""
    params = {
        "page": page,
        "limit": limit,
        "search_term": search,
        "sort_field": sort_field,
        "sort_direction": sort_direction.value if sort_direction else None,
    }
    with cli_errors("Failed to list consumers"):
        with open_client(ctx) as client:
            result = client.consumers.list(params)
    show(result, resolve_fmt(fmt, ResponseFormat.TABLE), CONSUMER)


@consumers_app.command("update")
def consumers_update(
    ctx: typer.Context,
    consumer_id: str = typer.Argument(help="Consumer ID."),
    name: Optional[str] = typer.Option(None, "--name", help="Consumer name."),
    phone_number: Optional[str] = typer.Option(None, "--phone-number", help="Phone number."),
    email: Optional[str] = typer.Option(None, "--email", help="Email address."),
    external_id: Optional[str] = typer.Option(None, "--external-id", help="Your own reference for the consumer."),
    iban: Optional[str] = typer.Option(None, "--iban", help="IBAN (max 34 chars)."),
    alias: Optional[str] = typer.Option(None, "--alias", help="Alias."),
    comment: Optional[str] = typer.Option(None, "--comment", help="Comment."),
    preferred_language: Optional[str] = typer.Option(None, "--preferred-language", help="AR or EN."),
    communication_methods: Optional[str] = typer.Option(
        None, "--communication-methods", help="Comma-separated: WHATSAPP, EMAIL, SMS."
    ),
    data: Optional[str] = data_option(),
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Update a consumer by ID."""
    with cli_errors("Failed to update consumer"):
        if data is not None:
            body = parse_json_object(data, "--data")
        else:
            body = require_fields(
                "At least one field must be provided when not using --data",
                _consumer_fields(
                    name, phone_number, email, external_id, iban, alias, comment,
                    preferred_language, communication_methods,
                ),
            )
        with open_client(ctx) as client:
            result = client.consumers.update(consumer_id, body)
    success("Consumer updated successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), CONSUMER)


@consumers_app.command("delete")
def consumers_delete(
    ctx: typer.Context,
    consumer_id: str = typer.Argument(help="Consumer ID."),
) -> None:
    """Delete a consumer by ID."""
    with cli_errors("Failed to delete consumer"):
        with open_client(ctx) as client:
            client.consumers.delete(consumer_id)
    success("Consumer deleted successfully")

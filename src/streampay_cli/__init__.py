"""streampay-cli -- manage StreamPay resources from the command line.

This package wraps the StreamPay REST API (consumers, products,
subscriptions, invoices, payments, coupons, payment links and webhooks)
in a Typer CLI. Flags are serialised into JSON request bodies, each
command issues a single HTTP call, and responses are rendered as JSON,
tables, or formatted text.

Typical workflow::

    streampay login --api-key KEY --api-secret SECRET
    streampay consumers list
    streampay invoices get 0b7e...-uuid --format json

Modules:
    app: Typer application and CLI entry point.
    client: HTTP transport adapter and per-resource operations.
    webhooks: HMAC signature verification for inbound webhooks.
    config: XDG-aware configuration and credential precedence.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "1.0.0"

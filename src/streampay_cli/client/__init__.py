"""HTTP client module for streampay-cli.

Provides :class:`StreamPayClient`, a blocking client backed by
:class:`httpx.Client` with StreamPay auth headers, query serialisation,
error normalisation, and dry-run mode.

Example::

    from streampay_cli.client import StreamPayClient

    with StreamPayClient(credential) as client:
        consumer = client.consumers.get("c_123")
"""

from streampay_cli.client.sync_client import StreamPayClient

__all__ = ["StreamPayClient"]

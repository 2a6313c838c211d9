"""Synchronous HTTP client for the StreamPay API.

This module provides :class:`StreamPayClient`, the blocking client every
command uses. It wraps :class:`httpx.Client` and layers on:

- **Auth headers** -- ``x-api-key`` (the raw key, or base64 of
  ``key:secret`` when a secret is configured) and ``x-branch-id`` when a
  branch is set, built once from an explicit
  :class:`~streampay_cli.models.Credential`.
- **Query serialisation** -- lists become repeated ``key=value`` pairs,
  ``None`` values are dropped, booleans are sent as ``true``/``false``.
- **Error normalisation** -- every failure, with or without a response,
  is raised as exactly one :class:`~streampay_cli.exceptions.StreamApiError`.
- **Dry-run mode** -- prints the request to stderr and returns
  ``{"dry_run": True}`` without sending traffic.

There are no retries and no caching: one attempt per call.

Resource operations (``client.consumers.create(...)`` and friends) live in
:mod:`streampay_cli.client.resources` and are attached as attributes.
"""

from __future__ import annotations

import base64
import json
from typing import Any, Optional, Union
from urllib.parse import urlencode

import httpx

from streampay_cli import __version__
from streampay_cli.client.resources import (
    ConsumersResource,
    CouponsResource,
    InvoicesResource,
    MeResource,
    PaymentLinksResource,
    PaymentsResource,
    ProductsResource,
    SubscriptionsResource,
)
from streampay_cli.config import mask_secret
from streampay_cli.exceptions import StreamApiError
from streampay_cli.models import Credential, RequestConfig
from streampay_cli.output import get_output

USER_AGENT = f"streampay-cli/{__version__}"

Scalar = Union[str, int, float, bool]
QueryParams = dict[str, Union[Scalar, list[Scalar], None]]


class StreamPayClient:
    """Synchronous HTTP client for the StreamPay API.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        credential: Resolved API key, secret, branch, and base URL.
        request_config: Timeout and SSL settings. Defaults to a 30 s
            timeout with verification enabled.
        dry_run: When ``True``, requests are printed to stderr and
            ``{"dry_run": True}`` is returned without network I/O.

    Example::

        with StreamPayClient(credential) as client:
            page = client.invoices.list({"statuses": ["SENT"], "limit": 5})
    """

    def __init__(
        self,
        credential: Credential,
        request_config: Optional[RequestConfig] = None,
        dry_run: bool = False,
    ) -> None:
        self._credential = credential
        self._request_config = request_config or RequestConfig()
        self._dry_run = dry_run
        self._headers = build_headers(credential)
        self._client: Optional[httpx.Client] = None

        self.me = MeResource(self)
        self.consumers = ConsumersResource(self)
        self.products = ProductsResource(self)
        self.subscriptions = SubscriptionsResource(self)
        self.invoices = InvoicesResource(self)
        self.payments = PaymentsResource(self)
        self.coupons = CouponsResource(self)
        self.payment_links = PaymentLinksResource(self)

    @property
    def base_url(self) -> str:
        return self._credential.effective_base_url

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> StreamPayClient:
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=self._headers,
            timeout=self._request_config.timeout,
            verify=self._request_config.verify_ssl,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        json_body: Optional[Any] = None,
        params: Optional[QueryParams] = None,
    ) -> Any:
        """Perform one API call and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            path: URL path appended to the base URL, e.g. ``/consumers``.
            json_body: JSON-serialisable request body.
            params: Query parameters; see :func:`serialize_params`.

        Returns:
            The decoded JSON body, ``None`` for an empty body, or the raw
            text when the body is not JSON.

        Raises:
            StreamApiError: On any non-2xx response or transport failure.
        """
        output = get_output()
        query = serialize_params(params)
        url = f"{self.base_url}{path}"
        if query:
            url = f"{url}?{urlencode(query)}"

        if self._dry_run:
            return self._print_dry_run(method, url, json_body)

        assert self._client is not None, "Client not initialised -- use as context manager"

        output.debug(f"{method} {url}")
        kwargs: dict[str, Any] = {"params": query}
        if json_body is not None:
            kwargs["json"] = json_body
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise StreamApiError(0, "NETWORK_ERROR", str(exc) or type(exc).__name__) from exc

        output.debug(f"{response.status_code} {response.reason_phrase}")
        if not response.is_success:
            raise normalize_error(response)
        return decode_body(response)

    def get(self, path: str, params: Optional[QueryParams] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json_body: Optional[Any] = None) -> Any:
        return self.request("POST", path, json_body=json_body)

    def put(self, path: str, json_body: Optional[Any] = None) -> Any:
        return self.request("PUT", path, json_body=json_body)

    def patch(self, path: str, json_body: Optional[Any] = None) -> Any:
        return self.request("PATCH", path, json_body=json_body)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _print_dry_run(self, method: str, url: str, json_body: Any) -> dict[str, bool]:
        """Print request details to stderr with the API key masked."""
        output = get_output()
        output.info(f"[dry-run] {method} {url}")
        for key, value in self._headers.items():
            if key == "x-api-key":
                value = mask_secret(value)
            output.info(f"  Header: {key}: {value}")
        if json_body is not None:
            output.info(f"  Body: {json.dumps(json_body, ensure_ascii=False)}")
        return {"dry_run": True}


# ------------------------------------------------------------------ #
# Request helpers
# ------------------------------------------------------------------ #


def build_headers(credential: Credential) -> dict[str, str]:
    """Build the fixed headers sent with every request.

    ``x-api-key`` carries the raw key, or ``base64("key:secret")`` when a
    secret is configured. ``x-branch-id`` is only sent when a branch is set.
    """
    if credential.api_secret:
        token = f"{credential.api_key}:{credential.api_secret}"
        api_key = base64.b64encode(token.encode("utf-8")).decode("ascii")
    else:
        api_key = credential.api_key

    headers = {
        "x-api-key": api_key,
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }
    if credential.branch:
        headers["x-branch-id"] = credential.branch
    return headers


def serialize_params(params: Optional[QueryParams]) -> list[tuple[str, str]]:
    """Flatten query parameters into ordered ``(key, value)`` pairs.

    ``None`` values (and ``None`` list entries) are omitted, lists become
    one pair per element, and booleans become ``"true"``/``"false"``.

    Example::

        >>> serialize_params({"statuses": ["SENT", "PAID"], "page": 1, "q": None})
        [('statuses', 'SENT'), ('statuses', 'PAID'), ('page', '1')]
    """
    pairs: list[tuple[str, str]] = []
    for key, value in (params or {}).items():
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if item is None:
                continue
            pairs.append((key, _format_scalar(item)))
    return pairs


def _format_scalar(value: Scalar) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ------------------------------------------------------------------ #
# Response helpers
# ------------------------------------------------------------------ #


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to text (or ``None`` if empty)."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def normalize_error(response: httpx.Response) -> StreamApiError:
    """Convert a non-2xx response into a :class:`StreamApiError`.

    Checked in order:

    1. HTTP 422 with a non-empty ``detail`` array -> ``VALIDATION_ERROR``,
       one ``loc → path: msg`` entry per item joined with ``"; "``.
    2. A body with an ``error`` object -> its ``code`` and ``message``,
       with ``additional_info`` as details.
    3. Anything else -> ``HTTP_<status>`` with a generic message.
    """
    status = response.status_code
    generic = f"Request failed with status code {status}"
    body = decode_body(response)

    if status == 422 and isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, list) and detail:
            messages = [_validation_message(entry) for entry in detail]
            return StreamApiError(status, "VALIDATION_ERROR", "; ".join(messages), detail)

    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        err = body["error"]
        return StreamApiError(
            status,
            err.get("code") or f"HTTP_{status}",
            err.get("message") or generic,
            err.get("additional_info"),
        )

    return StreamApiError(status, f"HTTP_{status}", generic)


def _validation_message(entry: Any) -> str:
    if not isinstance(entry, dict):
        return str(entry)
    loc = entry.get("loc") or []
    path = " → ".join(str(part) for part in loc)
    return f"{path}: {entry.get('msg', '')}"

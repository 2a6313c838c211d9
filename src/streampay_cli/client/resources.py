"""Resource operations, one class per StreamPay API resource.

Each resource is a thin mapping from an operation name to a method and
path template on the owning :class:`~streampay_cli.client.StreamPayClient`.
Identifiers are URL-path-quoted before substitution so a stray ``/`` or
``?`` in an ID can never change the route.

Every operation returns the decoded JSON body untouched and lets
:class:`~streampay_cli.exceptions.StreamApiError` propagate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import quote

if TYPE_CHECKING:
    from streampay_cli.client.sync_client import QueryParams, StreamPayClient

Body = dict[str, Any]


def _seg(value: str) -> str:
    return quote(str(value), safe="")


class Resource:
    """Base class binding a collection path to a client."""

    path: str = ""

    def __init__(self, client: StreamPayClient) -> None:
        self._client = client

    def _item(self, item_id: str, *suffix: str) -> str:
        return "/".join([self.path, _seg(item_id), *suffix])


class ReadWriteResource(Resource):
    """Create / get / list / update on ``/<collection>[/{id}]``."""

    def create(self, data: Body) -> Any:
        return self._client.post(self.path, data)

    def get(self, item_id: str) -> Any:
        return self._client.get(self._item(item_id))

    def list(self, params: Optional[QueryParams] = None) -> Any:
        return self._client.get(self.path, params)

    def update(self, item_id: str, data: Body) -> Any:
        return self._client.put(self._item(item_id), data)


class CrudResource(ReadWriteResource):
    """Adds ``DELETE /<collection>/{id}``."""

    def delete(self, item_id: str) -> Any:
        return self._client.delete(self._item(item_id))


class MeResource(Resource):
    path = "/me"

    def get(self) -> Any:
        """Return the authenticated user, organization, and currency config."""
        return self._client.get(self.path)


class ConsumersResource(CrudResource):
    path = "/consumers"


class ProductsResource(CrudResource):
    path = "/products"


class CouponsResource(CrudResource):
    path = "/coupons"


class SubscriptionsResource(ReadWriteResource):
    """Subscriptions plus their cancel and freeze-period sub-resources."""

    path = "/subscriptions"

    def cancel(self, item_id: str, data: Optional[Body] = None) -> Any:
        return self._client.post(self._item(item_id, "cancel"), data or {})

    def freeze(self, item_id: str, data: Body) -> Any:
        return self._client.post(self._item(item_id, "freeze"), data)

    def list_freezes(self, item_id: str, params: Optional[QueryParams] = None) -> Any:
        return self._client.get(self._item(item_id, "freeze"), params)

    def update_freeze(self, item_id: str, freeze_id: str, data: Body) -> Any:
        return self._client.put(self._item(item_id, "freeze", _seg(freeze_id)), data)

    def delete_freeze(self, item_id: str, freeze_id: str) -> Any:
        return self._client.delete(self._item(item_id, "freeze", _seg(freeze_id)))

    def unfreeze(self, item_id: str) -> Any:
        return self._client.post(self._item(item_id, "unfreeze"), {})


class InvoicesResource(ReadWriteResource):
    path = "/invoices"

    def update(self, item_id: str, data: Body) -> Any:
        """Edit an invoice in place (``scheduled_on``, ``description``)."""
        return self._client.patch(self._item(item_id, "inplace"), data)

    def send(self, item_id: str) -> Any:
        return self._action(item_id, "send")

    def accept(self, item_id: str) -> Any:
        return self._action(item_id, "accept")

    def reject(self, item_id: str) -> Any:
        return self._action(item_id, "reject")

    def complete(self, item_id: str) -> Any:
        return self._action(item_id, "complete")

    def cancel(self, item_id: str) -> Any:
        return self._action(item_id, "cancel")

    def _action(self, item_id: str, action: str) -> Any:
        return self._client.post(self._item(item_id, action), {})


class PaymentsResource(Resource):
    path = "/payments"

    def get(self, item_id: str) -> Any:
        return self._client.get(self._item(item_id))

    def list(self, params: Optional[QueryParams] = None) -> Any:
        return self._client.get(self.path, params)

    def mark_paid(self, item_id: str, data: Body) -> Any:
        return self._client.post(self._item(item_id, "mark-paid"), data)

    def refund(self, item_id: str, data: Body) -> Any:
        return self._client.post(self._item(item_id, "refund"), data)

    def auto_charge(self, item_id: str) -> Any:
        """Charge the saved card for this payment now."""
        return self._client.post(f"{self.path}/auto-charge-on-demand/{_seg(item_id)}", {})


class PaymentLinksResource(Resource):
    """Checkout (payment) links."""

    path = "/payment_links"

    def create(self, data: Body) -> Any:
        return self._client.post(self.path, data)

    def get(self, item_id: str) -> Any:
        return self._client.get(self._item(item_id))

    def list(self, params: Optional[QueryParams] = None) -> Any:
        return self._client.get(self.path, params)

    def update_status(self, item_id: str, data: Body) -> Any:
        return self._client.patch(self._item(item_id, "status"), data)

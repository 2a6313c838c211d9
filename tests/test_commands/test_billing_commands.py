"""CLI tests for subscriptions, invoices, payments, coupons and checkout."""

from __future__ import annotations

from typer.testing import CliRunner

from streampay_cli.app import app

runner = CliRunner()

ITEMS = '[{"product_id": "p1", "quantity": 1}]'


# ---------------------------------------------------------------------------
# subscriptions
# ---------------------------------------------------------------------------


class TestSubscriptions:
    def test_create(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app,
            [
                "subs", "create",
                "--consumer-id", "c1",
                "--period-start", "2026-01-01T00:00:00Z",
                "--items", ITEMS,
                "--no-notify-consumer",
            ],
        )
        assert result.exit_code == 0, result.output
        assert fake_api.last.url.path.endswith("/subscriptions")
        assert fake_api.last_json() == {
            "organization_consumer_id": "c1",
            "period_start": "2026-01-01T00:00:00Z",
            "items": [{"product_id": "p1", "quantity": 1}],
            "notify_consumer": False,
        }

    def test_create_requires_items(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app, ["subs", "create", "--consumer-id", "c1", "--period-start", "2026-01-01T00:00:00Z"]
        )
        assert result.exit_code == 2
        assert fake_api.requests == []

    def test_list_filters(self, api_key_env, fake_api) -> None:
        fake_api.payload = {"data": []}
        result = runner.invoke(
            app,
            ["subs", "list", "--statuses", "active,frozen", "--latest-invoice-unpaid", "--product-ids", "p1,p2"],
        )
        assert result.exit_code == 0, result.output
        params = fake_api.last.url.params
        assert params.get_list("statuses") == ["ACTIVE", "FROZEN"]
        assert params["latest_invoice_is_paid"] == "false"
        assert params.get_list("product_ids") == ["p1", "p2"]

    def test_list_invalid_status(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["subs", "list", "--statuses", "PAUSED"])
        assert result.exit_code == 2
        assert fake_api.requests == []

    def test_cancel_body(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["subs", "cancel", "s1", "--cancel-invoices"])
        assert result.exit_code == 0, result.output
        assert fake_api.last.url.path.endswith("/subscriptions/s1/cancel")
        assert fake_api.last_json() == {"cancel_related_invoices": True}

    def test_cancel_default_body_is_empty(self, api_key_env, fake_api) -> None:
        runner.invoke(app, ["subs", "cancel", "s1"])
        assert fake_api.last_json() == {}

    def test_freeze(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app, ["subs", "freeze", "s1", "--freeze-start", "2026-03-01T00:00:00Z", "--notes", "Travel"]
        )
        assert result.exit_code == 0, result.output
        assert fake_api.last_json() == {"freeze_start_datetime": "2026-03-01T00:00:00Z", "notes": "Travel"}

    def test_freeze_update_clears_end_by_default(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app, ["subs", "freeze-update", "s1", "f1", "--freeze-start", "2026-03-01T00:00:00Z"]
        )
        assert result.exit_code == 0, result.output
        assert fake_api.last.method == "PUT"
        assert fake_api.last.url.path.endswith("/subscriptions/s1/freeze/f1")
        assert fake_api.last_json() == {"freeze_start_datetime": "2026-03-01T00:00:00Z", "freeze_end_datetime": None}

    def test_freeze_update_conflicting_end_flags(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app,
            [
                "subs", "freeze-update", "s1", "f1",
                "--freeze-start", "2026-03-01T00:00:00Z",
                "--freeze-end", "2026-04-01T00:00:00Z",
                "--no-freeze-end",
            ],
        )
        assert result.exit_code == 2
        assert fake_api.requests == []

    def test_unfreeze(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["subs", "unfreeze", "s1"])
        assert result.exit_code == 0, result.output
        assert fake_api.last.url.path.endswith("/subscriptions/s1/unfreeze")
        assert "Subscription s1 unfrozen successfully" in result.output


# ---------------------------------------------------------------------------
# invoices
# ---------------------------------------------------------------------------


class TestInvoices:
    def test_create_defaults(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app,
            [
                "invoices", "create",
                "--consumer-id", "c1",
                "--scheduled-on", "2026-04-01T00:00:00Z",
                "--items", ITEMS,
                "--payment-methods", '{"mada": true}',
            ],
        )
        assert result.exit_code == 0, result.output
        assert fake_api.last_json() == {
            "organization_consumer_id": "c1",
            "scheduled_on": "2026-04-01T00:00:00Z",
            "items": [{"product_id": "p1", "quantity": 1}],
            "payment_methods": {"mada": True},
            "currency": "SAR",
        }

    def test_create_no_notify(self, api_key_env, fake_api) -> None:
        runner.invoke(
            app,
            [
                "invoices", "create",
                "--consumer-id", "c1",
                "--scheduled-on", "2026-04-01T00:00:00Z",
                "--items", ITEMS,
                "--payment-methods", "{}",
                "--no-notify-consumer",
                "--currency", "usd",
            ],
        )
        body = fake_api.last_json()
        assert body["notify_consumer"] is False
        assert body["currency"] == "USD"

    def test_create_requires_payment_methods(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app,
            ["invoices", "create", "--consumer-id", "c1", "--scheduled-on", "2026-04-01", "--items", ITEMS],
        )
        assert result.exit_code == 2
        assert "--payment-methods" in result.output

    def test_list_filters(self, api_key_env, fake_api) -> None:
        fake_api.payload = {"data": []}
        result = runner.invoke(
            app,
            ["invoices", "list", "--statuses", "sent,accepted", "--include-payments", "--currencies", "SAR"],
        )
        assert result.exit_code == 0, result.output
        params = fake_api.last.url.params
        assert params.get_list("statuses") == ["SENT", "ACCEPTED"]
        assert params["include_payments"] == "true"
        assert params.get_list("currencies") == ["SAR"]
        assert "payments_not_settled" not in params

    def test_update_uses_inplace_patch(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["invoices", "update", "i1", "--description", "Updated"])
        assert result.exit_code == 0, result.output
        assert fake_api.last.method == "PATCH"
        assert fake_api.last.url.path.endswith("/invoices/i1/inplace")
        assert fake_api.last_json() == {"description": "Updated"}

    def test_transitions(self, api_key_env, fake_api) -> None:
        for action, past in [("send", "sent"), ("accept", "accepted"), ("cancel", "cancelled")]:
            result = runner.invoke(app, ["invoices", action, "i1"])
            assert result.exit_code == 0, result.output
            assert fake_api.last.method == "POST"
            assert fake_api.last.url.path.endswith(f"/invoices/i1/{action}")
            assert f"Invoice {past} successfully" in result.output

    def test_server_error_exit_code(self, api_key_env, fake_api) -> None:
        fake_api.status_code = 500
        fake_api.payload = {}
        result = runner.invoke(app, ["invoices", "get", "i1"])
        assert result.exit_code == 5
        assert "HTTP_500" in result.output


# ---------------------------------------------------------------------------
# payments
# ---------------------------------------------------------------------------


class TestPayments:
    def test_list_repeatable_flags(self, api_key_env, fake_api) -> None:
        fake_api.payload = {"data": []}
        result = runner.invoke(
            app,
            [
                "payments", "list",
                "--invoice-id", "i1", "--invoice-id", "i2",
                "--status", "succeeded", "--status", "PENDING",
                "--sort-direction", "ASC",
            ],
        )
        assert result.exit_code == 0, result.output
        params = fake_api.last.url.params
        assert params.get_list("invoice_id") == ["i1", "i2"]
        assert params.get_list("statuses") == ["SUCCEEDED", "PENDING"]
        assert params["sort_direction"] == "asc"

    def test_mark_paid(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app, ["payments", "mark-paid", "p1", "--payment-method", "bank_transfer", "--note", "R-1"]
        )
        assert result.exit_code == 0, result.output
        assert fake_api.last.url.path.endswith("/payments/p1/mark-paid")
        assert fake_api.last_json() == {"payment_method": "BANK_TRANSFER", "note": "R-1"}
        assert "Payment marked as paid successfully" in result.output

    def test_mark_paid_invalid_method(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["payments", "mark-paid", "p1", "--payment-method", "BITCOIN"])
        assert result.exit_code == 2
        assert fake_api.requests == []

    def test_refund(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app, ["payments", "refund", "p1", "--refund-reason", "duplicate", "--allow-multiple"]
        )
        assert result.exit_code == 0, result.output
        assert fake_api.last_json() == {
            "refund_reason": "DUPLICATE",
            "allow_refund_multiple_related_payments": True,
        }

    def test_auto_charge(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["payments", "auto-charge", "p1"])
        assert result.exit_code == 0, result.output
        assert fake_api.last.url.path.endswith("/payments/auto-charge-on-demand/p1")


# ---------------------------------------------------------------------------
# coupons
# ---------------------------------------------------------------------------


class TestCoupons:
    def test_percentage_coupon_drops_currency(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app,
            [
                "coupons", "create",
                "--name", "TEN",
                "--discount-value", "10",
                "--is-percentage", "true",
                "--currency", "SAR",
            ],
        )
        assert result.exit_code == 0, result.output
        assert fake_api.last_json() == {"name": "TEN", "discount_value": 10, "is_percentage": True}
        assert "--currency is ignored for percentage coupons" in result.output

    def test_fixed_coupon_sends_currency(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app,
            ["coupons", "create", "--name", "FIVE", "--discount-value", "5.5", "--currency", "usd", "--is-active", "0"],
        )
        assert result.exit_code == 0, result.output
        assert fake_api.last_json() == {
            "name": "FIVE",
            "discount_value": 5.5,
            "is_percentage": False,
            "currency": "USD",
            "is_active": False,
        }

    def test_fixed_coupon_without_currency_warns(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["coupons", "create", "--name", "X", "--discount-value", "1"])
        assert result.exit_code == 0, result.output
        assert "--currency is recommended" in result.output

    def test_invalid_discount(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["coupons", "create", "--name", "X", "--discount-value", "ten"])
        assert result.exit_code == 2
        assert "Invalid discount value" in result.output
        assert fake_api.requests == []

    def test_invalid_bool(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["coupons", "list", "--active", "maybe"])
        assert result.exit_code == 2
        assert fake_api.requests == []

    def test_list_bool_filters(self, api_key_env, fake_api) -> None:
        fake_api.payload = {"data": []}
        result = runner.invoke(app, ["coupons", "list", "--active", "true", "--is-percentage", "false"])
        assert result.exit_code == 0, result.output
        assert fake_api.last.url.params["active"] == "true"
        assert fake_api.last.url.params["is_percentage"] == "false"

    def test_update_can_send_false(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["coupons", "update", "k1", "--is-active", "false"])
        assert result.exit_code == 0, result.output
        assert fake_api.last_json() == {"is_active": False}

    def test_update_requires_a_field(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["coupons", "update", "k1"])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# checkout
# ---------------------------------------------------------------------------


class TestCheckout:
    def test_create(self, api_key_env, fake_api) -> None:
        result = runner.invoke(
            app,
            [
                "checkout", "create",
                "--name", "Promo",
                "--items", ITEMS,
                "--coupons", "k1, k2",
                "--max-number-of-payments", "3",
                "--contact-information-type", "email",
                "--custom-metadata", '{"campaign": "spring"}',
            ],
        )
        assert result.exit_code == 0, result.output
        assert fake_api.last.url.path.endswith("/payment_links")
        assert fake_api.last_json() == {
            "name": "Promo",
            "items": [{"product_id": "p1", "quantity": 1}],
            "coupons": ["k1", "k2"],
            "max_number_of_payments": 3,
            "custom_metadata": {"campaign": "spring"},
            "contact_information_type": "EMAIL",
        }

    def test_items_need_product_id(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["checkout", "create", "--name", "P", "--items", '[{"quantity": 1}]'])
        assert result.exit_code == 2
        assert "product_id" in result.output
        assert fake_api.requests == []

    def test_list_statuses(self, api_key_env, fake_api) -> None:
        fake_api.payload = {"data": []}
        result = runner.invoke(app, ["checkout", "list", "--statuses", "active,completed"])
        assert result.exit_code == 0, result.output
        assert fake_api.last.url.params.get_list("statuses") == ["ACTIVE", "COMPLETED"]

    def test_activate(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["checkout", "activate", "l1"])
        assert result.exit_code == 0, result.output
        assert fake_api.last.method == "PATCH"
        assert fake_api.last.url.path.endswith("/payment_links/l1/status")
        assert fake_api.last_json() == {"status": "ACTIVE"}

    def test_deactivate_with_message(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["checkout", "deactivate", "l1", "--deactivate-message", "Sold out"])
        assert result.exit_code == 0, result.output
        assert fake_api.last_json() == {"status": "INACTIVE", "deactivate_message": "Sold out"}

    def test_update_status_requires_status(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["checkout", "update-status", "l1"])
        assert result.exit_code == 2
        assert fake_api.requests == []

    def test_update_status(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["checkout", "update-status", "l1", "--status", "completed"])
        assert result.exit_code == 0, result.output
        assert fake_api.last_json() == {"status": "COMPLETED"}

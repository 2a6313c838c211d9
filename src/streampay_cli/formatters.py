"""Curated table and detail views for StreamPay resources.

The generic renderers in :mod:`streampay_cli.output` work for any JSON,
but the raw objects carry dozens of fields. Each :class:`View` here picks
the handful of columns worth showing in a list, and optionally a
sectioned detail view for a single object.

Commands call :func:`show` with the response, the resolved format, and a
view; ``json`` always prints the untouched response.
"""

from __future__ import annotations

from datetime import date as _date
from typing import Any, Callable, Optional

from rich.text import Text

from streampay_cli.models import ResponseFormat
from streampay_cli.output import (
    EMPTY,
    Cell,
    extract_items,
    get_output,
    status_style,
)

Row = dict[str, Any]
ColumnFn = Callable[[Row], Cell]
DetailFn = Callable[[Row, "Detail"], None]


class View:
    """How one resource type is rendered as a table row and a detail page.

    Args:
        noun: Plural name used in the empty-list message.
        columns: ``(header, cell function)`` pairs for table output. When
            empty, the generic table is used.
        detail: Optional function filling a :class:`Detail` for ``pretty``
            output of a single object.
    """

    def __init__(
        self,
        noun: str,
        columns: Optional[list[tuple[str, ColumnFn]]] = None,
        detail: Optional[DetailFn] = None,
    ) -> None:
        self.noun = noun
        self.columns = columns or []
        self.detail = detail


class Detail:
    """Line accumulator for a single-object detail page."""

    def __init__(self, label_width: int = 22) -> None:
        self._width = label_width
        self.lines: list[Text] = [Text()]

    def title(self, *parts: Cell) -> None:
        line = Text("  ")
        for index, part in enumerate(parts):
            if index:
                line.append("  ")
            line.append_text(Text(part) if isinstance(part, str) else part)
        self.lines.append(line)

    def subtitle(self, text: Any) -> None:
        self.lines.append(Text(f"  {text if text is not None else EMPTY}", style="grey50"))

    def line(self, label: str, value: Cell) -> None:
        value_text = Text(value) if isinstance(value, str) else value
        self.lines.append(Text("  ") + Text(label.ljust(self._width), style="yellow") + Text(" ") + value_text)

    def section(self, label: str, count: int) -> None:
        self.lines.append(Text("  ") + Text(label, style="yellow") + Text(f" ({count})", style="grey50"))

    def entry(self, *parts: Cell) -> None:
        line = Text("    ")
        for index, part in enumerate(parts):
            if index:
                line.append("  ")
            line.append_text(Text(part) if isinstance(part, str) else part)
        self.lines.append(line)

    def heading(self, label: str) -> None:
        self.lines.append(Text(f"  ── {label} ".ljust(54, "─"), style="grey50"))

    def sep(self) -> None:
        self.lines.append(Text("  " + "─" * 52, style="grey50"))

    def blank(self) -> None:
        self.lines.append(Text())


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def show(data: Any, fmt: ResponseFormat, view: Optional[View] = None) -> None:
    """Render an API response with the curated *view* where one applies.

    * ``json`` -- the untouched response.
    * ``table`` -- the view's columns over the (unwrapped) item list; a
      single object is shown as a one-row table.
    * ``pretty`` -- the view's detail page for a single object, otherwise
      the generic key/value tree.
    """
    output = get_output()
    fmt = output.resolve_format(fmt)

    if fmt == ResponseFormat.JSON or view is None:
        output.format_response(data, fmt)
        return

    items = extract_items(data)
    if fmt == ResponseFormat.TABLE and view.columns:
        rows = items if isinstance(items, list) else [items] if isinstance(items, dict) else []
        if not rows:
            output.warning(f"No {view.noun} found")
            return
        output.print_table(
            [header for header, _ in view.columns],
            [[fn(row) for _, fn in view.columns] for row in rows if isinstance(row, dict)],
        )
        output.print_pagination(data)
        return

    if fmt == ResponseFormat.PRETTY and view.detail and isinstance(items, dict):
        detail = Detail()
        view.detail(items, detail)
        detail.blank()
        for line in detail.lines:
            output.print_renderable(line)
        return

    output.format_response(data, fmt)


# ------------------------------------------------------------------ #
# Cell helpers
# ------------------------------------------------------------------ #


def dash(text: str = EMPTY) -> Text:
    return Text(text, style="grey50")


def plain(value: Any, style: str = "white") -> Text:
    return dash() if value in (None, "") else Text(str(value), style=style)


def date(value: Any, with_time: bool = False) -> Text:
    if not value:
        return dash()
    text = str(value)
    text = text[:19].replace("T", " ") if with_time else text[:10]
    return Text(text, style="blue")


def money(amount: Any, currency: Any, style: str = "magenta") -> Text:
    if amount is None:
        return dash()
    return Text(f"{amount} {currency or 'SAR'}", style=style)


def remaining(amount: Any, currency: Any) -> Text:
    if amount is None:
        return dash()
    try:
        outstanding = float(amount) > 0
    except (TypeError, ValueError):
        outstanding = False
    return money(amount, currency, "red" if outstanding else "green")


def status(value: Any) -> Text:
    if not value:
        return dash()
    return Text(str(value), style=status_style(str(value)))


def active_badge(is_active: Any) -> Text:
    return Text("● Active", style="green") if is_active else Text("○ Inactive", style="red")


def yes_no(value: Any) -> Text:
    return Text("Yes", style="yellow") if value else dash("No")


def interval(row: Row) -> Text:
    if not row.get("recurring_interval"):
        return dash()
    count = row.get("recurring_interval_count") or 1
    return Text(f"Every {count} {row['recurring_interval']}", style="cyan")


def consumer_name(consumer: Optional[Row]) -> Text:
    if not consumer:
        return dash()
    short_id = str(consumer["id"])[:8] if consumer.get("id") else None
    name = consumer.get("name") or consumer.get("alias") or consumer.get("email") or short_id
    return plain(name, "bold")


def enabled_methods(methods: Any) -> str:
    if not isinstance(methods, dict):
        return ""
    return ", ".join(key for key, value in methods.items() if value is True)


def _line_items(row: Row, detail: Detail, currency: Any) -> None:
    items = row.get("items") or []
    if not items:
        return
    detail.section("Items", len(items))
    for item in items:
        product = item.get("product") or {}
        name = product.get("name") or str(item.get("product_id") or EMPTY)[:8]
        price = item.get("discounted_amount")
        if price is None:
            price = item.get("original_amount")
        detail.entry(
            Text(name, style="bold"),
            dash(f"×{item.get('quantity', 1)}"),
            money(price if price is not None else EMPTY, item.get("currency") or currency),
        )
    detail.sep()


# ------------------------------------------------------------------ #
# Invoices
# ------------------------------------------------------------------ #


def _invoice_number(row: Row) -> Any:
    number = row.get("org_invoice_number")
    return number if number is not None else row.get("invoice_number")


def _invoice_due(row: Row) -> Text:
    payments = row.get("payments") or []
    return date(payments[0].get("scheduled_on")) if payments else dash()


def _invoice_detail(inv: Row, d: Detail) -> None:
    header: list[Cell] = [Text(f"Invoice #{_invoice_number(inv) or EMPTY}", style="bold cyan"), status(inv.get("status"))]
    if inv.get("type"):
        header.append(dash(f"[{inv['type']}]"))
    d.title(*header)
    d.subtitle(inv.get("id"))
    d.sep()

    consumer = inv.get("organization_consumer")
    if consumer:
        d.line("Consumer", plain(consumer.get("name") or consumer.get("alias"), "bold"))
        if consumer.get("email"):
            d.line("Email", Text(consumer["email"], style="cyan"))
        if consumer.get("phone_number"):
            d.line("Phone", Text(consumer["phone_number"], style="cyan"))
        d.sep()

    cur = inv.get("currency") or "SAR"
    d.line("Currency", Text(cur, style="yellow"))
    d.line("Total", money(inv.get("total_amount", EMPTY), cur))
    vat = inv.get("total_vat_amount")
    try:
        has_vat = vat is not None and float(vat) > 0
    except (TypeError, ValueError):
        has_vat = False
    if has_vat:
        d.line("VAT", money(vat, cur, "white"))
    d.line("Paid", money(inv.get("paid_amount", EMPTY), cur, "green"))
    if inv.get("remaining_amount") is not None:
        d.line("Remaining", remaining(inv["remaining_amount"], cur))
    d.sep()

    payments = inv.get("payments") or []
    if payments:
        d.section("Payments", len(payments))
        for p in payments:
            parts: list[Cell] = [
                dash(f"[{p.get('invoice_payment_number', EMPTY)}]"),
                money(p.get("amount"), p.get("currency") or cur),
                status(p.get("current_status")),
                date(p.get("scheduled_on")),
            ]
            if p.get("payed_at"):
                parts.append(dash(f"· paid {str(p['payed_at'])[:10]}"))
            d.entry(*parts)
        d.sep()

    _line_items(inv, d, cur)

    if "payment_methods" in inv and inv["payment_methods"] is not None:
        d.line("Payment Methods", plain(enabled_methods(inv["payment_methods"])))
    if inv.get("created_at"):
        d.line("Created", date(inv["created_at"], with_time=True))
    if inv.get("updated_at"):
        d.line("Updated", date(inv["updated_at"], with_time=True))
    if inv.get("description"):
        d.sep()
        d.line("Description", inv["description"])
    if inv.get("url"):
        d.sep()
        d.line("URL", Text(inv["url"], style="underline blue"))
    branch = inv.get("branch") or {}
    if branch.get("name"):
        d.line("Branch", branch["name"])


INVOICE = View(
    "invoices",
    [
        ("#", lambda r: plain(_invoice_number(r), "dim")),
        ("ID", lambda r: plain(r.get("id"), "dim")),
        ("Consumer", lambda r: consumer_name(r.get("organization_consumer"))),
        ("Status", lambda r: status(r.get("status"))),
        ("Total", lambda r: money(r.get("total_amount"), r.get("currency"))),
        ("Paid", lambda r: money(r.get("paid_amount"), r.get("currency"), "green")),
        ("Remaining", lambda r: remaining(r.get("remaining_amount"), r.get("currency"))),
        ("Due Date", _invoice_due),
        ("Payments", lambda r: plain(r.get("total_number_of_payments"))),
        ("Created", lambda r: plain(str(r["created_at"])[:10] if r.get("created_at") else None)),
    ],
    _invoice_detail,
)


# ------------------------------------------------------------------ #
# Payments
# ------------------------------------------------------------------ #


def _payment_detail(p: Row, d: Detail) -> None:
    d.title(Text("Payment", style="bold cyan"), status(p.get("current_status")))
    d.subtitle(p.get("id"))
    d.sep()
    cur = p.get("currency") or "SAR"
    d.line("Amount", money(p.get("amount", EMPTY), cur))
    d.line("Currency", Text(cur, style="yellow"))
    if p.get("payment_method"):
        d.line("Payment Method", Text(p["payment_method"], style="cyan"))
    if p.get("type"):
        d.line("Type", p["type"])
    if p.get("scheduled_on"):
        d.line("Scheduled", date(p["scheduled_on"]))
    if p.get("payed_at"):
        d.line("Paid At", date(p["payed_at"]))
    if p.get("refund_reason") or p.get("refunded_at"):
        d.sep()
        if p.get("refund_reason"):
            d.line("Refund Reason", Text(p["refund_reason"], style="red"))
        if p.get("refund_note"):
            d.line("Refund Note", Text(p["refund_note"], style="red"))
        if p.get("refunded_at"):
            d.line("Refunded At", Text(str(p["refunded_at"])[:10], style="red"))


PAYMENT = View(
    "payments",
    [
        ("ID", lambda r: plain(r.get("id"), "dim")),
        ("Amount", lambda r: money(r.get("amount"), r.get("currency"))),
        ("Status", lambda r: status(r.get("current_status"))),
        ("Type", lambda r: plain(r.get("type"))),
        ("Method", lambda r: plain(r.get("payment_method"), "cyan")),
        ("Scheduled", lambda r: date(r.get("scheduled_on"))),
        ("Paid At", lambda r: date(r.get("payed_at"))),
        ("Refunded At", lambda r: date(r.get("refunded_at"))),
    ],
    _payment_detail,
)


# ------------------------------------------------------------------ #
# Products
# ------------------------------------------------------------------ #


def _vat_label(entry: Row) -> str:
    if entry.get("is_price_exempt_from_vat"):
        return "Exempt"
    if entry.get("is_price_inclusive_of_vat"):
        return "Incl."
    return "Excl."


def _product_price(row: Row) -> Text:
    active = [p for p in row.get("prices") or [] if p.get("is_active") is not False]
    if active:
        return Text(" / ".join(f"{p.get('amount')} {p.get('currency')}" for p in active), style="magenta")
    if row.get("price") and row.get("currency"):
        return money(row["price"], row["currency"])
    return dash()


def _product_vat(row: Row) -> Text:
    prices = row.get("prices") or []
    return dash(_vat_label(prices[0] if prices else row))


def _product_type(row: Row) -> Text:
    return Text("RECURRING", style="cyan") if row.get("type") == "RECURRING" else Text("ONE_OFF")


def _product_detail(prod: Row, d: Detail) -> None:
    kind = prod.get("type") or "ONE_OFF"
    d.title(
        Text(prod.get("name") or EMPTY, style="bold"),
        active_badge(prod.get("is_active")),
        Text(f"[{kind}]", style="cyan" if kind == "RECURRING" else "white"),
    )
    d.subtitle(prod.get("id"))
    d.sep()
    d.line("Type", _product_type(prod))
    if prod.get("recurring_interval"):
        d.line("Interval", interval(prod))
    d.line("One-time", yes_no(prod.get("is_one_time")))
    if prod.get("description"):
        d.line("Description", prod["description"])
    d.sep()

    prices = prod.get("prices") or []
    if prices:
        d.section("Prices", len(prices))
        for p in prices:
            vat = {"Exempt": "Exempt from VAT", "Incl.": "Incl. VAT", "Excl.": "Excl. VAT"}[_vat_label(p)]
            if vat == "Incl. VAT" and p.get("vat_amount"):
                vat += f" (VAT: {p['vat_amount']})"
            parts: list[Cell] = [
                Text(str(p.get("currency") or "").ljust(5), style="yellow"),
                Text(str(p.get("amount")).rjust(10), style="magenta"),
                dash(vat),
            ]
            if p.get("is_active") is False:
                parts.append(Text("[inactive]", style="red"))
            d.entry(*parts)
        d.sep()
    elif prod.get("price") and prod.get("currency"):
        d.line("Price", money(prod["price"], prod["currency"]))
        d.sep()

    if prod.get("created_at"):
        d.line("Created", date(prod["created_at"]))
    if prod.get("updated_at"):
        d.line("Updated", date(prod["updated_at"]))


PRODUCT = View(
    "products",
    [
        ("Name", lambda r: plain(r.get("name"), "bold")),
        ("Type", _product_type),
        ("Interval", interval),
        ("Price", _product_price),
        ("VAT", _product_vat),
        ("Status", lambda r: active_badge(r.get("is_active"))),
        ("Created", lambda r: date(r.get("created_at"))),
    ],
    _product_detail,
)


# ------------------------------------------------------------------ #
# Consumers
# ------------------------------------------------------------------ #


def _consumer_detail(c: Row, d: Detail) -> None:
    d.title(Text(c.get("name") or EMPTY, style="bold"))
    d.subtitle(c.get("id"))
    d.sep()
    if c.get("email"):
        d.line("Email", Text(c["email"], style="cyan"))
    if c.get("phone_number"):
        d.line("Phone", Text(c["phone_number"], style="cyan"))
    if c.get("alias"):
        d.line("Alias", c["alias"])
    if c.get("preferred_language"):
        d.line("Language", Text(c["preferred_language"], style="yellow"))
    if c.get("communication_methods"):
        d.line("Comms", ", ".join(c["communication_methods"]))
    d.sep()
    if c.get("external_id"):
        d.line("External ID", Text(str(c["external_id"]), style="dim"))
    if c.get("iban"):
        d.line("IBAN", Text(c["iban"], style="dim"))
    if c.get("comment"):
        d.line("Comment", c["comment"])
    if c.get("created_at"):
        d.line("Created", date(c["created_at"]))
    if c.get("updated_at"):
        d.line("Updated", date(c["updated_at"]))


CONSUMER = View(
    "consumers",
    [
        ("Name", lambda r: plain(r.get("name"), "bold")),
        ("Alias", lambda r: plain(r.get("alias"))),
        ("Email", lambda r: plain(r.get("email"), "cyan")),
        ("Phone", lambda r: plain(r.get("phone_number"), "cyan")),
        ("Language", lambda r: plain(r.get("preferred_language"), "yellow")),
        ("Comms", lambda r: plain(", ".join(r.get("communication_methods") or []))),
        ("Created", lambda r: date(r.get("created_at"))),
    ],
    _consumer_detail,
)


# ------------------------------------------------------------------ #
# Subscriptions and freeze periods
# ------------------------------------------------------------------ #


def _subscription_detail(sub: Row, d: Detail) -> None:
    d.title(Text("Subscription", style="bold cyan"), status(sub.get("status")))
    d.subtitle(sub.get("id"))
    d.sep()
    consumer = sub.get("organization_consumer")
    if consumer:
        d.line("Consumer", plain(consumer.get("name") or consumer.get("alias"), "bold"))
        if consumer.get("email"):
            d.line("Email", Text(consumer["email"], style="cyan"))
        d.sep()

    cur = sub.get("currency") or "SAR"
    d.line("Amount", money(sub.get("amount", EMPTY), cur))
    if sub.get("original_amount") is not None and sub.get("original_amount") != sub.get("amount"):
        d.line("Original Amount", dash(f"{sub['original_amount']} {cur}"))
    if sub.get("recurring_interval"):
        d.line("Interval", interval(sub))
    d.line("Cycle #", plain(sub.get("current_cycle_number", EMPTY)))
    if sub.get("cancel_at_cycle_number") is not None:
        d.line("Cancels at Cycle", Text(str(sub["cancel_at_cycle_number"]), style="yellow"))
    d.line("Cancel at Period End", yes_no(sub.get("cancel_at_period_end")))
    d.sep()

    if sub.get("current_period_start"):
        d.line("Period Start", date(sub["current_period_start"]))
    if sub.get("current_period_end"):
        d.line("Period End", date(sub["current_period_end"]))
    if sub.get("started_at"):
        d.line("Started", date(sub["started_at"]))
    if sub.get("ended_at"):
        d.line("Ended", Text(str(sub["ended_at"])[:10], style="red"))
    d.sep()

    _line_items(sub, d, cur)

    freeze = sub.get("active_freeze") or sub.get("current_freeze")
    if isinstance(freeze, dict):
        d.lines.append(Text("  ") + Text("Active Freeze", style="yellow"))
        d.entry(dash("Start:"), date(freeze.get("freeze_start_datetime")))
        end = freeze.get("freeze_end_datetime")
        d.entry(dash("End:  "), date(end) if end else dash("indefinite"))
        if freeze.get("notes"):
            d.entry(dash("Notes:"), freeze["notes"])
        d.sep()

    if sub.get("description"):
        d.line("Description", sub["description"])
    if sub.get("created_at"):
        d.line("Created", date(sub["created_at"]))
    if sub.get("updated_at"):
        d.line("Updated", date(sub["updated_at"]))


SUBSCRIPTION = View(
    "subscriptions",
    [
        ("Consumer", lambda r: consumer_name(r.get("organization_consumer"))),
        ("Status", lambda r: status(r.get("status"))),
        ("Amount", lambda r: money(r.get("amount") or None, r.get("currency"))),
        ("Interval", interval),
        ("Cycle #", lambda r: plain(r.get("current_cycle_number"))),
        ("Period End", lambda r: date(r.get("current_period_end"))),
        ("Created", lambda r: date(r.get("created_at"))),
    ],
    _subscription_detail,
)


def _freeze_duration(row: Row) -> Text:
    start, end = row.get("freeze_start_datetime"), row.get("freeze_end_datetime")
    if not start or not end:
        return dash("open-ended")
    try:
        days = (_date.fromisoformat(str(end)[:10]) - _date.fromisoformat(str(start)[:10])).days
    except ValueError:
        return dash()
    return Text(f"{days} day{'s' if days != 1 else ''}")


FREEZE = View(
    "freeze periods",
    [
        ("ID", lambda r: plain(r.get("id"), "dim")),
        ("Start", lambda r: date(r.get("freeze_start_datetime"))),
        ("End", lambda r: date(r["freeze_end_datetime"]) if r.get("freeze_end_datetime") else dash("indefinite")),
        ("Duration", _freeze_duration),
        ("Notes", lambda r: plain(r.get("notes"))),
        ("Created", lambda r: date(r.get("created_at"))),
    ],
)


# ------------------------------------------------------------------ #
# Coupons
# ------------------------------------------------------------------ #


def _discount(row: Row) -> Text:
    if row.get("is_percentage"):
        return Text(f"{row.get('discount_value')}%", style="magenta")
    suffix = f" {row['currency']}" if row.get("currency") else ""
    return Text(f"{row.get('discount_value')}{suffix}", style="magenta")


def _times_used(row: Row) -> Text:
    used = row.get("times_used")
    if used is None:
        return dash()
    return Text(str(used)) if used > 0 else dash("0")


def _coupon_detail(coupon: Row, d: Detail) -> None:
    d.title(
        Text(coupon.get("name") or EMPTY, style="bold"),
        active_badge(coupon.get("is_active")),
        Text("[Percentage]", style="cyan") if coupon.get("is_percentage") else Text("[Fixed]"),
    )
    d.subtitle(coupon.get("id"))
    d.sep()
    d.line("Discount", _discount(coupon))
    if not coupon.get("is_percentage") and coupon.get("currency"):
        d.line("Currency", Text(coupon["currency"], style="yellow"))
    d.line("Times Used", plain(coupon.get("times_used") if coupon.get("times_used") is not None else 0))
    d.sep()
    if coupon.get("created_at"):
        d.line("Created", date(coupon["created_at"]))
    if coupon.get("updated_at"):
        d.line("Updated", date(coupon["updated_at"]))


COUPON = View(
    "coupons",
    [
        ("Name", lambda r: plain(r.get("name"), "bold")),
        ("Discount", _discount),
        ("Type", lambda r: Text("Percentage", style="cyan") if r.get("is_percentage") else Text("Fixed")),
        ("Status", lambda r: active_badge(r.get("is_active"))),
        ("Used", _times_used),
        ("Created", lambda r: date(r.get("created_at"))),
    ],
    _coupon_detail,
)


# ------------------------------------------------------------------ #
# Payment links (checkout)
# ------------------------------------------------------------------ #


def _link_items(row: Row) -> Text:
    items = row.get("items") or []
    if not items:
        return dash()
    labels = []
    for item in items:
        product = item.get("product") or {}
        name = product.get("name") or str(item.get("product_id") or "?")[:8]
        labels.append(f"{name} ×{item.get('quantity', 1)}")
    return Text(", ".join(labels))


def _max_payments(row: Row) -> Text:
    value = row.get("max_number_of_payments")
    return dash("∞") if value is None else Text(str(value))


def _checkout_detail(pl: Row, d: Detail) -> None:
    d.title(Text(pl.get("name") or "Payment Link", style="bold cyan"), status(pl.get("status")))
    d.subtitle(pl.get("id"))
    d.sep()
    cur = pl.get("currency") or "SAR"
    d.line("Currency", Text(cur, style="yellow"))
    d.line("Amount", money(pl.get("amount", EMPTY), cur))
    if pl.get("amount_collected") is not None:
        d.line("Collected", money(pl["amount_collected"], cur, "green"))
    d.sep()

    _line_items(pl, d, cur)

    if pl.get("max_number_of_payments") is not None:
        d.line("Max Payments", str(pl["max_number_of_payments"]))
    else:
        d.line("Max Payments", dash("∞ unlimited"))
    if pl.get("valid_until"):
        d.line("Valid Until", date(pl["valid_until"], with_time=True))
    if pl.get("contact_information_type"):
        d.line("Contact Type", pl["contact_information_type"])
    methods = enabled_methods(pl.get("override_payment_methods"))
    if methods:
        d.line("Payment Methods", methods)
    if pl.get("success_redirect_url"):
        d.line("Success URL", Text(pl["success_redirect_url"], style="underline blue"))
    if pl.get("failure_redirect_url"):
        d.line("Failure URL", Text(pl["failure_redirect_url"], style="underline blue"))
    if pl.get("created_at"):
        d.line("Created", date(pl["created_at"], with_time=True))
    if pl.get("updated_at"):
        d.line("Updated", date(pl["updated_at"], with_time=True))
    if pl.get("description"):
        d.sep()
        d.line("Description", pl["description"])
    if pl.get("confirmation_message"):
        d.line("Confirmation Msg", pl["confirmation_message"])
    if pl.get("deactivate_message"):
        d.line("Deactivate Msg", pl["deactivate_message"])
    if pl.get("url"):
        d.sep()
        d.line("URL", Text(pl["url"], style="underline blue"))


CHECKOUT = View(
    "payment links",
    [
        ("ID", lambda r: plain(r.get("id"), "dim")),
        ("Name", lambda r: plain(r.get("name"), "bold")),
        ("Status", lambda r: status(r.get("status"))),
        ("Amount", lambda r: money(r.get("amount"), r.get("currency"))),
        ("Collected", lambda r: money(r.get("amount_collected"), r.get("currency"), "green")),
        ("Items", _link_items),
        ("Max Payments", _max_payments),
        ("Valid Until", lambda r: date(r.get("valid_until"))),
        ("URL", lambda r: plain(r.get("url"), "underline blue")),
        ("Created", lambda r: date(r.get("created_at"))),
    ],
    _checkout_detail,
)


# ------------------------------------------------------------------ #
# Me
# ------------------------------------------------------------------ #


def _me_detail(me: Row, d: Detail) -> None:
    user = me.get("user") or {}
    org = me.get("organization") or {}
    currency = org.get("currency_config") or {}

    def full_name(first: Any, last: Any) -> Text:
        name = f"{first or ''} {last or ''}".strip()
        return plain(name or None)

    d.heading("User")
    d.line("ID", plain(user.get("id"), "grey50"))
    d.line("Email", plain(user.get("email")))
    d.line("Name", full_name(user.get("first_name"), user.get("last_name")))
    d.line("Name (EN)", full_name(user.get("en_first_name"), user.get("en_last_name")))
    d.line("Member Since", date(user.get("created_at")))
    d.blank()

    sandbox = org.get("sandbox")
    if sandbox is True:
        env = Text("SANDBOX", style="bold yellow")
    elif sandbox is False:
        env = Text("LIVE", style="bold green")
    else:
        env = dash("(unknown)")

    d.heading("Organization")
    d.line("ID", plain(org.get("id"), "grey50"))
    d.line("Name", plain(org.get("name")))
    d.line("Name (EN)", plain(org.get("name_en")))
    d.line("Environment", env)
    d.line("Created", date(org.get("created_at")))
    d.blank()

    enabled = currency.get("enabled_currencies")
    d.heading("Currency Config")
    d.line("Home Currency", plain(currency.get("home_currency"), "cyan"))
    d.line("Default", plain(currency.get("default_currency"), "cyan"))
    d.line("Enabled", plain(", ".join(enabled) if isinstance(enabled, list) and enabled else None, "cyan"))


ME = View("accounts", detail=_me_detail)


"""Built-in CLI sub-commands for streampay-cli.

This package groups the Typer sub-command modules that form the CLI's
command tree, one per API resource plus local tooling:

* :mod:`~streampay_cli.commands.auth` -- ``login`` / ``logout``.
* :mod:`~streampay_cli.commands.config` -- view and modify stored settings.
* :mod:`~streampay_cli.commands.me` -- the authenticated account.
* :mod:`~streampay_cli.commands.consumers`, ``products``,
  ``subscriptions``, ``invoices``, ``payments``, ``coupons``,
  ``checkout`` -- resource operations.
* :mod:`~streampay_cli.commands.webhooks` -- local signature tooling.

Each module either exports a :class:`typer.Typer` sub-application or
plain callbacks registered directly on the root app. Shared plumbing
(client construction, error reporting, ``--format`` resolution) lives in
:mod:`~streampay_cli.commands.common`.
"""

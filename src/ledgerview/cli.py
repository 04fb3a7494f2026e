"""Command-line front end for LedgerView."""

from __future__ import annotations

import asyncio
from datetime import date
from decimal import Decimal
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .controller import Notification, TransactionListController
from .errors import StoreError, ValidationFailure
from .infra.local_store import SQLModelTransactionStore, ensure_default_categories
from .logging_config import setup_logging
from .services.drafts import TransactionDraft
from .services.summary import FinancialSummary

TYPE_CHOICES = click.Choice(["all", "income", "expense"], case_sensitive=False)
KIND_CHOICES = click.Choice(["income", "expense"], case_sensitive=False)


def _format_currency(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def _format_rate(summary: FinancialSummary) -> str:
    if not summary.total_income:
        return "0%"
    return f"{summary.savings_rate:.1f}%"


def _echo_notification(note: Notification) -> None:
    if note.level == "error":
        text = f"{note.title}: {note.message}" if note.message else note.title
        click.secho(text, fg="red", err=True)
    else:
        click.echo(note.title)


def _controller(app: AppContext) -> TransactionListController:
    return app.create_controller(notifier=_echo_notification)


def _require_login(app: AppContext) -> None:
    if app.requires_login and not app.session.is_authenticated:
        raise click.ClickException("Not logged in. Run `ledgerview login` first.")


def _render_list(controller: TransactionListController) -> None:
    if not controller.transactions:
        click.echo("No transactions found.")
    for tx in controller.transactions:
        category = tx.category.name if tx.category else ""
        sign = "+" if tx.is_income else "-"
        when = tx.date.isoformat() if tx.date else "----------"
        click.echo(
            f"{tx.id:<12} {when}  {(tx.description or 'No description'):<28} "
            f"{category:<16} {sign}{_format_currency(tx.amount)}"
        )

    summary = controller.summary
    click.echo("")
    click.echo(f"Income:       {_format_currency(summary.total_income)}")
    click.echo(f"Expenses:     {_format_currency(summary.total_expenses)}")
    click.echo(f"Balance:      {_format_currency(summary.balance)}")
    click.echo(f"Savings rate: {_format_rate(summary)}")
    if summary.category_breakdown:
        click.echo("")
        click.echo("Expenses by category:")
        for entry in summary.category_breakdown:
            icon = f"{entry.icon} " if entry.icon else ""
            click.echo(
                f"  {icon}{entry.label:<20} {_format_currency(entry.total):>14} "
                f"{entry.percentage_of_expenses:.1f}% of total"
            )


@click.group()
@click.pass_context
def cli(click_ctx: click.Context) -> None:
    """Record income and expenses and review filtered summaries."""

    if click_ctx.obj is None:
        config = BaseConfig()
        setup_logging(config)
        click_ctx.obj = create_app_context(config)
    app: AppContext = click_ctx.obj
    if app.requires_login:
        app.session.add_listener(
            lambda _: click.secho(
                "Session ended. Run `ledgerview login` to sign in again.", fg="yellow", err=True
            )
        )


@cli.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@click.pass_obj
def login(app: AppContext, email: str, password: str) -> None:
    """Sign in and remember the token."""

    if app.auth is None:
        click.echo("The local store does not use accounts.")
        return
    try:
        _, user = asyncio.run(app.auth.login(email, password))
    except StoreError as exc:
        raise click.ClickException(exc.user_message("Login failed")) from exc
    click.echo(f"Logged in as {user.name or user.email}" if user else "Logged in")


@cli.command()
@click.option("--name", prompt=True)
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_obj
def register(app: AppContext, name: str, email: str, password: str) -> None:
    """Create an account and sign in."""

    if app.auth is None:
        click.echo("The local store does not use accounts.")
        return
    try:
        _, user = asyncio.run(app.auth.register(name, email, password))
    except StoreError as exc:
        raise click.ClickException(exc.user_message("Registration failed")) from exc
    click.echo(f"Welcome, {user.name or user.email}" if user else "Account created")


@cli.command()
@click.pass_obj
def logout(app: AppContext) -> None:
    """Forget the stored token."""

    if app.auth is not None:
        app.auth.logout()


@cli.command()
@click.pass_obj
def whoami(app: AppContext) -> None:
    """Show the signed-in user (validates the stored token)."""

    if app.auth is None:
        click.echo("local")
        return
    _require_login(app)
    try:
        user = asyncio.run(app.auth.current_user())
    except StoreError as exc:
        raise click.ClickException(exc.user_message()) from exc
    click.echo(f"{user.name} <{user.email}>")


@cli.command()
@click.pass_obj
def categories(app: AppContext) -> None:
    """List categories."""

    _require_login(app)
    controller = _controller(app)
    if not asyncio.run(controller.load_categories()):
        raise SystemExit(1)
    for category in controller.categories:
        icon = f"{category.icon} " if category.icon else ""
        click.echo(f"{category.id:<34} {icon}{category.name} ({category.type})")


@cli.command("seed-categories")
@click.pass_obj
def seed_categories(app: AppContext) -> None:
    """Create the default categories in the local store."""

    if not isinstance(app.store, SQLModelTransactionStore):
        raise click.ClickException("Categories are managed by the server for the HTTP store.")
    seeded = ensure_default_categories(app.store)
    click.echo(f"{len(seeded)} categories available")


@cli.command("list")
@click.option("--type", "txn_type", type=TYPE_CHOICES, default="all", show_default=True)
@click.option("--category", "category_id", default="all", show_default=True)
@click.option("--from", "start_date", default=None, help="Start date (YYYY-MM-DD), inclusive")
@click.option("--to", "end_date", default=None, help="End date (YYYY-MM-DD), inclusive")
@click.option(
    "--group-by",
    type=click.Choice(["label", "id"]),
    default="label",
    show_default=True,
    help="Merge same-named categories (label) or keep them apart (id)",
)
@click.pass_obj
def list_transactions(
    app: AppContext,
    txn_type: str,
    category_id: str,
    start_date: Optional[str],
    end_date: Optional[str],
    group_by: str,
) -> None:
    """Show transactions and their summary for a filter."""

    _require_login(app)
    controller = _controller(app)
    controller.group_by = group_by
    try:
        controller.criteria = controller.criteria.set_filter(
            type=txn_type, category_id=category_id, start_date=start_date, end_date=end_date
        )
    except ValidationFailure as exc:
        raise click.BadParameter(exc.user_message()) from exc
    if not asyncio.run(controller.start()):
        raise SystemExit(1)
    _render_list(controller)


@cli.command()
@click.option("--type", "txn_type", type=KIND_CHOICES, default="expense", show_default=True)
@click.option("--amount", required=True)
@click.option("--description", default="")
@click.option("--category", "category_id", default=None)
@click.option("--date", "when", default=None, help="YYYY-MM-DD (defaults to today)")
@click.pass_obj
def add(
    app: AppContext,
    txn_type: str,
    amount: str,
    description: str,
    category_id: Optional[str],
    when: Optional[str],
) -> None:
    """Record a new transaction."""

    _require_login(app)
    controller = _controller(app)
    draft = TransactionDraft(
        type=txn_type.lower(),
        amount=amount,
        description=description,
        category_id=category_id,
        transaction_date=when or date.today(),
    )

    async def _run() -> bool:
        await controller.load_categories()
        outcome = await controller.submit(draft)
        return outcome.ok

    if not asyncio.run(_run()):
        raise SystemExit(1)
    click.echo(f"Balance: {_format_currency(controller.summary.balance)}")


@cli.command()
@click.argument("transaction_id")
@click.option("--type", "txn_type", type=KIND_CHOICES, default=None)
@click.option("--amount", default=None)
@click.option("--description", default=None)
@click.option("--category", "category_id", default=None, help="Category id, or '' to clear")
@click.option("--date", "when", default=None)
@click.pass_obj
def edit(
    app: AppContext,
    transaction_id: str,
    txn_type: Optional[str],
    amount: Optional[str],
    description: Optional[str],
    category_id: Optional[str],
    when: Optional[str],
) -> None:
    """Change an existing transaction."""

    _require_login(app)
    controller = _controller(app)

    async def _run() -> bool:
        await controller.start()
        existing = controller.find(transaction_id)
        if existing is None:
            raise click.ClickException(f"Transaction {transaction_id} not found")
        draft = controller.begin_edit(existing)
        if txn_type is not None:
            draft.type = txn_type.lower()
        if amount is not None:
            draft.amount = amount
        if description is not None:
            draft.description = description
        if category_id is not None:
            draft.category_id = category_id or None
        if when is not None:
            draft.transaction_date = when
        outcome = await controller.submit(draft)
        return outcome.ok

    if not asyncio.run(_run()):
        raise SystemExit(1)


@cli.command()
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, default=False, help="Skip the confirmation prompt")
@click.pass_obj
def delete(app: AppContext, transaction_id: str, yes: bool) -> None:
    """Delete a transaction."""

    _require_login(app)
    controller = _controller(app)
    controller.request_delete(transaction_id)
    if not yes and not click.confirm(
        "Delete this transaction? This cannot be undone.", default=False
    ):
        controller.cancel_delete()
        click.echo("Cancelled")
        return
    outcome = asyncio.run(controller.confirm_delete())
    if not outcome.ok:
        raise SystemExit(1)


def main() -> None:
    cli(prog_name="ledgerview")


if __name__ == "__main__":  # pragma: no cover
    main()

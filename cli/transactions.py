#!/usr/bin/env python3

import argparse
import sys
from datetime import date

from categorization import auto_categorize, get_assistant
from cli.users import require_user
from installments import (
    PropagationMode,
    RenegotiationRequest,
    TransactionChanges,
    TransactionDraft,
)
from models.transaction import TransactionNature, TransactionType
from money import format_cents, to_cents
from periods import current_period
from tools.transactions import chain_progress, upcoming_dues
from logger import get_logger

logger = get_logger()


def _parse_date(value):
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.error(f"Invalid date '{value}', expected YYYY-MM-DD")
        sys.exit(1)


def _warn_if_unsaved(ledger):
    if ledger.last_save_ok is False:
        logger.warning("Changes could not be saved and will be lost on exit.")


def _describe(txn):
    category = txn.category or "-"
    return (
        f"{txn.date.isoformat()}  {txn.type.value:<12} {format_cents(txn.amount_cents):>12}  "
        f"{txn.description}  [{category}]  ({txn.id})"
    )


def cmd_add(args, services):
    """Record a new transaction or installment purchase.

    Args:
        args: Parsed command-line arguments
        services: Services container with users and transactions services
    """
    user = require_user(services)
    ledger = services.ledger(user)

    draft = TransactionDraft(
        account_id=args.account or (user.accounts[0].id if user.accounts else ""),
        description=args.description,
        amount_cents=to_cents(args.amount),
        date=_parse_date(args.date) if args.date else date.today(),
        type=TransactionType(args.type),
        category=args.category,
        nature=TransactionNature(args.nature) if args.nature else None,
        installments=args.installments,
    )
    created = ledger.add(draft)

    logger.info(f"✓ Saved {len(created)} transaction(s)")
    for txn in created:
        logger.info(f"  {_describe(txn)}")
    _warn_if_unsaved(ledger)


def cmd_list(args, services):
    """List the transactions of a month, newest first."""
    user = require_user(services)
    ledger = services.ledger(user)
    month = args.month or current_period()

    transactions = ledger.for_period(month)
    if not transactions:
        logger.info(f"No transactions in {month}.")
        return

    logger.info(f"\nTransactions for {month}:")
    logger.info("=" * 80)
    for txn in transactions:
        logger.info(_describe(txn))
    logger.info(f"\nTotal: {len(transactions)}")

    dues = upcoming_dues(
        ledger.transactions, today=date.today(), days=services.config.due_soon_days
    )
    if dues:
        logger.info(f"\n⚠ {len(dues)} bill(s) due in the next {services.config.due_soon_days} days")


def cmd_edit(args, services):
    """Edit a transaction, optionally propagating along its installment chain."""
    user = require_user(services)
    ledger = services.ledger(user)

    changes = TransactionChanges(
        description=args.description,
        amount_cents=to_cents(args.amount) if args.amount is not None else None,
        date=_parse_date(args.date) if args.date else None,
        category=args.category,
        account_id=args.account,
    )

    renegotiation = None
    mode = PropagationMode(args.mode)
    if mode is PropagationMode.RENEGOTIATE:
        if args.new_total is None or args.new_count is None:
            logger.error("Renegotiation requires --new-total and --new-count.")
            sys.exit(1)
        renegotiation = RenegotiationRequest(
            new_total_cents=to_cents(args.new_total), new_count=args.new_count
        )

    result = ledger.edit(args.transaction_id, changes, mode, renegotiation)
    if not result.changed:
        logger.warning(f"Transaction '{args.transaction_id}' not found; nothing changed.")
        return

    logger.info(f"✓ Transaction updated ({len(result.changes)} change(s))")
    _warn_if_unsaved(ledger)


def cmd_delete(args, services):
    """Delete a transaction, or it and the rest of its installment chain."""
    user = require_user(services)
    ledger = services.ledger(user)

    if args.future:
        removed = ledger.delete_future(args.transaction_id)
    else:
        removed = 1 if ledger.delete(args.transaction_id) else 0

    if not removed:
        logger.warning(f"Transaction '{args.transaction_id}' not found; nothing changed.")
        return

    logger.info(f"✓ Deleted {removed} transaction(s)")
    _warn_if_unsaved(ledger)


def cmd_categorize(args, services):
    """Ask the assistant to categorize uncategorized transactions of a month."""
    user = require_user(services)
    ledger = services.ledger(user)
    month = args.month or current_period()

    assistant = get_assistant(services.config)
    if assistant is None:
        logger.error("The assistant is disabled. Enable [llm] in the config file.")
        sys.exit(1)

    changed = auto_categorize(ledger, assistant, ledger.for_period(month))
    logger.info(f"✓ Categorized {changed} transaction(s) in {month}")
    _warn_if_unsaved(ledger)


def cmd_progress(args, services):
    """Show how much of an installment purchase is paid."""
    user = require_user(services)
    ledger = services.ledger(user)

    txn = ledger.find(args.transaction_id)
    if txn is None or not txn.in_chain:
        logger.error(f"'{args.transaction_id}' is not an installment transaction.")
        sys.exit(1)

    progress = chain_progress(ledger.chain(txn.installment_id), today=date.today())
    logger.info(f"\n{progress.description}")
    logger.info("=" * 80)
    logger.info(f"Installment: {txn.installment_number}/{progress.total_installments}")
    logger.info(f"Total:       {format_cents(progress.total_cents)}")
    logger.info(f"Paid:        {format_cents(progress.paid_cents)} ({progress.paid_count} installment(s))")
    logger.info(f"Remaining:   {format_cents(progress.remaining_cents)}")


def cmd_dues(args, services):
    """List fixed bills and installments due in the next days."""
    user = require_user(services)
    ledger = services.ledger(user)
    days = args.days if args.days is not None else services.config.due_soon_days

    dues = upcoming_dues(ledger.transactions, today=date.today(), days=days)
    if not dues:
        logger.info(f"Nothing due in the next {days} days.")
        return

    logger.info(f"\nDue in the next {days} days:")
    logger.info("=" * 80)
    for txn in dues:
        logger.info(_describe(txn))
    logger.info(f"\nTotal:{format_cents(sum(t.amount_cents for t in dues))}")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Record and manage transactions",
        description="Record, edit and delete transactions and installment purchases",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions add
    add_parser = transactions_subparsers.add_parser(
        "add",
        help="Record a transaction",
        epilog="""
Examples:
  python -m cli transactions add "Coffee" 5.50 --category Food
  python -m cli transactions add "Salary" 5000 --type income --nature salary
  python -m cli transactions add "Laptop" 3600 --installments 12 --account acc3
        """,
    )
    add_parser.add_argument("description", help="What the transaction is")
    add_parser.add_argument("amount", help="Amount in major units, e.g. 12.34 or 12,34")
    add_parser.add_argument("--date", help="Date (YYYY-MM-DD), defaults to today")
    add_parser.add_argument(
        "--type",
        default=TransactionType.EXPENSE.value,
        choices=[t.value for t in TransactionType],
    )
    add_parser.add_argument(
        "--nature", choices=[n.value for n in TransactionNature if n != TransactionNature.NONE]
    )
    add_parser.add_argument("--category", help="Category name")
    add_parser.add_argument("--account", help="Account ID, defaults to the first account")
    add_parser.add_argument(
        "--installments",
        type=int,
        help="Split an expense into this many monthly installments (2 or more)",
    )
    add_parser.set_defaults(func=cmd_add)

    # transactions list
    list_parser = transactions_subparsers.add_parser(
        "list", help="List transactions of a month"
    )
    list_parser.add_argument("--month", help="Period (YYYY-MM), defaults to current month")
    list_parser.set_defaults(func=cmd_list)

    # transactions edit
    edit_parser = transactions_subparsers.add_parser(
        "edit",
        help="Edit a transaction",
        epilog="""
Modes:
  single       change only this transaction
  all-future   carry description/category/account (and a shifted date) to
               every later installment of the purchase
  renegotiate  replace the remaining balance with --new-total over --new-count
               installments starting at this one
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    edit_parser.add_argument("transaction_id", help="Transaction ID")
    edit_parser.add_argument("--description")
    edit_parser.add_argument("--amount")
    edit_parser.add_argument("--date", help="New date (YYYY-MM-DD)")
    edit_parser.add_argument("--category", help="Category name ('' clears it)")
    edit_parser.add_argument("--account", help="Account ID")
    edit_parser.add_argument(
        "--mode",
        default=PropagationMode.SINGLE.value,
        choices=[m.value for m in PropagationMode],
    )
    edit_parser.add_argument("--new-total", help="Renegotiated remaining total")
    edit_parser.add_argument("--new-count", type=int, help="Renegotiated installment count")
    edit_parser.set_defaults(func=cmd_edit)

    # transactions delete
    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction"
    )
    delete_parser.add_argument("transaction_id", help="Transaction ID")
    delete_parser.add_argument(
        "--future",
        action="store_true",
        help="Also delete every later installment of the same purchase",
    )
    delete_parser.set_defaults(func=cmd_delete)

    # transactions categorize
    categorize_parser = transactions_subparsers.add_parser(
        "categorize", help="Auto-categorize a month with the assistant"
    )
    categorize_parser.add_argument("--month", help="Period (YYYY-MM)")
    categorize_parser.set_defaults(func=cmd_categorize)

    # transactions progress
    progress_parser = transactions_subparsers.add_parser(
        "progress", help="Show payment progress of an installment purchase"
    )
    progress_parser.add_argument("transaction_id", help="Any installment of the purchase")
    progress_parser.set_defaults(func=cmd_progress)

    # transactions dues
    dues_parser = transactions_subparsers.add_parser(
        "dues", help="List fixed bills and installments due soon"
    )
    dues_parser.add_argument(
        "--days", type=int, help="Look-ahead window in days (default from config)"
    )
    dues_parser.set_defaults(func=cmd_dues)

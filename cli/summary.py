#!/usr/bin/env python3

import sys

from categorization import get_assistant
from cli.users import require_user
from money import format_cents
from periods import current_period
from tools.transactions import expense_breakdown, summarize_periods
from logger import get_logger

logger = get_logger()


def _require_assistant(services):
    assistant = get_assistant(services.config)
    if assistant is None:
        logger.error("The assistant is disabled. Enable [llm] in the config file.")
        sys.exit(1)
    return assistant


def _print_summary(summary):
    logger.info(f"\n{summary.period_label}")
    logger.info("=" * 80)
    logger.info(f"Income:   {summary.total_income:>12,.2f}")
    logger.info(f"Expenses: {summary.total_expense:>12,.2f}")
    logger.info(f"Balance:  {summary.balance:>12,.2f}")

    if summary.categories:
        logger.info("\nExpenses by category:")
        for share in summary.categories:
            logger.info(
                f"  {share.category:<20} {share.amount:>12,.2f}  "
                f"{share.percent_of_expenses:>6.1%}"
            )


def cmd_show(args, services):
    """Show income, expenses and category shares of one or more months."""
    user = require_user(services)
    ledger = services.ledger(user)

    start = args.from_month or args.month or current_period()
    end = args.to_month or args.month or start

    for summary in summarize_periods(ledger.transactions, start, end).values():
        _print_summary(summary)


def cmd_planner(args, services):
    """Split a month's expenses into installments, fixed and variable costs."""
    user = require_user(services)
    ledger = services.ledger(user)
    month = args.month or current_period()

    breakdown = expense_breakdown(ledger.transactions, month)
    logger.info(f"\nExpense planner for {month}")
    logger.info("=" * 80)
    logger.info(f"Installments: {format_cents(breakdown.installments_cents):>12}")
    logger.info(f"Fixed:        {format_cents(breakdown.fixed_cents):>12}")
    logger.info(f"Variable:     {format_cents(breakdown.variable_cents):>12}")
    logger.info(f"Total:        {format_cents(breakdown.total_cents):>12}")

    if args.verbose and breakdown.items:
        logger.info("")
        for txn in breakdown.items:
            logger.info(
                f"  {txn.date.isoformat()}  {format_cents(txn.amount_cents):>12}  {txn.description}"
            )


def cmd_insights(args, services):
    """Ask the assistant for an analysis of a month."""
    user = require_user(services)
    ledger = services.ledger(user)
    month = args.month or current_period()
    assistant = _require_assistant(services)

    logger.info(assistant.insights(ledger.for_period(month), month))


def cmd_ask(args, services):
    """Ask the assistant a question about your finances."""
    user = require_user(services)
    ledger = services.ledger(user)
    month = args.month or current_period()
    assistant = _require_assistant(services)

    answer = assistant.ask(args.question, ledger.transactions, ledger.summary(month))
    logger.info(answer)


def setup_parser(subparsers):
    """Setup summary subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "summary",
        help="Monthly summaries and assistant analysis",
        description="Summarize months and ask the assistant about your finances",
    )

    summary_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available summary commands",
        dest="subcommand",
        required=True,
    )

    # summary show
    show_parser = summary_subparsers.add_parser(
        "show",
        help="Show a monthly summary",
        epilog="""
Examples:
  python -m cli summary show
  python -m cli summary show --month 2024-03
  python -m cli summary show --from 2024-01 --to 2024-06
        """,
    )
    show_parser.add_argument("--month", help="Period (YYYY-MM), defaults to current month")
    show_parser.add_argument("--from", dest="from_month", help="First period of a range")
    show_parser.add_argument("--to", dest="to_month", help="Last period of a range")
    show_parser.set_defaults(func=cmd_show)

    # summary planner
    planner_parser = summary_subparsers.add_parser(
        "planner", help="Break a month's expenses down by kind"
    )
    planner_parser.add_argument("--month", help="Period (YYYY-MM)")
    planner_parser.add_argument(
        "-v", "--verbose", action="store_true", help="List every expense"
    )
    planner_parser.set_defaults(func=cmd_planner)

    # summary insights
    insights_parser = summary_subparsers.add_parser(
        "insights", help="Ask the assistant to analyse a month"
    )
    insights_parser.add_argument("--month", help="Period (YYYY-MM)")
    insights_parser.set_defaults(func=cmd_insights)

    # summary ask
    ask_parser = summary_subparsers.add_parser(
        "ask", help="Ask the assistant a question"
    )
    ask_parser.add_argument("question", help="Question in plain language")
    ask_parser.add_argument("--month", help="Period whose summary is sent along")
    ask_parser.set_defaults(func=cmd_ask)

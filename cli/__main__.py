#!/usr/bin/env python3
"""
Dindin CLI - Command-line interface for tracking personal finances.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    users        Create users and log in
    transactions Record and manage transactions and installment purchases
    summary      Monthly summaries and assistant analysis
    migrate      Database migrations

Examples:
    python -m cli users create "Ana Souza" ana
    python -m cli transactions add "Laptop" 3600 --installments 12
    python -m cli transactions edit <id> --mode all-future --category Shopping
    python -m cli summary show --month 2024-03
    python -m cli migrate apply
"""

import sys
import argparse
from cli import users, transactions, summary, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Dindin - Personal finance and installment tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    users.setup_parser(subparsers)
    transactions.setup_parser(subparsers)
    summary.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            db_manager = DatabaseManager(config)
            if args.command == "migrate":
                # Migrate commands work on the raw database
                args.func(args, db_manager)
            else:
                db_manager.initialize()
                args.func(args, Services(config, db_manager=db_manager))
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3

import sys
from logger import get_logger

logger = get_logger()


def require_user(services):
    """Get the logged-in user or exit with a hint."""
    user = services.users.get_session()
    if user is None:
        logger.error("No user logged in.")
        logger.info("Use 'python -m cli users login <username>' first.")
        sys.exit(1)
    return user


def cmd_list(args, services):
    """List all users."""
    users = services.users.find_all()

    if not users:
        logger.info("No users found.")
        return

    current = services.users.get_session()
    logger.info("\nUsers:")
    logger.info("=" * 80)
    for user in users:
        marker = " (logged in)" if current and current.id == user.id else ""
        logger.info(f"{user.username}: {user.name}{marker}")

    logger.info(f"\nTotal users: {len(users)}")


def cmd_create(args, services):
    """Create a user with the default accounts and categories, and log in."""
    user = services.users.create(
        args.name, args.username, email=args.email, phone=args.phone
    )
    services.users.set_session(user)

    logger.info(f"✓ User created and logged in: {user.username} (ID: {user.id})")
    logger.info(
        f"  {len(user.accounts)} accounts, {len(user.categories)} categories"
    )


def cmd_login(args, services):
    """Make a user the active one."""
    user = services.users.find_by_username(args.username)
    if not user:
        logger.error(f"User '{args.username}' not found.")
        sys.exit(1)

    services.users.set_session(user)
    logger.info(f"✓ Logged in as {user.name} (@{user.username})")


def cmd_logout(args, services):
    """Forget the active user."""
    services.users.clear_session()
    logger.info("✓ Logged out")


def cmd_show(args, services):
    """Show the accounts and categories of the active user."""
    user = require_user(services)

    logger.info(f"\n{user.name} (@{user.username})")
    logger.info("=" * 80)
    logger.info("Accounts:")
    for account in user.accounts:
        logger.info(f"  {account.id}: {account.name} [{account.type}]")

    logger.info("Categories:")
    for category in user.categories:
        hidden = "" if category.is_visible else " (hidden)"
        logger.info(f"  {category.icon} {category.name}{hidden}")


def setup_parser(subparsers):
    """Setup users subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "users",
        help="Manage users",
        description="Create users and switch the active one",
    )

    users_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available user commands",
        dest="subcommand",
        required=True,
    )

    list_parser = users_subparsers.add_parser("list", help="List all users")
    list_parser.set_defaults(func=cmd_list)

    create_parser = users_subparsers.add_parser(
        "create",
        help="Create a new user",
        epilog="""
Examples:
  python -m cli users create "Ana Souza" ana
  python -m cli users create "Ana Souza" ana --email ana@example.com
        """,
    )
    create_parser.add_argument("name", help="Display name")
    create_parser.add_argument("username", help="Unique login handle")
    create_parser.add_argument("--email", help="Optional e-mail")
    create_parser.add_argument("--phone", help="Optional phone number")
    create_parser.set_defaults(func=cmd_create)

    login_parser = users_subparsers.add_parser("login", help="Switch active user")
    login_parser.add_argument("username", help="Username to log in as")
    login_parser.set_defaults(func=cmd_login)

    logout_parser = users_subparsers.add_parser("logout", help="Log out")
    logout_parser.set_defaults(func=cmd_logout)

    show_parser = users_subparsers.add_parser(
        "show", help="Show accounts and categories of the active user"
    )
    show_parser.set_defaults(func=cmd_show)

"""CLI entrypoint for apdacl."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from apdacl.api.notifications_api import build_notification_envelope
from apdacl.config.loader import (
    DEFAULT_CONFIG_PATH,
    get_database_settings,
    get_logging_level,
    load_config,
)
from apdacl.database.pool import create_pool
from apdacl.database.queries import NotificationQueries
from apdacl.database.schema import create_all
from apdacl.errors import ConfigurationError
from apdacl.notifications.envelope import FailureEnvelope
from apdacl.users.models import Role, User
from apdacl.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def _load(args: argparse.Namespace) -> dict:
    config = load_config(args.config)
    configure_logging(args.log_level or get_logging_level(config))
    return config


async def _run_notifications(config: dict, user: User) -> tuple[int, dict]:
    engine = create_pool(get_database_settings(config))
    try:
        envelope = await build_notification_envelope(engine, user, NotificationQueries.from_config(config))
    finally:
        await engine.dispose()
    if isinstance(envelope, FailureEnvelope):
        return EXIT_FAILURE, envelope.to_json()
    return EXIT_OK, envelope.to_json()


def cmd_notifications(args: argparse.Namespace) -> int:
    """Print the notification envelope for one user."""
    config = _load(args)
    try:
        user = User(
            user_id=args.user_id,
            first_name=args.first_name,
            last_name=args.last_name,
            email_id=args.email,
            resource_server_url=args.resource_server_url,
            role=args.role,
        )
    except ValidationError as e:
        print(f"[apdacl] Invalid user: {e}", file=sys.stderr)
        return EXIT_CONFIG

    code, payload = asyncio.run(_run_notifications(config, user))
    print(json.dumps(payload, indent=2))
    return code


async def _init_db(config: dict) -> None:
    engine = create_pool(get_database_settings(config))
    try:
        await create_all(engine)
    finally:
        await engine.dispose()


def cmd_init_db(args: argparse.Namespace) -> int:
    """Create notification tables (development databases)."""
    config = _load(args)
    asyncio.run(_init_db(config))
    logger.info("Database tables created (if not already present).")
    return EXIT_OK


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Config file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Override logging.level from the config file",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="apdacl",
        description="Access-request notifications for consumers and providers",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    notifications_parser = subparsers.add_parser("notifications", help="Fetch notifications for a user")
    notifications_parser.add_argument("--user-id", type=str, required=True, help="UUID of the requesting user")
    notifications_parser.add_argument(
        "--role",
        type=str,
        required=True,
        help=f"Role of the user ({', '.join(role.value for role in Role)})",
    )
    notifications_parser.add_argument(
        "--resource-server-url",
        type=str,
        required=True,
        help="Resource server the notifications belong to",
    )
    notifications_parser.add_argument("--first-name", type=str, help="First name of the user")
    notifications_parser.add_argument("--last-name", type=str, help="Last name of the user")
    notifications_parser.add_argument("--email", type=str, help="Email of the user")
    _add_common_arguments(notifications_parser)
    notifications_parser.set_defaults(func=cmd_notifications)

    init_db_parser = subparsers.add_parser("init-db", help="Create the notification tables")
    _add_common_arguments(init_db_parser)
    init_db_parser.set_defaults(func=cmd_init_db)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    try:
        return args.func(args)
    except (ConfigurationError, FileNotFoundError) as e:
        hint = getattr(e, "hint", None)
        print(f"[apdacl] Configuration error: {e}" + (f" ({hint})" if hint else ""), file=sys.stderr)
        return EXIT_CONFIG
    except Exception as e:
        logger.error(f"Error running command '{args.command}': {e}", exc_info=True)
        raise


if __name__ == "__main__":
    sys.exit(main())

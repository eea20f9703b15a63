#!/usr/bin/env python3
"""
resetmail CLI

Inspect the mail transport and send a test password reset email using the
same bootstrap as the web application.
Usage: resetmail-cli [command] [args...]
"""

import argparse
import asyncio
import json
import secrets
import sys
from typing import List, Optional

from resetmail.config.logging import configure_logging
from resetmail.config.settings import get_settings
from resetmail.mail.configurator import configure
from resetmail.mail.dispatcher import PasswordResetDispatcher


async def status_command(args) -> int:
    """Configure the transport and print its status."""
    settings = get_settings()
    state = await configure(settings)
    print(state.describe().model_dump_json(indent=2))
    return 0 if state.is_ready else 1


async def send_test_command(args) -> int:
    """Dispatch one reset email and print the result."""
    settings = get_settings()
    state = await configure(settings)
    dispatcher = PasswordResetDispatcher(state, settings)

    token = args.token or secrets.token_urlsafe(32)
    result = await dispatcher.dispatch(
        args.recipient,
        token,
        {
            "person_name": args.name,
            "request_ip": args.ip,
            "user_agent": "resetmail-cli",
        },
    )
    print(json.dumps(result.model_dump(), indent=2, ensure_ascii=False))
    return 0 if result.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resetmail-cli",
        description="Password reset email delivery tools",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    parser.add_argument(
        "--log-format", choices=["json", "console"], default="console",
        help="Log output format (default: console)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    status_parser = subparsers.add_parser("status", help="Show mail transport status")
    status_parser.set_defaults(func=status_command)

    send_parser = subparsers.add_parser("send-test", help="Send a test reset email")
    send_parser.add_argument("recipient", help="Recipient email address")
    send_parser.add_argument("--token", help="Reset token (random when omitted)")
    send_parser.add_argument("--name", help="Person name for the greeting")
    send_parser.add_argument("--ip", help="Request IP recorded with the email")
    send_parser.set_defaults(func=send_test_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    # stdout carries command output; logs go to stderr
    configure_logging(args.log_level or settings.LOG_LEVEL, args.log_format, stream=sys.stderr)

    return asyncio.run(args.func(args))


if __name__ == "__main__":
    sys.exit(main())

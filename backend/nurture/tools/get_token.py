#!/usr/bin/env python3
"""
Session token helper for local testing.

Creates a Clerk session for a user, fetches its JWT and prints shell
commands to call the protected endpoints with it.

Usage:
    nurture-token user_2abc...
    nurture-token user_2abc... --expires-in 7200 --template default

Environment Variables:
    CLERK_SECRET_KEY: Clerk instance secret key
    PORT: Local API port used in the sample curl command
"""
import argparse
import asyncio
import logging
import sys
from typing import Optional

from nurture.config import Settings, get_settings
from nurture.core.logging_config import configure_logging
from nurture.services.clerk_client import ClerkClient, IdentityProviderError

logger = logging.getLogger("nurture.tools.get_token")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nurture-token",
        description="Create a Clerk session and print its JWT.",
    )
    parser.add_argument("user_id", help="Clerk user id (user_...)")
    parser.add_argument(
        "--expires-in",
        type=int,
        default=None,
        help="Session lifetime in seconds (default: SESSION_EXPIRES_IN_SECONDS)",
    )
    parser.add_argument(
        "--template",
        default=None,
        help="JWT template name (default: SESSION_TOKEN_TEMPLATE)",
    )
    return parser


async def issue_token(
    clerk: ClerkClient,
    user_id: str,
    expires_in: int,
    template: Optional[str],
) -> tuple[str, str]:
    """
    Create a session and fetch its token.

    Returns:
        (session id, JWT)
    """
    session = await clerk.create_session(user_id, expires_in)
    logger.info(f"Session created: {session['id']}")
    token = await clerk.create_session_token(session["id"], template)
    return session["id"], token


async def main(argv: Optional[list[str]] = None, settings: Optional[Settings] = None) -> int:
    """Entry point body; returns the process exit code."""
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    configure_logging(settings)

    clerk = ClerkClient(settings)
    try:
        _, token = await issue_token(
            clerk,
            args.user_id,
            args.expires_in or settings.session_expires_in_seconds,
            args.template or settings.session_token_template,
        )
    except IdentityProviderError as e:
        logger.error(f"Failed to get session token: {e.message}")
        return 1
    finally:
        await clerk.close()

    print(token)
    print()
    print(f'export TOKEN="{token}"')
    print(
        f'curl http://localhost:{settings.port}{settings.api_prefix}/auth/me '
        '-H "Authorization: Bearer $TOKEN"'
    )
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()

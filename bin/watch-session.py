"""Sign in and follow the provider session until interrupted.

Usage: uv run python bin/watch-session.py <email>

The password is read from the terminal. Every user/session change pushed by
the provider (sign in, token refresh, sign out) is logged. Ctrl-C signs out
and exits.
"""

import asyncio
import contextlib
import getpass
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

import structlog
from supabase_auth.errors import AuthError

from shared.auth.client import ClientAuth, SessionWatch, UserWatch
from shared.auth.provider import create_browser_client
from shared.auth.settings import AuthSettings
from shared.logging import setup_logging

logger = structlog.get_logger()


async def main() -> None:
    if len(sys.argv) != 2:
        print(f"Usage: {sys.argv[0]} <email>")
        sys.exit(1)

    setup_logging()
    email = sys.argv[1]
    password = getpass.getpass("Password: ")

    client = await create_browser_client(AuthSettings())  # type: ignore[call-arg]
    auth = client.auth
    try:
        await auth.sign_in_with_password({"email": email, "password": password})
    except AuthError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    stopped = asyncio.Event()
    client_auth = ClientAuth(
        auth,
        navigate=lambda path: logger.info("navigate", path=path),
        refresh=lambda: logger.info("session cleared"),
    )

    async with UserWatch(auth) as users, SessionWatch(auth) as sessions:
        users.state.subscribe(lambda user: logger.info("user changed", email=user.email if user else None))
        sessions.state.subscribe(
            lambda session: logger.info("session changed", expires_at=session.expires_at if session else None),
        )
        # signed out from elsewhere
        sessions.state.subscribe(lambda session: stopped.set() if session is None else None)
        logger.info(
            "watching session",
            email=users.state.value.email if users.state.value else None,
            expires_at=sessions.state.value.expires_at if sessions.state.value else None,
        )
        with contextlib.suppress(asyncio.CancelledError):
            await stopped.wait()

    await client_auth.sign_out()


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(main())

#!/usr/bin/env python3
"""
credstore Quickstart: full lifecycle in one script.

Signs up a user, logs in, shows what a wrong password looks like,
restarts the manager to prove the session persisted, then logs out.

Run with: python examples/quickstart.py

Requires: pip install -e .
Uses a throwaway JSON file in a temp directory, no Redis needed.
"""

import asyncio
import sys
import tempfile
from pathlib import Path

from credstore.auth.errors import AuthErrorKind
from credstore.services.auth_manager import AuthManager
from credstore.storage import JsonFileStore


async def main():
    path = Path(tempfile.mkdtemp()) / "store.json"

    # ── Sign up ───────────────────────────────────────────────────
    print("1. Signing up Ann...")
    async with AuthManager(JsonFileStore(str(path))) as auth:
        result = await auth.signup("Ann", "ann@x.com", "secret1")
        if not result.ok:
            print(f"   Failed: {result.error.message}")
            sys.exit(1)
        print(f"   Registered: {result.user.email} (logged in: {auth.current_user is not None})")

        # ── Log in ────────────────────────────────────────────────
        print("\n2. Logging in...")
        result = await auth.login("ann@x.com", "secret1")
        print(f"   Session: {auth.current_user.name} <{auth.current_user.email}>")

        # ── Wrong password ────────────────────────────────────────
        print("\n3. Trying a wrong password...")
        result = await auth.login("ann@x.com", "wrong")
        match result.error.kind:
            case AuthErrorKind.INVALID_CREDENTIALS:
                print(f"   Rejected: {result.error.message}")
            case _:
                print(f"   Unexpected: {result.error!r}")

    # ── Restart ───────────────────────────────────────────────────
    print("\n4. Restarting (new manager, same file)...")
    async with AuthManager(JsonFileStore(str(path))) as auth:
        print(f"   Restored session: {auth.current_user.email}")
        print(f"   Registered users: {len(auth.registered_users)}")

        # ── Log out ───────────────────────────────────────────────
        print("\n5. Logging out...")
        await auth.logout()
        print(f"   Session: {auth.current_user}")

    print(f"\nDone. Store file: {path}")


if __name__ == "__main__":
    asyncio.run(main())

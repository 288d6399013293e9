#!/usr/bin/env python3
"""
User management service -- server launcher and account administration CLI.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080
  python main.py exists ada@example.com
  python main.py delete 3f2b9c1e-8a4d-4d1b-9b7a-2c6e5f0a1d22

Environment variables:
  DATABASE_URL  SQLAlchemy URL of the accounts database.
  JWT_KEY       Token signing key (32+ chars). Required unless DEBUG=true.
  USER_CACHE_PATH  Lookup cache file, shared with the running API.
"""

import argparse
from typing import Optional

from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenIssuer
from cache.store import CachedUserStore, UserCache
from core.config import JwtConfig, get_settings


def _build_service() -> tuple[AuthService, list]:
    """Wire an AuthService onto the database, through the same cache file as the API.

    Returns the service and the resources the caller must close.
    """
    settings = get_settings()
    store = UserStore(settings.database_url)
    resources: list = [store]
    users = store
    if settings.user_cache_enabled:
        cache = UserCache(settings.user_cache_path, ttl=settings.user_cache_ttl_seconds)
        resources.append(cache)
        users = CachedUserStore(store, cache)
    return AuthService(users, TokenIssuer(JwtConfig.from_settings(settings))), resources


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="user-management",
        description="Run the user management API or administer accounts.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py serve --reload
  python main.py exists ada@example.com
  python main.py delete <user-id>
        """,
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    serve = commands.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")

    exists = commands.add_parser("exists", help="Report whether an account exists for an email")
    exists.add_argument("email", help="Exact, case-sensitive email address")

    delete = commands.add_parser("delete", help="Permanently delete an account by id")
    delete.add_argument("user_id", metavar="USER_ID", help="Account id (UUID)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "serve":
        import uvicorn

        uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)
        return 0

    service, resources = _build_service()
    try:
        if args.command == "exists":
            found = service.user_exists(args.email)
            print(f"  {args.email}: {'exists' if found else 'not found'}")
            return 0 if found else 1

        service.delete_user(args.user_id)
        print(f"  Deleted {args.user_id} (if it existed).")
        return 0
    finally:
        for resource in resources:
            resource.close()


if __name__ == "__main__":
    raise SystemExit(main())

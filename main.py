#!/usr/bin/env python3
"""
Session Auth service command line.

Runs the HTTP API and offers small store inspection commands.
"""

import argparse
import asyncio
import logging
import sys

from sessionauth.config import load_config
from sessionauth.services import create_auth_service


def cmd_serve(args) -> int:
    """Run the API with uvicorn."""
    import uvicorn

    config = load_config()
    host = args.host or config.host
    port = args.port or config.port

    print(f"Server running on http://{host}:{port}")
    print(f"API endpoints are prefixed with {config.api_prefix}")
    uvicorn.run("api.main:app", host=host, port=port, reload=args.reload)
    return 0


def cmd_users(args) -> int:
    """List stored users with their verification state."""
    service = create_auth_service()
    users = asyncio.run(service.list_users())

    if not users:
        print("No users registered.")
        return 0

    print(f"\nUsers ({len(users)}):")
    for i, user in enumerate(users, 1):
        verified = "✓ verified" if user.is_verified else "✗ unverified"
        print(f"  {i}. [{user.id}] {user.name} <{user.email}> {user.mobile} - {verified}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Credential and session-lifecycle service"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Bind address (default: HOST env or 0.0.0.0)")
    serve.add_argument("--port", type=int, help="Port (default: PORT env or 3000)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve.set_defaults(func=cmd_serve)

    users = subparsers.add_parser("users", help="List registered users")
    users.set_defaults(func=cmd_users)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

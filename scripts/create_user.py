#!/usr/bin/env python3
"""
Script to create a new user interactively.

Usage:
    python scripts/create_user.py --name "Ana" --email ana@example.com --mobile 5511999999999

    # Skip OTP verification (administrative bootstrap):
    python scripts/create_user.py --email admin@example.com --mobile 100 --verified
"""

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sessionauth.errors import AuthError
from sessionauth.services import create_auth_service


async def create(args, password: str):
    service = create_auth_service()
    if args.verified:
        return await service.create_user(
            name=args.name,
            email=args.email,
            mobile=args.mobile,
            password=password,
            is_verified=True
        )
    # Regular signup: OTP codes are written to the log
    return await service.signup(
        name=args.name,
        email=args.email,
        mobile=args.mobile,
        password=password
    )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create a new user")
    parser.add_argument("--name", "-n", help="User's name")
    parser.add_argument("--email", "-e", help="User's email")
    parser.add_argument("--mobile", "-m", help="User's mobile number")
    parser.add_argument("--password", "-p", help="Password (prompted when omitted)")
    parser.add_argument("--verified", action="store_true", help="Mark the account as verified (no OTP)")
    args = parser.parse_args(argv)

    args.name = args.name or input("Name: ").strip()
    args.email = args.email or input("Email: ").strip()
    args.mobile = args.mobile or input("Mobile: ").strip()

    if not (args.name and args.email and args.mobile):
        print("❌ Name, email and mobile are required!")
        return 1

    password = args.password
    if not password:
        password = getpass.getpass("Enter password: ")
        confirm = getpass.getpass("Confirm password: ")

        if password != confirm:
            print("❌ Passwords do not match!")
            return 1

    if not password:
        print("❌ Password is required!")
        return 1

    try:
        user = asyncio.run(create(args, password))
    except AuthError as e:
        print(f"❌ Failed to create user: {e.message}")
        return 1

    print()
    print("✅ User created successfully!")
    print(f"   User ID: {user.id}")
    print(f"   Name: {user.name}")
    print(f"   Email: {user.email}")
    print(f"   Mobile: {user.mobile}")
    print(f"   Verified: {'Yes' if user.is_verified else 'No (check the log for OTP codes)'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

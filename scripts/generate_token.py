#!/usr/bin/env python3
"""
Development JWT generator for the EquipTrack API

Usage:
  JWT_SECRET_KEY=... python scripts/generate_token.py --company-id <uuid>
  JWT_SECRET_KEY=... python scripts/generate_token.py --role admin
"""

import argparse
import os
import sys
import uuid
from datetime import datetime, timedelta, timezone

from jose import jwt


def generate_token(role: str, company_id: str, username: str, hours: int) -> str:
    """Generate a token carrying the claims the API checks"""
    jwt_secret = os.getenv('JWT_SECRET_KEY')
    if not jwt_secret:
        print("ERROR: JWT_SECRET_KEY environment variable not set", file=sys.stderr)
        sys.exit(1)

    now = datetime.now(timezone.utc)
    exp = now + timedelta(hours=hours)

    payload = {
        "sub": username,
        "user_id": str(uuid.uuid4()),
        "role": role,
        "jti": str(uuid.uuid4()),
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    if company_id:
        payload["company_id"] = str(uuid.UUID(company_id))

    token = jwt.encode(payload, jwt_secret, algorithm="HS256")

    print("Token Details:")
    print(f"  User:       {payload['sub']}")
    print(f"  Role:       {role}")
    print(f"  Company:    {payload.get('company_id', '(all - admin)')}")
    print(f"  Expires:    {exp.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    print()
    print(token)
    print()
    print("Usage:")
    print('  curl -H "Authorization: Bearer ' + token + '" http://localhost:5000/api/engineers')

    return token


def main():
    parser = argparse.ArgumentParser(description="Generate a development JWT for EquipTrack")
    parser.add_argument("--role", default="user", help="user, engineer, customer or admin")
    parser.add_argument("--company-id", default="", help="Company UUID (omit for admins)")
    parser.add_argument("--username", default="dev-user")
    parser.add_argument("--hours", type=int, default=24)
    args = parser.parse_args()

    if args.role != "admin" and not args.company_id:
        parser.error("--company-id is required unless --role admin")

    generate_token(args.role, args.company_id, args.username, args.hours)


if __name__ == "__main__":
    main()

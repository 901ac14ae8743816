"""Utility script to issue an access token for local development."""

from __future__ import annotations

import argparse
from datetime import timedelta

from roster_activity.domain.entities import Identity
from roster_activity.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for token creation."""

    parser = argparse.ArgumentParser(
        description="Issue a signed access token for the Roster Activity API.",
    )
    parser.add_argument("owner_id", help="Identifier of the user the token belongs to")
    parser.add_argument(
        "--team",
        default=None,
        help="Team scope used for the activity history (optional)",
    )
    parser.add_argument("--name", default=None, help="Display name (optional)")
    parser.add_argument(
        "--minutes",
        type=int,
        default=None,
        help="Token lifetime in minutes (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.minutes is not None and args.minutes <= 0:
        raise SystemExit("The token lifetime must be positive.")

    identity = Identity(owner_id=args.owner_id, scope=args.team, display_name=args.name)
    expires = timedelta(minutes=args.minutes) if args.minutes else None
    print(create_access_token(identity, expires))


if __name__ == "__main__":
    main()

"""
Seed Roles — assign staff / boss / system_admin to user ids.

Usage:
    python scripts/seed_roles.py                                 # demo users, development DB
    python scripts/seed_roles.py --env production \
        --assign alice:staff --assign carol:boss --assign ops:system_admin

This script is idempotent — safe to run multiple times. Re-running with a
different role for an existing user replaces that user's role.
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from app.core.exceptions import ValidationError
from app.models.parts import ROLES, UserRoleRecord
from app.services.role_service import assign_role


# Default demo assignments for local development
DEMO_ASSIGNMENTS = [
    ("staff-1", "staff"),
    ("staff-2", "staff"),
    ("boss-1", "boss"),
    ("admin-1", "system_admin"),
]


def parse_assignment(raw: str) -> tuple[str, str]:
    """``"alice:staff"`` → ``("alice", "staff")``."""
    if ":" not in raw:
        raise argparse.ArgumentTypeError(f"expected <user_id>:<role>, got '{raw}'")
    user_id, role = raw.rsplit(":", 1)
    if role not in ROLES:
        raise argparse.ArgumentTypeError(f"role must be one of: {', '.join(ROLES)}")
    return user_id.strip(), role


def seed(assignments) -> int:
    """Apply assignments; return the number that failed."""
    failures = 0
    for user_id, role in assignments:
        try:
            result = assign_role(user_id, role)
            print(f"  {result['user_id']:24s} → {result['role']}")
        except ValidationError as exc:
            failures += 1
            print(f"  {user_id:24s} ✗ {exc}")
    return failures


def main():
    parser = argparse.ArgumentParser(description="Seed user role records")
    parser.add_argument("--env", default="development", help="App environment")
    parser.add_argument(
        "--assign", action="append", type=parse_assignment, default=[],
        metavar="USER_ID:ROLE", help="Role assignment (repeatable)",
    )
    args = parser.parse_args()

    os.environ.setdefault("APP_ENV", args.env)
    app = create_app(args.env)

    assignments = args.assign or DEMO_ASSIGNMENTS

    with app.app_context():
        print("=" * 60)
        print("  SEED: User Roles")
        print("=" * 60)

        failures = seed(assignments)

        print("\n" + "=" * 60)
        print(f"  Role records: {UserRoleRecord.query.count()}")
        print("=" * 60)

    if failures:
        print(f"\n⚠ {failures} assignment(s) failed")
        sys.exit(1)
    print("\n✅ Seed complete!")


if __name__ == "__main__":
    main()

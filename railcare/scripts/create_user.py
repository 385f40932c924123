"""
Create a user (e.g. the first SuperAdmin). Run from project root:
  python -m railcare.scripts.create_user EMAIL NAME PASSWORD [role] [--station CODE]
Example:
  python -m railcare.scripts.create_user admin@railway.com "Super Admin" your-secure-password SuperAdmin
"""
import argparse
import sys

from railcare.core.database import SessionLocal
from railcare.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
)
from railcare.models import Station, User
from railcare.schemas.common import PUBLIC, ROLES, STATION_BOUND_ROLES


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a RailCare user account.")
    parser.add_argument("email", help="Login e-mail (stored lower-case)")
    parser.add_argument("name", help=f"Display name ({NAME_MIN_LEN}-{NAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default=PUBLIC, choices=ROLES)
    parser.add_argument("--station", help="Station code; required for StationManager and Staff")
    args = parser.parse_args()

    email = args.email.strip().lower()
    name = args.name.strip()
    if "@" not in email:
        print("Invalid e-mail address.", file=sys.stderr)
        return 1
    if not NAME_MIN_LEN <= len(name) <= NAME_MAX_LEN:
        print(f"Name must be {NAME_MIN_LEN}-{NAME_MAX_LEN} characters.", file=sys.stderr)
        return 1
    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1
    if args.role in STATION_BOUND_ROLES and not args.station:
        print(f"--station is required for role {args.role}.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == email).first():
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        station_id = None
        if args.station:
            station = (
                db.query(Station).filter(Station.code == args.station.strip().upper()).first()
            )
            if station is None:
                print(f"Station '{args.station}' not found.", file=sys.stderr)
                return 1
            station_id = station.id
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(args.password),
            role=args.role,
            station_id=station_id,
        )
        db.add(user)
        db.commit()
        print(f"Created user '{email}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

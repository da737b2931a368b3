"""
Create a user (e.g. the first admin). Run from project root:
  python -m acquisitions.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m acquisitions.scripts.create_user "Site Admin" admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from acquisitions.core.config import get_settings
from acquisitions.core.database import SessionLocal
from acquisitions.core.exceptions import DuplicateEmailError
from acquisitions.core.logging_config import configure_logging
from acquisitions.core.security import PasswordHasher
from acquisitions.schemas.auth import SignUpRequest
from acquisitions.services.identity import IdentityService
from acquisitions.services.user_store import UserStore

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an Acquisitions user.")
    parser.add_argument("name", help="Display name (2-255 chars)")
    parser.add_argument("email", help="Email address (sign-in key)")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    try:
        request = SignUpRequest(
            name=args.name, email=args.email, password=args.password, role=args.role
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"]) or "input"
            print(f"Invalid {field}: {err['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        identity = IdentityService(UserStore(db), PasswordHasher.from_settings(settings))
        user = identity.register(request.name, request.email, request.password, request.role)
    except DuplicateEmailError:
        print(f"User '{request.email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Created user '{user.email}' (id {user.id}) with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

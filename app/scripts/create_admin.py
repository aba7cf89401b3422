"""
Create an admin user, or promote an existing one. Run from project root:
  python -m app.scripts.create_admin USERNAME EMAIL PASSWORD [--update]
Example:
  python -m app.scripts.create_admin admin admin@example.com your-secure-password
With --update, an existing user matching EMAIL or USERNAME gets the new
password and the admin role instead of failing.
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import create_db_engine, create_session_factory
from app.core.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    NotFoundError,
)
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, USERNAME_MAX_LEN
from app.models import Base
from app.schemas.auth import check_email_address
from app.services.auth import AuthService


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Sweet Shop admin (no registration UI for admins).")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "--update",
        action="store_true",
        help="Promote an existing user matching email or username instead of failing.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    try:
        email = check_email_address(args.email)
    except ValueError:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    settings = get_settings()
    engine = create_db_engine(settings)
    try:
        Base.metadata.create_all(bind=engine)
        auth = AuthService(create_session_factory(engine), settings)
        try:
            if args.update:
                user = auth.promote_to_admin(username, email, args.password)
                print(f"User '{user.username}' updated to admin.")
            else:
                user = auth.create_admin(username, email, args.password)
                print(f"Created admin '{user.username}' <{user.email}>.")
        except (DuplicateEmailError, DuplicateUsernameError) as e:
            print(f"{e.message}. Re-run with --update to promote that user.", file=sys.stderr)
            return 1
        except NotFoundError:
            print("No user matches that email or username.", file=sys.stderr)
            return 1
        return 0
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())

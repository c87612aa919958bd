"""Create a user directly in the configured database.

Usage:
  python scripts/create_user.py --name "Jane Admin" --email jane@example.com --role admin
"""

import argparse
import getpass

from devcamper.application.services.user_admin_service import UserAdminService
from devcamper.core.config import Settings
from devcamper.domain.models import Role
from devcamper.infrastructure.persistence.sqlite import SQLitePersistence
from devcamper.services.passwords import PasswordHasher


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--name", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--role", choices=[role.value for role in Role], default=Role.USER.value)
    args = parser.parse_args()

    password = getpass.getpass("Password: ").strip()
    if len(password) < 6:
        raise SystemExit("Password must be at least 6 characters.")

    settings = Settings()
    persistence = SQLitePersistence(settings.database_path)
    try:
        service = UserAdminService(persistence, PasswordHasher(rounds=settings.bcrypt_rounds))
        user = service.create_user(args.name, args.email, password, Role(args.role))
    finally:
        persistence.close()
    print("Created user:", user)


if __name__ == "__main__":
    main()

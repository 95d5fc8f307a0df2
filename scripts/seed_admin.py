"""Seed or reset the administrator account from ADMIN_EMAIL / ADMIN_PASSWORD."""

from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app
from utils.bootstrap import ensure_admin


def main() -> None:
    app = create_app()
    with app.app_context():
        email = app.config.get("ADMIN_EMAIL")
        password = app.config.get("ADMIN_PASSWORD")
        if not email or not password:
            sys.exit("ADMIN_EMAIL and ADMIN_PASSWORD must be set.")
        admin, action = ensure_admin(email, password)
        print(f"Admin user {action}: {admin.email}")


if __name__ == "__main__":
    main()

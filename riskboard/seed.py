import logging
import os

from riskboard.core.security import hash_password
from riskboard.db import registry  # noqa: F401
from riskboard.db.session import SessionLocal
from riskboard.models.user import User
from riskboard.repositories.users import UserRepository

log = logging.getLogger(__name__)


def main():
    email = os.environ.get("SEED_ADMIN_EMAIL", "admin@riskboard.local").strip().lower()
    password = os.environ.get("SEED_ADMIN_PASS", "admin123")
    name = os.environ.get("SEED_ADMIN_NAME", "Administrator")

    db = SessionLocal()
    try:
        users = UserRepository(db)
        if users.by_email(email):
            log.info("admin %s already present", email)
            return
        users.add(User(email=email, name=name, password_hash=hash_password(password), role="admin", status="active"))
        log.info("seeded admin %s", email)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()

"""
Script to create (or reset the password of) an admin panel account.

Usage:
    python scripts/create_admin.py admin@example.com
    ADMIN_PASSWORD=... python scripts/create_admin.py admin@example.com

The password is read from ADMIN_PASSWORD or prompted for. Only the PBKDF2
hash is stored.
"""
import getpass
import os
import sys

# Add the parent directory to the path so we can import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.admin.models import AdminAccount
from app.core.security import hash_password
from app.db.base import Base, engine
from app.db.session import SessionLocal


def create_admin(email: str, password: str) -> bool:
    """Create the admin account, or replace its password if it exists."""
    Base.metadata.create_all(bind=engine, tables=[AdminAccount.__table__])
    db = SessionLocal()

    try:
        email = email.strip().lower()
        admin = db.query(AdminAccount).filter(AdminAccount.email == email).first()

        if admin:
            admin.password_hash = hash_password(password)
            action = "password reset"
        else:
            db.add(AdminAccount(email=email, password_hash=hash_password(password)))
            action = "created"

        db.commit()
        print(f"SUCCESS: Admin '{email}' {action}.")
        return True

    except Exception as e:
        db.rollback()
        print(f"ERROR: Failed to create admin: {str(e)}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/create_admin.py <email>")
        sys.exit(2)

    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Admin password: ")
    if len(password) < 8:
        print("ERROR: Password must be at least 8 characters.")
        sys.exit(2)

    print("-" * 50)
    if not create_admin(sys.argv[1], password):
        sys.exit(1)

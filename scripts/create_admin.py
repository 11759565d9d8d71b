"""Create (or promote) an admin account from the command line.

Usage: python scripts/create_admin.py <email> <password> [username] [phone]
"""

import sys
import os

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.application.services.auth_service import create_user
from app.domain.models.user import ROLE_ADMIN, User
from app.infrastructure.database import Base, SessionLocal, engine
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def create_admin(email: str, password: str, user_name: str, phone: str):
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        repo = SQLAlchemyUserRepository(db, User)
        existing = repo.get_by_email(email)
        if existing:
            if existing.role == ROLE_ADMIN:
                print(f"{email} is already an admin.")
                return
            repo.update(existing, {"role": ROLE_ADMIN, "kyc_verified": True})
            print(f"Promoted {email} to admin.")
            return

        create_user(
            repo,
            full_name="Administrator",
            user_name=user_name,
            email=email,
            password=password,
            phone=phone,
            kyc_card="-",
            role=ROLE_ADMIN,
        )
        print(f"Admin {email} created.")
    except Exception as e:
        print(f"Admin creation failed: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)
    email, password = sys.argv[1], sys.argv[2]
    user_name = sys.argv[3] if len(sys.argv) > 3 else email.split("@")[0]
    phone = sys.argv[4] if len(sys.argv) > 4 else "0000000000"
    create_admin(email, password, user_name, phone)

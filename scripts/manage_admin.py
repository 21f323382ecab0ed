"""
Create, deactivate or reactivate an admin account.

Run:
    python -m scripts.manage_admin create admin@example.com "Ops Admin" secret1 --role superadmin
    python -m scripts.manage_admin deactivate admin@example.com
    python -m scripts.manage_admin activate admin@example.com
"""
import argparse
import logging
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from jobboard.core.errors import JobBoardError
from jobboard.db.init_db import init_db
from jobboard.db.session import SessionLocal
from jobboard.services import principal_service
from jobboard.services.principal_service import ADMIN

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_admin(email: str, name: str, password: str, role: str = "admin") -> bool:
    db = SessionLocal()
    try:
        admin = principal_service.register(db, ADMIN, name, email, password, role=role)
        logger.info(f"Created {admin.role} {admin.email} (ID: {admin.id})")
        return True
    except JobBoardError as e:
        db.rollback()
        logger.error(f"Could not create admin {email}: {e.message}")
        return False
    finally:
        db.close()


def set_admin_active(email: str, active: bool) -> bool:
    db = SessionLocal()
    try:
        admin = principal_service.find_by_email(db, ADMIN, email)
        if not admin:
            logger.error(f"Admin {email} not found")
            return False

        admin.is_active = active
        db.commit()
        logger.info(f"Admin {admin.email} is now {'active' if active else 'deactivated'}")
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating admin {email}: {e}", exc_info=True)
        return False
    finally:
        db.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Manage job board admin accounts")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create")
    create.add_argument("email")
    create.add_argument("name")
    create.add_argument("password")
    create.add_argument("--role", default="admin", choices=["admin", "superadmin"])

    for command in ("activate", "deactivate"):
        toggle = sub.add_parser(command)
        toggle.add_argument("email")

    args = parser.parse_args(argv)
    init_db()

    if args.command == "create":
        ok = create_admin(args.email, args.name, args.password, args.role)
    else:
        ok = set_admin_active(args.email, args.command == "activate")

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())

"""
Seed Users Script
Creates one demo account per role through the Supabase admin API and
upserts the matching profiles. Safe to run repeatedly.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config.roles_config import Role
from app.database.supabase_client import get_supabase
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "password"

SEED_USERS = [
    {"email": "ivan@admin.local", "full_name": "Иван Иванов", "role": Role.OWNER, "two_factor_enabled": False},
    {"email": "elena@frontend.local", "full_name": "Елена Петрова", "role": Role.FRONTEND, "two_factor_enabled": True},
    {"email": "petar@backend.local", "full_name": "Петър Георгиев", "role": Role.BACKEND, "two_factor_enabled": False},
    {"email": "maria@pm.local", "full_name": "Мария Стоянова", "role": Role.PM, "two_factor_enabled": False},
    {"email": "georgi@qa.local", "full_name": "Георги Николов", "role": Role.QA, "two_factor_enabled": False},
    {"email": "ana@design.local", "full_name": "Ана Димитрова", "role": Role.DESIGNER, "two_factor_enabled": False},
]


def existing_auth_users(supabase: Client) -> dict:
    """Map of email -> auth user id for accounts that already exist"""
    users = supabase.auth.admin.list_users()
    return {u.email.lower(): u.id for u in users if getattr(u, "email", None)}


def ensure_auth_user(supabase: Client, seed: dict, known: dict) -> str:
    email = seed["email"]
    if email in known:
        logger.debug(f"Auth user exists: {email}")
        return known[email]

    response = supabase.auth.admin.create_user({
        "email": email,
        "password": DEFAULT_PASSWORD,
        "email_confirm": True,
        "user_metadata": {"full_name": seed["full_name"], "role": seed["role"].value},
    })
    logger.info(f"Created auth user: {email}")
    return response.user.id


def upsert_profile(supabase: Client, user_id: str, seed: dict):
    supabase.table("profiles").upsert({
        "id": user_id,
        "email": seed["email"],
        "full_name": seed["full_name"],
        "role": seed["role"].value,
        "two_factor_enabled": seed["two_factor_enabled"],
    }, on_conflict="id").execute()


def seed_users(supabase: Client) -> int:
    """Create missing accounts and bring every seed profile in line"""
    logger.info("Seeding users...")
    known = existing_auth_users(supabase)
    processed = 0

    for seed in SEED_USERS:
        try:
            user_id = ensure_auth_user(supabase, seed, known)
            upsert_profile(supabase, user_id, seed)
            processed += 1
        except Exception as e:
            logger.error(f"Error seeding user {seed['email']}: {e}")

    logger.info(f"Users seeded: {processed}/{len(SEED_USERS)}")
    return processed


def main():
    """Main function to seed demo users"""
    try:
        supabase = get_supabase()
        count = seed_users(supabase)
        if count < len(SEED_USERS):
            sys.exit(1)
        logger.info("Seeding completed successfully!")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

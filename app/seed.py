"""Demo data created on startup: an admin account and a sample challenge."""
import logging
from datetime import timedelta

from passlib.hash import bcrypt

from app.storage import Storage
from app.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

ADMIN_USERNAME = "admin"


async def seed_demo_data(storage: Storage, admin_password: str) -> None:
    """Idempotent: existing admin/challenges are left alone."""
    admin = await storage.get_user_by_username(ADMIN_USERNAME)
    if not admin:
        admin = await storage.create_user({
            "username": ADMIN_USERNAME,
            "password": bcrypt.hash(admin_password),
            "full_name": "Admin User",
            "email": "admin@pencraft.com",
            "bio": "Site administrator",
            "is_admin": True,
        })
        logger.info("Seeded admin user (id=%s)", admin.id)
    elif not admin.is_admin:
        await storage.update_user(admin.id, {"is_admin": True})

    if not await storage.get_all_challenges():
        challenge = await storage.create_challenge({
            "title": "The Future of Humanity",
            "description": (
                "Write a short story or essay about how you envision the future "
                "of humanity in the next 100 years."
            ),
            "end_date": utcnow() + timedelta(days=4),
            "word_limit": "1000-2500",
        })
        logger.info("Seeded sample challenge (id=%s)", challenge.id)

    await storage.commit()

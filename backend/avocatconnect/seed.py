# seed script — creates the practice's lawyer and a few clients in mongodb
# run once: python -m avocatconnect.seed (from backend/)

import asyncio
import logging
import os
from datetime import datetime, timezone

from avocatconnect.services.db import db
from avocatconnect.services.auth_service import hash_password
from avocatconnect.models.user import default_avatar

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

# seed password from env
DEFAULT_PASSWORD = os.getenv("SEED_PASSWORD")

LAWYER = {
    "name": "Maître Dupont",
    "email": "avocat@avocatconnect.fr",
    "title": "Avocat",
    "specialty": "Droit Général",
    "phone": "01 23 45 67 89",
}

CLIENTS = [
    {"name": "Jean Martin", "email": "jean.martin@example.com", "phone": "06 11 22 33 44", "address": "12 rue de la Paix, Paris"},
    {"name": "Sophie Bernard", "email": "sophie.bernard@example.com", "phone": "06 22 33 44 55", "address": "4 place Bellecour, Lyon"},
    {"name": "Luc Petit", "email": "luc.petit@example.com", "phone": "06 33 44 55 66", "address": "8 quai du Port, Marseille"},
]


async def _ensure_account(collection, profile: dict, hashed_pw: str) -> str:
    existing = await collection.find_one({"email": profile["email"]})
    if existing:
        logger.info(f"Account already exists: {profile['email']} (id: {existing['_id']})")
        return str(existing["_id"])

    doc = {
        **profile,
        "avatar": default_avatar(profile["name"]),
        "hashed_password": hashed_pw,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    result = await collection.insert_one(doc)
    logger.info(f"Created {profile['name']} (id: {result.inserted_id})")
    return str(result.inserted_id)


async def seed():
    """create the lawyer + clients, skips existing emails"""
    if not DEFAULT_PASSWORD:
        raise SystemExit("SEED_PASSWORD must be set")

    await db.connect()
    await db.ensure_indexes()
    hashed_pw = hash_password(DEFAULT_PASSWORD)

    lawyer_id = await _ensure_account(db.lawyers, LAWYER, hashed_pw)
    for client in CLIENTS:
        await _ensure_account(db.clients, client, hashed_pw)

    logger.info(f"Seed complete. Set LAWYER_ID={lawyer_id} in .env")
    await db.close()


if __name__ == "__main__":
    asyncio.run(seed())

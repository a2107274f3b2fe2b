"""
Bootstrap: default booking settings and an initial resource set.

Run from backend/:  python init_resources.py
Idempotent: existing resources (same name + location) are left alone.
"""

import logging
import os

from app.database import SessionLocal, init_db
from app.models.generated import Resources
from app.services.slots import SettingsRepository

logger = logging.getLogger("init_resources")


# ======================================================
# DEFAULT RESOURCES
# ======================================================

DEFAULT_RESOURCES = [
    {"name": "Washer 1", "type": "laundry", "location": os.getenv("LAUNDRY_LOCATION", "Block A basement")},
    {"name": "Washer 2", "type": "laundry", "location": os.getenv("LAUNDRY_LOCATION", "Block A basement")},
    {"name": "Study Room 1", "type": "study_room", "location": "Library, 2nd floor"},
    {"name": "Tennis Court", "type": "sports", "location": "Sports complex"},
]


# ======================================================
# MAIN LOGIC
# ======================================================

def seed(db, resources: list[dict] = DEFAULT_RESOURCES) -> int:
    """Create settings row and missing resources. Returns number created."""
    policy = SettingsRepository(db).get()

    created = 0
    for data in resources:
        if not policy.find_type(data["type"]):
            logger.warning(f"[BOOTSTRAP] Skipping {data['name']}: unknown type {data['type']}")
            continue

        exists = (
            db.query(Resources)
            .filter(Resources.name == data["name"], Resources.location == data["location"])
            .first()
        )
        if exists:
            continue

        db.add(Resources(**data))
        created += 1

    db.commit()
    return created


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    init_db()

    db = SessionLocal()
    try:
        created = seed(db)
    finally:
        db.close()

    if created:
        logger.info(f"[BOOTSTRAP] {created} resource(s) created")
    else:
        logger.info("[BOOTSTRAP] Resources already exist, nothing to do")


# ======================================================
# ENTRYPOINT
# ======================================================

if __name__ == "__main__":
    main()

"""Seed pipeline stages and the initial admin account for the storefront."""
import logging

from storefront import config
from storefront.database import SessionLocal, get_engine, init_db, transaction
from storefront.models import PipelineStage
from storefront.services.admin import create_admin

logger = logging.getLogger("storefront.seed")


def seed_stages(db, stages=config.PIPELINE_STAGES):
    """Insert any missing stages; existing ones are left untouched."""
    created = 0
    with transaction(db, 'seeding pipeline stages'):
        for stage_id, section_name in stages:
            if db.get(PipelineStage, stage_id) is None:
                db.add(PipelineStage(id=stage_id, section_name=section_name))
                created += 1
    logger.info(f"✓ Seeded {created} pipeline stages ({len(stages) - created} already present)")
    return created


def seed_admin(db, name=config.ADMIN_NAME, password=config.ADMIN_PASSWORD):
    """Create the admin account. Requires ADMIN_PASSWORD to be set."""
    if not password:
        raise ValueError("ADMIN_PASSWORD environment variable is required to seed the admin account")
    user = create_admin(db, name, password)
    logger.info(f"✓ Admin account '{user.name}' ready")
    return user


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    # Create tables if they don't exist
    init_db(get_engine())

    db = SessionLocal()
    try:
        seed_stages(db)
        seed_admin(db)
    finally:
        db.close()


if __name__ == '__main__':
    main()

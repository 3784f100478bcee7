# File: gearshare/services/gear_service.py

import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from gearshare.models.gear import Gear
from gearshare.models.user import User
from gearshare.schemas.gear import GearCreate

logger = logging.getLogger(__name__)


def list_gear(db: Session, query: str | None = None) -> list[Gear]:
    """
    All listings, newest first. ``query`` filters on name or description
    (case-insensitive substring), as typed into the search bar.
    """
    stmt = select(Gear)
    if query and query.strip():
        pattern = f"%{query.strip()}%"
        stmt = stmt.where(or_(Gear.name.ilike(pattern), Gear.description.ilike(pattern)))
    stmt = stmt.order_by(Gear.created_at.desc(), Gear.id)
    return list(db.scalars(stmt))


def get_gear(db: Session, gear_id: str) -> Gear | None:
    return db.get(Gear, gear_id)


def create_gear(db: Session, owner: User, payload: GearCreate) -> Gear:
    gear = Gear(owner_id=owner.id, **payload.model_dump())
    db.add(gear)
    db.commit()
    db.refresh(gear)

    logger.info("User %s listed gear %s (%s)", owner.id, gear.id, gear.name)
    return gear

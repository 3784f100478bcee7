# File: gearshare/api/v1/routes_gear.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gearshare.api.deps import get_db, require_complete_profile
from gearshare.models.user import User
from gearshare.schemas.gear import GearCreate, GearRead
from gearshare.services import gear_service

router = APIRouter()


@router.get("/", response_model=list[GearRead], summary="List gear")
def list_gear(
    q: Optional[str] = Query(default=None, max_length=200, description="Search name/description"),
    db: Session = Depends(get_db),
):
    return gear_service.list_gear(db, q)


@router.get("/{gear_id}", response_model=Optional[GearRead], summary="Get gear by id, or null")
def get_gear(gear_id: str, db: Session = Depends(get_db)):
    return gear_service.get_gear(db, gear_id)


@router.post(
    "/",
    response_model=GearRead,
    status_code=status.HTTP_201_CREATED,
    summary="Lend an item",
)
def create_gear(
    payload: GearCreate,
    owner: User = Depends(require_complete_profile),
    db: Session = Depends(get_db),
):
    return gear_service.create_gear(db, owner, payload)

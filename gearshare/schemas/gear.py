# File: gearshare/schemas/gear.py

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class GearBase(BaseModel):
    name: str
    description: str = ""
    price_per_day: Decimal
    image_url: Optional[str] = None


class GearCreate(GearBase):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=2000)
    price_per_day: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(default=None, max_length=1024)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Item name is required.")
        return v


class GearRead(GearBase):
    id: str
    owner_id: str
    created_at: datetime

    class Config:
        from_attributes = True

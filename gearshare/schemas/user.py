# File: gearshare/schemas/user.py

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

from gearshare.core import validators


def _check_name(value: str) -> str:
    value = value.strip()
    if len(value) < validators.NAME_MIN_LENGTH:
        raise ValueError("Name must be at least 2 characters long.")
    if len(value) > validators.NAME_MAX_LENGTH:
        raise ValueError("Name cannot exceed 50 characters.")
    return value


class UserBase(BaseModel):
    email: EmailStr


class SignupRequest(UserBase):
    password: str
    name: str
    birthday: Optional[date] = None
    phone_number: Optional[str] = None

    @field_validator("password")
    @classmethod
    def check_password_length(cls, v: str) -> str:
        if len(v) < validators.PASSWORD_MIN_LENGTH:
            raise ValueError("Password must be at least 8 characters long.")
        if len(v) > validators.PASSWORD_MAX_LENGTH:
            raise ValueError("Password cannot exceed 100 characters.")
        if len(v.encode("utf-8")) > validators.PASSWORD_MAX_BYTES:
            raise ValueError("Password is too long.")
        return v

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("birthday")
    @classmethod
    def check_birthday(cls, v: Optional[date]) -> Optional[date]:
        return validators.validate_birthday(v)

    @field_validator("phone_number")
    @classmethod
    def check_phone_number(cls, v: Optional[str]) -> Optional[str]:
        return validators.normalize_us_phone_number(v)


class LoginRequest(UserBase):
    password: str

    @field_validator("password")
    @classmethod
    def check_password_present(cls, v: str) -> str:
        if not v:
            raise ValueError("Password cannot be empty.")
        return v


class UserRead(UserBase):
    id: str
    name: Optional[str] = None
    birthday: Optional[date] = None
    phone_number: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SignupResponse(BaseModel):
    message: str = "Account created successfully!"
    user: UserRead


class PublicProfile(UserRead):
    image: Optional[str] = None


class ProfileUpdate(BaseModel):
    """
    Partial profile update. Only fields present in the payload are applied;
    an explicit null phone number removes it.
    """

    name: Optional[str] = None
    birthday: Optional[date] = None
    phone_number: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: Optional[str]) -> Optional[str]:
        return _check_name(v) if v is not None else None

    @field_validator("birthday")
    @classmethod
    def check_birthday(cls, v: Optional[date]) -> Optional[date]:
        return validators.validate_birthday(v)

    @field_validator("phone_number")
    @classmethod
    def check_phone_number(cls, v: Optional[str]) -> Optional[str]:
        return validators.normalize_us_phone_number(v)


class ProfileRead(BaseModel):
    id: str
    name: Optional[str] = None
    birthday: Optional[date] = None
    phone_number: Optional[str] = None
    profile_complete: bool

    class Config:
        from_attributes = True


class PasswordCheckRequest(BaseModel):
    password: str


class PasswordRequirement(BaseModel):
    label: str
    met: bool

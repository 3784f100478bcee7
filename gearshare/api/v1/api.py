# File: gearshare/api/v1/api.py

from fastapi import APIRouter

from gearshare.api.v1.routes_auth import router as auth_router
from gearshare.api.v1.routes_gear import router as gear_router
from gearshare.api.v1.routes_users import router as users_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(gear_router, prefix="/gear", tags=["gear"])

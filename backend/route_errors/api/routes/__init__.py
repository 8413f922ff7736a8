from fastapi import APIRouter

from . import internal, users

api_router = APIRouter()
api_router.include_router(users.router, prefix="/users", tags=["users"])

internal_router = APIRouter()
internal_router.include_router(internal.router, prefix="/internal", tags=["internal"])

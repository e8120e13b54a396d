from fastapi import APIRouter

from app.api.routers import group_requests, groups, passwords, sessions, users

api_router = APIRouter()

api_router.include_router(users.router)
api_router.include_router(sessions.router)
api_router.include_router(passwords.router)
api_router.include_router(groups.router)
api_router.include_router(group_requests.router)

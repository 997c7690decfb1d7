"""Version 1 of the HTTP API"""
from fastapi import APIRouter

from tasktracker.api.v1 import auth, projects, tasks

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(projects.router)
api_router.include_router(tasks.router)

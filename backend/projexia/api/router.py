from fastapi import APIRouter

from projexia.api.endpoints import auth, projects, tasks, comments

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(projects.router)
api_router.include_router(tasks.router)
api_router.include_router(comments.router)

"""teamsync API Router - aggregates all /api routes."""

from fastapi import APIRouter

from app.api import team_roles

# Everything under /api passes through AuthenticationMiddleware
api_router = APIRouter(prefix="/api")

api_router.include_router(team_roles.router)

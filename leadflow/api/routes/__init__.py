"""API routes."""

from fastapi import APIRouter

from leadflow.api.routes import email_dispatch

api_router = APIRouter()

api_router.include_router(email_dispatch.router, prefix="/email", tags=["email"])

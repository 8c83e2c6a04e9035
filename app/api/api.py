# app/api/api.py

from fastapi import APIRouter

from app.api.endpoints import annotations, documents, users

api_router = APIRouter()

api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(annotations.router, prefix="/annotations", tags=["Annotations"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])

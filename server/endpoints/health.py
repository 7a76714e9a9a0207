"""
Health check and service info endpoints.
"""
from datetime import datetime, timezone
from fastapi import APIRouter

import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION,
    }


@router.get("/")
async def root():
    return {
        "message": "X Post Publisher API",
        "version": settings.VERSION,
        "endpoints": {
            "health": "/health",
            "auth": "/api/x/auth/*",
            "post": "/api/x/post",
            "user": "/api/x/user",
        },
    }

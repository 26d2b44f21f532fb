"""
Admin Router Package - photographer endpoints

- auth.py - POST /admin/signup (public)
- galleries.py - gallery CRUD and photo upload (admin token)
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .galleries import router as galleries_router

router = APIRouter(prefix="/admin")

router.include_router(auth_router)
router.include_router(galleries_router)

# Export for main.py
__all__ = ["router"]

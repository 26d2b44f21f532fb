"""
Client Router Package

- accounts.py - POST /client/create (admin token; creates a client account)
- galleries.py - shared galleries and favorites (client token)
"""

from fastapi import APIRouter

from .accounts import router as accounts_router
from .galleries import router as galleries_router

router = APIRouter(prefix="/client")

router.include_router(accounts_router)
router.include_router(galleries_router)

__all__ = ["router"]

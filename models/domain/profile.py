"""
Admin and client profile documents.
"""

from typing import List, Optional
from datetime import datetime
from pydantic import Field

from models.domain.base import DocumentModel, utcnow


class AdminProfile(DocumentModel):
    """Photographer account, keyed by identity id."""

    id: str
    email: str
    name: Optional[str] = None
    business_name: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class ClientProfile(DocumentModel):
    """Viewer account created by an admin."""

    id: str
    email: str
    name: Optional[str] = None
    admin_id: str
    galleries: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

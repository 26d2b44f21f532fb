"""
Account request models.
"""

from typing import List, Optional
from pydantic import Field

from models.requests.common import RequestModel


class AdminSignupRequest(RequestModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    name: Optional[str] = None
    business_name: Optional[str] = None


class ClientCreateRequest(RequestModel):
    email: str = Field(..., min_length=3)
    name: Optional[str] = None
    galleries: List[str] = Field(default_factory=list, description="Gallery ids to record on the profile")

"""
Request DTOs - API input validation.
"""

from models.requests.common import RequestModel
from models.requests.accounts import AdminSignupRequest, ClientCreateRequest
from models.requests.galleries import GalleryCreate, GalleryUpdate

__all__ = [
    'RequestModel',
    'AdminSignupRequest',
    'ClientCreateRequest',
    'GalleryCreate',
    'GalleryUpdate',
]

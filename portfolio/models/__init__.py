# Import all models for Tortoise ORM registration
from .base import BaseModel
from .user import User
from .photo import Photo

__all__ = [
    "BaseModel",
    "User",
    "Photo",
]

# src/farmer_social/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .admin import Statistics, StatisticsResponse
from .comment import CommentCreate, CommentResponse, CommentThread, CommentUpdate
from .common import Envelope, ErrorResponse, MessageResponse, Pagination
from .notification import NotificationListResponse, NotificationResponse
from .post import ModerationRequest, PostCreate, PostResponse, PostUpdate
from .user import LoginRequest, RegisterRequest, UserResponse, UserSummary

__all__ = [
    "Statistics", "StatisticsResponse",
    "CommentCreate", "CommentResponse", "CommentThread", "CommentUpdate",
    "Envelope", "ErrorResponse", "MessageResponse", "Pagination",
    "NotificationListResponse", "NotificationResponse",
    "ModerationRequest", "PostCreate", "PostResponse", "PostUpdate",
    "LoginRequest", "RegisterRequest", "UserResponse", "UserSummary",
]

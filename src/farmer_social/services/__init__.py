"""Business services layered over the repositories."""

from .comment_service import CommentService
from .moderation import ModerationService
from .notification_service import NotificationService
from .statistics import collect_statistics
from .token_service import TokenService
from .user_service import UserService

__all__ = [
    "CommentService",
    "ModerationService",
    "NotificationService",
    "TokenService",
    "UserService",
    "collect_statistics",
]

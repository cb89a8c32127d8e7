"""Admin dashboard schemas."""

from pydantic import BaseModel

from .common import Envelope
from .post import PostResponse


class UserStatistics(BaseModel):
    total: int
    admin: int
    registered: int


class PostStatistics(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int


class Statistics(BaseModel):
    users: UserStatistics
    posts: PostStatistics
    recent_posts: list[PostResponse]


class StatisticsResponse(Envelope):
    statistics: Statistics

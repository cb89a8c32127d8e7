"""Set-membership toggling for like join tables."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute, Session

from farmer_social.models import CommentLike, PostLike

LikeModel = type[PostLike] | type[CommentLike]

__all__ = ["LikeResult", "toggle_like"]


@dataclass(frozen=True)
class LikeResult:
    action: Literal["liked", "unliked"]
    likes_count: int


def _target_column(model: LikeModel) -> InstrumentedAttribute[int]:
    return model.post_id if model is PostLike else model.comment_id  # type: ignore[union-attr]


def toggle_like(db: Session, model: LikeModel, target_id: int, user_id: int) -> LikeResult:
    """Remove the (target, user) row if present, otherwise insert it.

    The composite primary key makes a concurrent duplicate insert fail with
    ``IntegrityError``; that outcome means the like is already recorded.
    Does not commit.
    """
    target = _target_column(model)
    removed = db.execute(
        delete(model).where(target == target_id, model.user_id == user_id)
    ).rowcount

    if removed:
        action: Literal["liked", "unliked"] = "unliked"
    else:
        action = "liked"
        try:
            with db.begin_nested():
                db.add(model(**{target.key: target_id, "user_id": user_id}))
        except IntegrityError:
            pass

    likes_count = db.scalar(
        select(func.count()).select_from(model).where(target == target_id)
    ) or 0
    return LikeResult(action=action, likes_count=likes_count)

"""
Comment service: comments live under a post and every lookup is scoped
by ``post_id``.

Creation requires both the parent post and the author to be active; those
checks are not repeated on update or delete, which only verify that the
comment itself is active and owned by the caller.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from postit.exceptions import ForbiddenError, NotFoundError, ValidationError
from postit.models import Comment, Post, User
from postit.schemas import CommentCreate, CommentUpdate
from postit.services.soft_delete import (
    DeletionFilter,
    apply_deletion_filter,
    conditional_update,
    get_active,
    isoformat,
)
from postit.services.user_service import user_summary

logger = logging.getLogger(__name__)


def _comment_to_dict(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "content": comment.content,
        "userId": comment.user_id,
        "postId": comment.post_id,
        "createdAt": isoformat(comment.created_at),
        "updatedAt": isoformat(comment.updated_at),
        "deletedAt": isoformat(comment.deleted_at),
    }


async def _get_owned_or_raise(
    db: AsyncSession, post_id: int, comment_id: int, user_id: int | None, action: str
) -> Comment:
    comment = await get_active(db, Comment, comment_id, Comment.post_id == post_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    if comment.user_id != user_id:
        raise ForbiddenError(f"You can only {action} your own comments")
    return comment


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_comments(
    db: AsyncSession,
    post_id: int,
    deletion_filter: DeletionFilter = DeletionFilter.ACTIVE,
) -> list[dict]:
    """
    Return the comments under *post_id*, oldest first.

    The post itself is not checked: an unknown or deleted post simply has
    no matching comments (or only deleted ones).
    """
    q = (
        apply_deletion_filter(select(Comment), Comment, deletion_filter)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at, Comment.id)
    )
    result = await db.execute(q)
    return [_comment_to_dict(c) for c in result.scalars().all()]


async def get_comment(db: AsyncSession, post_id: int, comment_id: int) -> dict:
    """Return one active comment with a summary of its author embedded."""
    q = (
        select(Comment)
        .where(
            Comment.id == comment_id,
            Comment.post_id == post_id,
            Comment.deleted_at.is_(None),
        )
        .options(joinedload(Comment.author))
        .execution_options(populate_existing=True)
    )
    comment = (await db.execute(q)).scalar_one_or_none()
    if comment is None:
        raise NotFoundError("Comment not found")

    data = _comment_to_dict(comment)
    data["user"] = user_summary(comment.author) if comment.author else None
    return data


async def create_comment(db: AsyncSession, post_id: int, data: CommentCreate) -> dict:
    """
    Add a comment to *post_id*.

    The post is checked before the author, so a request naming both a
    missing post and a missing user reports "Post not found".
    """
    if not data.content or not data.user_id:
        raise ValidationError("Content and userId are required")

    if await get_active(db, Post, post_id) is None:
        raise NotFoundError("Post not found")
    if await get_active(db, User, data.user_id) is None:
        raise NotFoundError("User not found")

    comment = Comment(content=data.content, user_id=data.user_id, post_id=post_id)
    db.add(comment)
    await db.flush()
    await db.refresh(comment)

    logger.info("Created comment id=%s post_id=%s user_id=%s", comment.id, post_id, comment.user_id)
    return _comment_to_dict(comment)


async def update_comment(
    db: AsyncSession, post_id: int, comment_id: int, data: CommentUpdate
) -> dict:
    comment = await _get_owned_or_raise(db, post_id, comment_id, data.user_id, "update")

    values = {"content": data.content or comment.content}
    updated = await conditional_update(
        db, Comment, comment_id, values, Comment.user_id == data.user_id
    )
    if updated is None:
        raise NotFoundError("Comment not found")
    return _comment_to_dict(updated)


async def delete_comment(
    db: AsyncSession, post_id: int, comment_id: int, user_id: int | None
) -> dict:
    await _get_owned_or_raise(db, post_id, comment_id, user_id, "delete")

    deleted = await conditional_update(
        db, Comment, comment_id, {"deleted_at": func.now()}, Comment.user_id == user_id
    )
    if deleted is None:
        raise NotFoundError("Comment not found")

    logger.info("Soft-deleted comment id=%s post_id=%s", comment_id, post_id)
    return _comment_to_dict(deleted)

"""
Post service: business logic for the Post aggregate.

Design notes
------------
- The feed (one entry per deletion filter) and active post details go
  through the cache-aside pattern (Redis, falling back to the DB).  Every
  write invalidates the feed and the affected detail entry.
- Updates and soft deletes read the post first to tell "missing" (404) from
  "not yours" (403), then write through ``conditional_update`` with the
  same guards so a concurrent delete is never overwritten.
- Service functions flush but do not commit; the transaction boundary is
  owned by the ``get_db`` dependency.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from postit.cache import cache
from postit.config import settings
from postit.exceptions import ForbiddenError, NotFoundError, ValidationError
from postit.models import Post, User
from postit.schemas import PostCreate, PostUpdate
from postit.services.soft_delete import (
    DeletionFilter,
    apply_deletion_filter,
    conditional_update,
    get_active,
    isoformat,
)

logger = logging.getLogger(__name__)


def _post_to_dict(post: Post) -> dict:
    return {
        "id": post.id,
        "content": post.content,
        "userId": post.user_id,
        "createdAt": isoformat(post.created_at),
        "updatedAt": isoformat(post.updated_at),
        "deletedAt": isoformat(post.deleted_at),
    }


async def _get_owned_or_raise(db: AsyncSession, post_id: int, user_id: int | None, action: str) -> Post:
    post = await get_active(db, Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    if post.user_id != user_id:
        raise ForbiddenError(f"You can only {action} your own posts")
    return post


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_posts(
    db: AsyncSession, deletion_filter: DeletionFilter = DeletionFilter.ACTIVE
) -> list[dict]:
    """Return the posts selected by *deletion_filter*, newest first."""
    cache_key = cache.post_list_key(deletion_filter.value)
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    q = (
        apply_deletion_filter(select(Post), Post, deletion_filter)
        .order_by(Post.created_at.desc(), Post.id.desc())
    )
    result = await db.execute(q)
    posts = [_post_to_dict(p) for p in result.scalars().all()]

    await cache.set(cache_key, posts, ttl=settings.CACHE_TTL_LIST)
    return posts


async def get_post(db: AsyncSession, post_id: int) -> dict:
    cache_key = cache.post_detail_key(post_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    post = await get_active(db, Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    data = _post_to_dict(post)
    await cache.set(cache_key, data, ttl=settings.CACHE_TTL_DETAIL)
    return data


async def create_post(db: AsyncSession, data: PostCreate) -> dict:
    """Create a post owned by ``data.user_id``, which must be an active user."""
    if not data.content or not data.user_id:
        raise ValidationError("Content and userId are required")

    if await get_active(db, User, data.user_id) is None:
        raise NotFoundError("User not found")

    post = Post(content=data.content, user_id=data.user_id)
    db.add(post)
    await db.flush()
    await db.refresh(post)

    await cache.invalidate_post()
    logger.info("Created post id=%s user_id=%s", post.id, post.user_id)
    return _post_to_dict(post)


async def update_post(db: AsyncSession, post_id: int, data: PostUpdate) -> dict:
    """Replace the content of a post owned by ``data.user_id``."""
    post = await _get_owned_or_raise(db, post_id, data.user_id, "update")

    values = {"content": data.content or post.content}
    updated = await conditional_update(db, Post, post_id, values, Post.user_id == data.user_id)
    if updated is None:
        raise NotFoundError("Post not found")

    await cache.invalidate_post(post_id)
    return _post_to_dict(updated)


async def delete_post(db: AsyncSession, post_id: int, user_id: int | None) -> dict:
    """Soft-delete a post owned by *user_id*; its comments are kept."""
    await _get_owned_or_raise(db, post_id, user_id, "delete")

    deleted = await conditional_update(
        db, Post, post_id, {"deleted_at": func.now()}, Post.user_id == user_id
    )
    if deleted is None:
        raise NotFoundError("Post not found")

    await cache.invalidate_post(post_id)
    logger.info("Soft-deleted post id=%s", post_id)
    return _post_to_dict(deleted)

"""
User service: lifecycle of the User aggregate.

Users are created with a generated avatar, updated field by field, and
soft-deleted.  Email and username are unique among active users; the
application-level checks give friendly messages and the partial unique
indexes on ``users`` catch whatever slips past them concurrently.
"""
import logging

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from postit.avatar import generate_avatar_tag, generate_avatar_url
from postit.exceptions import ConflictError, NotFoundError, ValidationError
from postit.models import User
from postit.schemas import UserCreate, UserUpdate
from postit.services.soft_delete import (
    DeletionFilter,
    apply_deletion_filter,
    conditional_update,
    get_active,
    isoformat,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "avatarUrl": user.avatar_url,
        "avatarTag": user.avatar_tag,
        "createdAt": isoformat(user.created_at),
        "updatedAt": isoformat(user.updated_at),
        "deletedAt": isoformat(user.deleted_at),
    }


def user_summary(user: User) -> dict:
    """Lightweight author view embedded in other resources."""
    return {"id": user.id, "username": user.username, "avatarUrl": user.avatar_url}


async def _get_active_or_404(db: AsyncSession, user_id: int) -> User:
    user = await get_active(db, User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_users(
    db: AsyncSession, deletion_filter: DeletionFilter = DeletionFilter.ACTIVE
) -> list[dict]:
    """Return every user selected by *deletion_filter*, in id order."""
    q = apply_deletion_filter(select(User), User, deletion_filter).order_by(User.id)
    result = await db.execute(q)
    return [_user_to_dict(u) for u in result.scalars().all()]


async def get_user(db: AsyncSession, user_id: int) -> dict:
    return _user_to_dict(await _get_active_or_404(db, user_id))


async def create_user(db: AsyncSession, data: UserCreate) -> dict:
    """
    Create a user with a freshly assigned avatar.

    Raises ``ValidationError`` for missing fields or a malformed email and
    ``ConflictError`` when an active user already holds the email or
    username.
    """
    if not data.email or not data.username:
        raise ValidationError("Email and username are required")

    q = select(User.id).where(
        or_(User.email == data.email, User.username == data.username),
        User.deleted_at.is_(None),
    )
    if (await db.execute(q)).first() is not None:
        raise ConflictError("Email or username already exists")

    avatar_url = generate_avatar_url(data.email)
    user = User(
        email=data.email,
        username=data.username,
        avatar_url=avatar_url,
        avatar_tag=generate_avatar_tag(data.username, avatar_url),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConflictError("Email or username already exists") from exc
    await db.refresh(user)

    logger.info("Created user id=%s username=%r", user.id, user.username)
    return _user_to_dict(user)


async def update_user(db: AsyncSession, user_id: int, data: UserUpdate) -> dict:
    """
    Partially update a user.

    A new email regenerates the avatar; a new username alone re-renders the
    avatar tag around the existing image.  Empty or omitted fields keep
    their current value.
    """
    user = await _get_active_or_404(db, user_id)

    email = data.email or user.email
    username = data.username or user.username
    avatar_url = user.avatar_url

    if email != user.email:
        q = select(User.id).where(
            User.email == email, User.id != user.id, User.deleted_at.is_(None)
        )
        if (await db.execute(q)).first() is not None:
            raise ConflictError("Email already in use by another user")
        avatar_url = generate_avatar_url(email)

    if username != user.username:
        q = select(User.id).where(
            User.username == username, User.id != user.id, User.deleted_at.is_(None)
        )
        if (await db.execute(q)).first() is not None:
            raise ConflictError("Username already in use by another user")

    avatar_tag = user.avatar_tag
    if avatar_url != user.avatar_url or username != user.username:
        avatar_tag = generate_avatar_tag(username, avatar_url)

    values = {
        "email": email,
        "username": username,
        "avatar_url": avatar_url,
        "avatar_tag": avatar_tag,
    }
    try:
        updated = await conditional_update(db, User, user_id, values)
    except IntegrityError as exc:
        raise ConflictError("Email or username already exists") from exc
    if updated is None:
        raise NotFoundError("User not found")
    return _user_to_dict(updated)


async def delete_user(db: AsyncSession, user_id: int) -> dict:
    """Soft-delete a user; their posts and comments are left untouched."""
    await _get_active_or_404(db, user_id)

    deleted = await conditional_update(db, User, user_id, {"deleted_at": func.now()})
    if deleted is None:
        raise NotFoundError("User not found")

    logger.info("Soft-deleted user id=%s", user_id)
    return _user_to_dict(deleted)

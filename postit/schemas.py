from typing import Any

from pydantic import BaseModel, ConfigDict, StrictInt
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase keys on the wire and snake_case keys in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- User ---
# Required fields are checked by the services so that a missing field is a
# 400 with the usual envelope rather than the framework's 422.

class UserCreate(CamelModel):
    email: str | None = None
    username: str | None = None


class UserUpdate(CamelModel):
    email: str | None = None
    username: str | None = None


# --- Post ---

class PostCreate(CamelModel):
    content: str | None = None
    user_id: StrictInt | None = None


class PostUpdate(CamelModel):
    content: str | None = None
    user_id: StrictInt | None = None


# --- Comment ---

class CommentCreate(CamelModel):
    content: str | None = None
    user_id: StrictInt | None = None


class CommentUpdate(CamelModel):
    content: str | None = None
    user_id: StrictInt | None = None


# --- Ownership (body of DELETE on posts/comments) ---

class OwnerRef(CamelModel):
    user_id: StrictInt | None = None


# --- Envelope ---

def ok(data: Any) -> dict:
    """Wrap *data* in the success envelope."""
    return {"success": True, "data": data}


def failure(message: str) -> dict:
    """Build the failure envelope carrying a human-readable *message*."""
    return {"success": False, "message": message}

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from postit.database import get_db
from postit.dependencies import DeletionFilterParams
from postit.schemas import CommentCreate, CommentUpdate, OwnerRef, ok
from postit.services import comment_service

router = APIRouter(prefix="/posts/{post_id}/comments", tags=["comments"])

@router.post("", status_code=201)
async def create_comment(post_id: int, data: CommentCreate, db: AsyncSession = Depends(get_db)):
    return ok(await comment_service.create_comment(db, post_id, data))

@router.get("")
async def list_comments(
    post_id: int,
    params: DeletionFilterParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return ok(await comment_service.get_comments(db, post_id, params.deletion_filter))

@router.get("/{comment_id}")
async def get_comment(post_id: int, comment_id: int, db: AsyncSession = Depends(get_db)):
    return ok(await comment_service.get_comment(db, post_id, comment_id))

@router.put("/{comment_id}")
async def update_comment(
    post_id: int, comment_id: int, data: CommentUpdate, db: AsyncSession = Depends(get_db)
):
    return ok(await comment_service.update_comment(db, post_id, comment_id, data))

@router.delete("/{comment_id}")
async def delete_comment(
    post_id: int,
    comment_id: int,
    data: OwnerRef | None = None,
    db: AsyncSession = Depends(get_db),
):
    user_id = data.user_id if data else None
    return ok(await comment_service.delete_comment(db, post_id, comment_id, user_id))

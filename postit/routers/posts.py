from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from postit.database import get_db
from postit.dependencies import DeletionFilterParams
from postit.schemas import OwnerRef, PostCreate, PostUpdate, ok
from postit.services import post_service

router = APIRouter(prefix="/posts", tags=["posts"])

@router.post("", status_code=201)
async def create_post(data: PostCreate, db: AsyncSession = Depends(get_db)):
    return ok(await post_service.create_post(db, data))

@router.get("")
async def list_posts(params: DeletionFilterParams = Depends(), db: AsyncSession = Depends(get_db)):
    return ok(await post_service.get_posts(db, params.deletion_filter))

@router.get("/{post_id}")
async def get_post(post_id: int, db: AsyncSession = Depends(get_db)):
    return ok(await post_service.get_post(db, post_id))

@router.put("/{post_id}")
async def update_post(post_id: int, data: PostUpdate, db: AsyncSession = Depends(get_db)):
    return ok(await post_service.update_post(db, post_id, data))

# A missing body is not a 400: the ownership check rejects it with 403.
@router.delete("/{post_id}")
async def delete_post(post_id: int, data: OwnerRef | None = None, db: AsyncSession = Depends(get_db)):
    user_id = data.user_id if data else None
    return ok(await post_service.delete_post(db, post_id, user_id))

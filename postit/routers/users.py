from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from postit.database import get_db
from postit.dependencies import DeletionFilterParams
from postit.schemas import UserCreate, UserUpdate, ok
from postit.services import user_service

router = APIRouter(prefix="/users", tags=["users"])

@router.post("", status_code=201)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    return ok(await user_service.create_user(db, data))

@router.get("")
async def list_users(params: DeletionFilterParams = Depends(), db: AsyncSession = Depends(get_db)):
    return ok(await user_service.get_users(db, params.deletion_filter))

@router.get("/{user_id}")
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return ok(await user_service.get_user(db, user_id))

@router.put("/{user_id}")
async def update_user(user_id: int, data: UserUpdate, db: AsyncSession = Depends(get_db)):
    return ok(await user_service.update_user(db, user_id, data))

@router.delete("/{user_id}")
async def delete_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return ok(await user_service.delete_user(db, user_id))

from fastapi import APIRouter, Depends
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from postit.cache import cache
from postit.database import get_db
from postit.models import Comment, Post, User
from postit.schemas import ok

router = APIRouter(prefix="/metrics", tags=["metrics"])

async def _counts(db: AsyncSession, model) -> dict:
    q = select(
        func.count(),
        func.coalesce(func.sum(case((model.deleted_at.is_not(None), 1), else_=0)), 0),
    ).select_from(model)
    total, deleted = (await db.execute(q)).one()
    return {"active": total - deleted, "deleted": deleted}

@router.get("")
async def get_metrics(db: AsyncSession = Depends(get_db)):
    return ok({
        "users": await _counts(db, User),
        "posts": await _counts(db, Post),
        "comments": await _counts(db, Comment),
        "cache": cache.stats,
    })

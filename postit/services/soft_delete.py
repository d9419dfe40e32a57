"""
Soft-delete helpers shared by the user, post and comment services.

Rows are never physically removed: a non-null ``deleted_at`` marks them
inactive.  This module holds the three-way list filter and the conditional
write used for every update and soft delete.
"""
import enum
from datetime import datetime

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from postit.database import Base


class DeletionFilter(str, enum.Enum):
    """Which rows a list operation returns."""

    ACTIVE = "active"
    ALL = "all"
    DELETED = "deleted"


def apply_deletion_filter(stmt: Select, model: type[Base], deletion_filter: DeletionFilter) -> Select:
    """Narrow *stmt* to the rows selected by *deletion_filter*."""
    if deletion_filter is DeletionFilter.DELETED:
        return stmt.where(model.deleted_at.is_not(None))
    if deletion_filter is DeletionFilter.ACTIVE:
        return stmt.where(model.deleted_at.is_(None))
    return stmt


async def get_active(db: AsyncSession, model: type[Base], row_id: int, *criteria):
    """Return the active *model* row with *row_id* matching *criteria*, or None."""
    q = select(model).where(model.id == row_id, model.deleted_at.is_(None), *criteria)
    return (await db.execute(q)).scalar_one_or_none()


async def conditional_update(
    db: AsyncSession, model: type[Base], row_id: int, values: dict, *criteria
):
    """
    Apply *values* to the active row *row_id* in a single guarded UPDATE.

    The WHERE clause repeats the checks the caller has already made
    (``deleted_at IS NULL`` plus any ownership *criteria*), so a row that
    was concurrently deleted or changed owner is left untouched.  Returns
    the refreshed ORM instance, or None when the guard matched nothing.
    """
    stmt = (
        update(model)
        .where(model.id == row_id, model.deleted_at.is_(None), *criteria)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount == 0:
        return None

    q = select(model).where(model.id == row_id).execution_options(populate_existing=True)
    return (await db.execute(q)).scalar_one()


def isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None

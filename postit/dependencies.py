from fastapi import Query

from postit.services.soft_delete import DeletionFilter


class DeletionFilterParams:
    """
    Reusable FastAPI dependency that parses the soft-delete query flags
    shared by every list endpoint.

    Usage in a router::

        @router.get("")
        async def list_posts(params: DeletionFilterParams = Depends()):
            ...

    Only the literal value ``true`` switches a flag on.  ``onlyDeleted``
    wins when both are given.

    Attributes
    ----------
    deletion_filter:
        ``DeletionFilter.DELETED`` for ``?onlyDeleted=true``,
        ``DeletionFilter.ALL`` for ``?includeDeleted=true``,
        ``DeletionFilter.ACTIVE`` otherwise.
    """

    def __init__(
        self,
        include_deleted: str | None = Query(
            None,
            alias="includeDeleted",
            description="Set to 'true' to list soft-deleted rows alongside active ones.",
        ),
        only_deleted: str | None = Query(
            None,
            alias="onlyDeleted",
            description="Set to 'true' to list soft-deleted rows only.",
        ),
    ) -> None:
        if only_deleted == "true":
            self.deletion_filter = DeletionFilter.DELETED
        elif include_deleted == "true":
            self.deletion_filter = DeletionFilter.ALL
        else:
            self.deletion_filter = DeletionFilter.ACTIVE

# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business logic and database access for a single resource:
#
#   user_service - create / list / get / update / soft-delete User
#   post_service - the same for Post, with ownership checks and cache
#   comment_service - the same for Comment, scoped by parent post
#   soft_delete - deletion filter and guarded conditional writes
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.  Failures are raised as ``postit.exceptions``
# errors and rendered by the handler registered in ``postit.main``.

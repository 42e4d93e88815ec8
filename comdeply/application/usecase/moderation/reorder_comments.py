"""Reorder comments use case."""

from pydantic import BaseModel

from comdeply.application.usecase.base import BaseUseCase
from comdeply.domain.service import ReorderService
from comdeply.domain.value import ThreadScope


class ReorderCommentsRequest(BaseModel):
    """Reorder comments request."""

    site_key: str
    page_id: str


class ReorderCommentsResponse(BaseModel):
    """Reorder comments response."""

    site_key: str
    page_id: str
    changed: int  # Number of comments whose sort key was rewritten


class ReorderCommentsUseCase(BaseUseCase):
    """Use case for rewriting a thread's sort keys into canonical form."""

    def __init__(self, reorder_service: ReorderService) -> None:
        self.reorder_service = reorder_service

    async def execute(self, request: ReorderCommentsRequest) -> ReorderCommentsResponse:
        """Execute reorder flow.

        Raises:
            SortKeyConflictError: If a comment has more replies than the
                canonical layout fits (99 under a root, 9 below that)
        """
        scope = ThreadScope(site_key=request.site_key, page_id=request.page_id)
        changed = await self.reorder_service.reorder_all(scope)
        return ReorderCommentsResponse(
            site_key=scope.site_key, page_id=scope.page_id, changed=changed
        )

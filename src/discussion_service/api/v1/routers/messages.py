from __future__ import annotations

from fastapi import APIRouter, Query

from discussion_service.api.deps import CurrentPrincipal, UoWDep
from discussion_service.api.v1.schemas.common import ErrorResponse, PaginationMeta
from discussion_service.api.v1.schemas.message import MessagePageResponse, MessageResponse
from discussion_service.config import settings
from discussion_service.services import discussion_service, message_service

router = APIRouter(prefix="/api/discussions", tags=["messages"])


@router.get(
    "/{discussion_id}/messages",
    response_model=MessagePageResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def list_messages(
    discussion_id: str,
    principal: CurrentPrincipal,
    uow: UoWDep,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.MESSAGES_PAGE_SIZE, ge=1, le=200),
) -> MessagePageResponse:
    await discussion_service.authorize_read(discussion_id, principal, uow)
    messages, total = await message_service.list_page(discussion_id, page, uow, page_size=limit)
    return MessagePageResponse(
        count=len(messages),
        total=total,
        pagination=PaginationMeta(
            page=page,
            limit=limit,
            pages=message_service.page_count(total, limit),
        ),
        data=[MessageResponse.model_validate(m, from_attributes=True) for m in messages],
    )

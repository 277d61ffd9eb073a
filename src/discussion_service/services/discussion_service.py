from __future__ import annotations

import logging

from discussion_service.application.dto.principal import Principal
from discussion_service.application.exceptions import AppError, UnavailableError
from discussion_service.application.policies.permissions import (
    assert_discussion_joinable,
    assert_discussion_readable,
)
from discussion_service.application.uow import UnitOfWork, UoWFactory
from discussion_service.domain.entities.discussion import Discussion

logger = logging.getLogger(__name__)


async def authorize_join(
    discussion_id: str,
    principal: Principal,
    uow: UnitOfWork,
) -> Discussion:
    """Gate for chat and audio room joins."""
    discussion = await uow.discussions.get_by_id(discussion_id)
    return assert_discussion_joinable(principal, discussion)


async def authorize_read(
    discussion_id: str,
    principal: Principal,
    uow: UnitOfWork,
) -> Discussion:
    discussion = await uow.discussions.get_by_id(discussion_id)
    return assert_discussion_readable(principal, discussion)


async def check_join(
    discussion_id: str,
    principal: Principal,
    uow_factory: UoWFactory,
) -> AppError | None:
    """Socket-side variant of ``authorize_join``: returns the refusal instead of raising."""
    try:
        async with uow_factory() as uow:
            await authorize_join(discussion_id, principal, uow)
    except AppError as exc:
        return exc
    except Exception:
        logger.exception("Discussion lookup failed for %s", discussion_id)
        return UnavailableError("Discussion lookup failed")
    return None

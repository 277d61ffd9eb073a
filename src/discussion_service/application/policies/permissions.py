from __future__ import annotations

from discussion_service.application.dto.principal import Principal
from discussion_service.application.exceptions import ForbiddenError, NotFoundError
from discussion_service.domain.entities.discussion import Discussion


def assert_discussion_readable(
    principal: Principal,
    discussion: Discussion | None,
) -> Discussion:
    """Raise if discussion doesn't exist or is private to others."""
    if discussion is None:
        raise NotFoundError("Discussion not found")

    if discussion.is_private and not discussion.admits(principal.user_id):
        raise ForbiddenError("Not a participant of this discussion")

    return discussion


def assert_discussion_joinable(
    principal: Principal,
    discussion: Discussion | None,
) -> Discussion:
    """Read access plus the discussion must still be running."""
    discussion = assert_discussion_readable(principal, discussion)
    if discussion.is_ended:
        raise ForbiddenError("Discussion has ended")
    return discussion

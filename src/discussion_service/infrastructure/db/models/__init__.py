"""Import all models so metadata.create_all can discover them via Base.metadata."""
from discussion_service.infrastructure.db.models.discussion import (
    DiscussionModel,
    DiscussionParticipantModel,
)
from discussion_service.infrastructure.db.models.message import DiscussionMessageModel

__all__ = [
    "DiscussionMessageModel",
    "DiscussionModel",
    "DiscussionParticipantModel",
]

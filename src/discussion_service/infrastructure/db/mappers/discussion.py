from __future__ import annotations

from discussion_service.domain.entities.discussion import Discussion
from discussion_service.infrastructure.db.models.discussion import (
    DiscussionModel,
    DiscussionParticipantModel,
)


def model_to_entity(model: DiscussionModel) -> Discussion:
    return Discussion(
        id=model.id,
        title=model.title,
        host_id=model.host_id,
        community_id=model.community_id,
        status=model.status,
        is_private=model.is_private,
        start_time=model.start_time,
        participant_ids=frozenset(p.user_id for p in model.participants),
    )


def entity_to_model(entity: Discussion) -> DiscussionModel:
    """Used by dev seeding only; the forum API owns discussion writes."""
    return DiscussionModel(
        id=entity.id,
        title=entity.title,
        host_id=entity.host_id,
        community_id=entity.community_id,
        status=entity.status,
        is_private=entity.is_private,
        start_time=entity.start_time,
        participants=[
            DiscussionParticipantModel(discussion_id=entity.id, user_id=uid)
            for uid in sorted(entity.participant_ids | {entity.host_id})
        ],
    )

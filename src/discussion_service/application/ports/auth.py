from __future__ import annotations

from typing import Protocol

from discussion_service.application.dto.principal import Principal


class TokenVerifier(Protocol):
    async def verify(self, token: str | None) -> Principal:
        """Return the caller identity or raise AuthenticationError."""
        ...

from __future__ import annotations

import logging

import jwt

from discussion_service.application.dto.principal import Principal
from discussion_service.application.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_MISSING = "token missing"
INVALID_TOKEN = "invalid token"


class HS256Verifier:
    """Verify JWTs signed with the secret shared with the forum API.

    The forum API signs ``{id, email, username}`` with an expiry; nothing
    here calls back into it.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str | None) -> Principal:
        if not token:
            raise AuthenticationError(TOKEN_MISSING)
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.PyJWTError as exc:
            logger.debug("JWT rejected: %s", exc)
            raise AuthenticationError(INVALID_TOKEN) from exc

        user_id = payload.get("id")
        if not user_id:
            raise AuthenticationError(INVALID_TOKEN)
        return Principal(
            user_id=str(user_id),
            username=str(payload.get("username", "")),
            email=payload.get("email"),
        )

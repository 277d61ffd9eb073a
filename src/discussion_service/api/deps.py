"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from discussion_service.application.dto.principal import Principal
from discussion_service.application.exceptions import AuthenticationError
from discussion_service.application.ports.auth import TokenVerifier
from discussion_service.config import settings
from discussion_service.infrastructure.auth.hs256_verifier import HS256Verifier
from discussion_service.infrastructure.db.session import AsyncSessionLocal
from discussion_service.infrastructure.db.uow import SqlAlchemyUoW

_bearer_scheme = HTTPBearer()


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)
        try:
            yield uow
        finally:
            await session.close()


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)
    return _verifier


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(_bearer_scheme)],
) -> Principal:
    verifier = get_verifier()
    try:
        return await verifier.verify(credentials.credentials)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.detail,
        ) from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]

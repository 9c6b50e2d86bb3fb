from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.platform.config.di import Container
from src.service.shared_kernel.driving_adapter.http_controller.auth.jwt_auth import (
    CurrentUserInfo,
    JwtAuth,
)


bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    access_token: Optional[str] = Query(None, include_in_schema=False),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> CurrentUserInfo:
    """
    Get current user from JWT token (stateless, no DB query)

    Browsers cannot set headers on EventSource, so SSE clients pass `?access_token=`.
    """
    token = credentials.credentials if credentials else access_token
    return jwt_auth.get_current_user_info_from_jwt(token)

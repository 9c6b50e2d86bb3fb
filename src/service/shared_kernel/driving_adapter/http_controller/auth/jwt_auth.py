"""
Caller identity from a bearer JWT.

Tokens are issued by the identity service; this core only verifies them.
`create_jwt_token` exists for local tooling and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import attrs
import jwt
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError


@attrs.define(frozen=True)
class CurrentUserInfo:
    user_id: UUID
    name: str


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_days = 7

    def create_jwt_token(self, *, user_id: UUID, name: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user_id),
            'exp': now + timedelta(days=self.token_expire_days),
            'iat': now,
            'user_id': str(user_id),
            'name': name,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise AuthenticationError('Invalid token')

    def get_current_user_info_from_jwt(self, token: Optional[str]) -> CurrentUserInfo:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)
        user_id = payload.get('user_id')
        name = payload.get('name')
        if not user_id or not name:
            raise AuthenticationError('Invalid token')

        try:
            return CurrentUserInfo(user_id=UUID(str(user_id)), name=name)
        except ValueError:
            raise AuthenticationError('Invalid token')

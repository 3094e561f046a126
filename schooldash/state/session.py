# schooldash/state/session.py
from enum import Enum
from typing import Optional

import jwt

from schooldash.core.config import settings
from schooldash.core.errors import DashboardError, error_message
from schooldash.core.logging import log
from schooldash.schemas.auth import User
from schooldash.services.auth import AuthService


class SessionStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


def token_expired(token: str, leeway: int | None = None) -> bool:
    """True only for a JWT whose exp has passed; opaque tokens are left to the backend"""
    try:
        jwt.decode(
            token,
            options={"verify_signature": False, "verify_aud": False, "verify_exp": True},
            leeway=settings.TOKEN_LEEWAY if leeway is None else leeway,
        )
    except jwt.ExpiredSignatureError:
        return True
    except jwt.PyJWTError:
        return False
    return False


class SessionContext:
    """
    Current user and auth lifecycle for one dashboard instance.

    Passed explicitly to every page that needs it; nothing here is global.
    """

    def __init__(self, auth: AuthService):
        self.auth = auth
        self.status = SessionStatus.UNINITIALIZED
        self.user: Optional[User] = None

    @property
    def loading(self) -> bool:
        return self.status in (SessionStatus.UNINITIALIZED, SessionStatus.LOADING)

    @property
    def authenticated(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED

    def has_role(self, *roles: str) -> bool:
        return self.user is not None and self.user.role in roles

    async def initialize(self) -> Optional[User]:
        """Resume a previous session if the stored token still works"""
        self.status = SessionStatus.LOADING
        tokens = self.auth.http.tokens
        token = tokens.get()

        if token and token_expired(token):
            log.info("session_token_expired")
            tokens.clear()
            return self._anonymous()

        try:
            user = await self.auth.me()
        except DashboardError as e:
            # A 401 here just means nobody is signed in
            log.info("session_not_resumed", reason=error_message(e))
            return self._anonymous()

        return self._authenticated(user)

    async def login(self, email: str, password: str) -> User:
        result = await self.auth.login(email, password)
        log.info("session_login", user_id=result.user.id, role=result.user.role)
        return self._authenticated(result.user)

    async def logout(self):
        try:
            await self.auth.logout()
        except DashboardError as e:
            log.error("session_logout_failed", error=error_message(e), error_type=type(e).__name__)
        finally:
            self._anonymous()

    def merge_user(self, changes: dict) -> Optional[User]:
        """Overlay the profile fields a backend update echoed back onto the current user"""
        if self.user is None:
            return None
        known = {k: v for k, v in changes.items() if k in User.model_fields}
        self.user = User.model_validate({**self.user.model_dump(), **known})
        return self.user

    def _authenticated(self, user: User) -> User:
        self.user = user
        self.status = SessionStatus.AUTHENTICATED
        return user

    def _anonymous(self) -> None:
        self.user = None
        self.status = SessionStatus.ANONYMOUS
        return None

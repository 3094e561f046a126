# schooldash/services/auth.py
from schooldash.core.http import CoreHTTP
from schooldash.schemas.auth import LoginResponse, ProfileUpdate, User


class AuthService:
    def __init__(self, http: CoreHTTP):
        self.http = http

    async def login(self, email: str, password: str) -> LoginResponse:
        """Authenticate and keep the returned bearer token for later requests"""
        result = LoginResponse.model_validate(await self.http.post("/login", {"email": email, "password": password}))
        if result.access_token:
            self.http.tokens.set(result.access_token)
        return result

    async def logout(self):
        try:
            await self.http.post("/logout")
        finally:
            self.http.tokens.clear()

    async def me(self) -> User:
        return User.model_validate(await self.http.get("/me"))

    async def update_profile(self, data: ProfileUpdate) -> dict:
        """
        PUT /profile with only the fields that were set.

        Returns the user fields the backend echoed back, which may be a partial
        user or nothing at all (e.g. {"message": "Password updated"}).
        """
        payload = await self.http.put("/profile", data.model_dump(exclude_none=True))
        user = payload.get("user") if isinstance(payload, dict) else None
        return user if isinstance(user, dict) else {}

    async def register(self, data: dict) -> LoginResponse:
        result = LoginResponse.model_validate(await self.http.post("/users/register", data))
        if result.access_token:
            self.http.tokens.set(result.access_token)
        return result

# schooldash/pages/settings.py
from typing import Dict, Optional

from pydantic import ValidationError

from schooldash.core.errors import DashboardError, error_message
from schooldash.core.logging import log
from schooldash.pages.base import Page
from schooldash.schemas.auth import ProfileUpdate, User
from schooldash.services.auth import AuthService
from schooldash.state.prompt import Prompter
from schooldash.state.session import SessionContext

DEFAULT_PREFERENCES = {
    "notifications": True,
    "darkMode": False,
    "biometric": True,
    "analytics": True,
}


class SettingsPage(Page):
    def __init__(self, session: SessionContext, auth: AuthService, prompter: Prompter):
        super().__init__(prompter)
        self.session = session
        self.auth = auth
        self.preferences: Dict[str, bool] = self._preferences_from_user()

    def _preferences_from_user(self) -> Dict[str, bool]:
        stored = self.session.user.settings if self.session.user else {}
        return {key: bool(stored.get(key, default)) for key, default in DEFAULT_PREFERENCES.items()}

    async def _save(self, update: ProfileUpdate, sent: Optional[dict] = None) -> Optional[User]:
        # The backend may echo a partial user or none; what it leaves out keeps its current value
        changes = await self.auth.update_profile(update)
        return self.session.merge_user({**(sent or {}), **changes})

    async def save_personal(self, name: str, email: str) -> bool:
        async def work():
            self.require(name and name.strip(), "Name is required")
            self.require(email and "@" in email, "A valid email is required")
            await self._save(ProfileUpdate(name=name.strip(), email=email.strip()))

        return await self.mutate("profile_update", "Update failed", work)

    async def save_password(self, password: str, confirmation: str) -> bool:
        async def work():
            self.require(password, "Password is required")
            self.require(password == confirmation, "Passwords do not match")
            await self._save(ProfileUpdate(password=password, password_confirmation=confirmation))

        return await self.mutate("password_update", "Update failed", work)

    async def toggle_preference(self, key: str) -> bool:
        """Flip locally first, put it back if the backend refuses"""
        if key not in DEFAULT_PREFERENCES:
            raise KeyError(key)
        previous = dict(self.preferences)
        self.preferences = {**previous, key: not previous[key]}
        try:
            user = await self._save(ProfileUpdate(settings=self.preferences), sent={"settings": self.preferences})
        except (DashboardError, ValidationError) as e:
            self.preferences = previous
            log.error("preferences_sync_failed", key=key, error=error_message(e), error_type=type(e).__name__)
            self.prompter.alert(f"Could not save settings: {error_message(e)}")
            return False
        if user is not None:
            self.preferences = {k: bool(user.settings.get(k, v)) for k, v in self.preferences.items()}
        return True

# schooldash/pages/dashboard.py
from typing import Optional

from schooldash.services.messages import AnalyticsService
from schooldash.state.fetch import FetchResource
from schooldash.state.session import SessionContext


class DashboardPage:
    """Role landing page: one analytics overview per role"""

    def __init__(self, session: SessionContext, analytics: AnalyticsService, student_id: Optional[int] = None):
        self.session = session
        self.analytics = analytics
        self.student_id = student_id
        self.resource: FetchResource[dict] = FetchResource(self._call(), initial={}, name="dashboard_overview")

    def _call(self):
        role = self.session.user.role if self.session.user else None
        if role == "admin":
            return self.analytics.admin_overview
        if role == "teacher":
            return self.analytics.teacher_overview
        if role == "student":
            return self.analytics.student_overview
        if role == "parent" and self.student_id is not None:
            return lambda: self.analytics.parent_overview(self.student_id)
        return None

    @property
    def overview(self) -> dict:
        return self.resource.data or {}

    async def load(self) -> dict:
        await self.resource.refetch()
        return self.overview

    async def close(self):
        await self.resource.close()

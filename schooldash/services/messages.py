# schooldash/services/messages.py
from typing import List

from schooldash.core.http import CoreHTTP
from schooldash.schemas.messages import (
    Announcement, AnnouncementForm, AttendanceSubmission, FeedbackCreate, FeedbackItem,
)
from schooldash.services.people import ResourceService


class FeedbackService(ResourceService[FeedbackItem]):
    path = "/feedback"
    model = FeedbackItem

    async def send(self, item: FeedbackCreate):
        return await self.create(item.model_dump())

    async def mark_read(self, feedback_id: int):
        return await self.update(feedback_id, {"is_read": True})


class AnnouncementService:
    def __init__(self, http: CoreHTTP):
        self.http = http

    async def get_all(self) -> List[Announcement]:
        data = await self.http.get("/announcements")
        return [Announcement.model_validate(a) for a in (data if isinstance(data, list) else [])]

    async def create(self, form: AnnouncementForm):
        return await self.http.post("/announcements", form.model_dump())


class AttendanceService:
    def __init__(self, http: CoreHTTP):
        self.http = http

    async def submit(self, submission: AttendanceSubmission):
        """Store one day of attendance for a class"""
        return await self.http.post("/attendance", submission.model_dump(mode="json"))


class AnalyticsService:
    def __init__(self, http: CoreHTTP):
        self.http = http

    async def admin_overview(self) -> dict:
        return await self.http.get("/analytics/admin/overview") or {}

    async def teacher_overview(self) -> dict:
        return await self.http.get("/analytics/teacher/overview") or {}

    async def student_overview(self) -> dict:
        return await self.http.get("/analytics/student/overview") or {}

    async def parent_overview(self, student_id: int) -> dict:
        return await self.http.get("/analytics/parent/overview", params={"student_id": student_id}) or {}

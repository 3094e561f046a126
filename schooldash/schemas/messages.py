# schooldash/schemas/messages.py
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from schooldash.schemas.people import UserRef

FeedbackType = Literal["feedback", "bug", "suggestion"]
AttendanceStatus = Literal["present", "absent", "late", "excused"]


class FeedbackItem(BaseModel):
    id: int
    message: str = ""
    type: str = "feedback"
    is_read: bool = False
    user: Optional[UserRef] = None
    created_at: Optional[str] = None


class FeedbackCreate(BaseModel):
    message: str = ""
    type: FeedbackType = "feedback"


class Announcement(BaseModel):
    id: int
    title: str
    message: str = ""
    target_role: str = "all"
    target_class_id: Optional[int] = None
    created_at: Optional[str] = None


class AnnouncementForm(BaseModel):
    title: str = ""
    message: str = ""
    target_role: Literal["all", "teacher", "student", "parent"] = "all"
    target_class_id: Optional[int] = None


class AttendanceRecord(BaseModel):
    student_id: int
    status: AttendanceStatus = "present"


class AttendanceSubmission(BaseModel):
    class_id: int
    date: date
    records: List[AttendanceRecord] = Field(default_factory=list)

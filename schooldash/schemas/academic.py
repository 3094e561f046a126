# schooldash/schemas/academic.py
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


class StudentSummary(BaseModel):
    id: int
    name: str = ""
    email: Optional[str] = None


class Section(BaseModel):
    id: int
    name: str
    students_count: int = 0
    students: List[StudentSummary] = Field(default_factory=list)


class Subject(BaseModel):
    id: int
    name: str
    code: str = ""


class Grade(BaseModel):
    """One node of the academic hierarchy: a grade with its sections and subjects"""
    id: Optional[int] = None
    name: str
    sections: List[Section] = Field(default_factory=list)
    subjects: List[Subject] = Field(default_factory=list)

    @field_validator("sections", "subjects", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []

    @property
    def key(self) -> Union[int, str]:
        """Stable identity: backend id when supplied, otherwise the (unique) name"""
        return self.id if self.id is not None else self.name

    def section(self, section_id: int) -> Optional[Section]:
        return next((s for s in self.sections if s.id == section_id), None)


class ScheduleSubject(BaseModel):
    id: int
    name: str = ""
    code: str = ""


class ScheduleEntry(BaseModel):
    id: int
    subject_id: int
    day_of_week: str
    start_time: str
    end_time: str
    room: Optional[str] = None
    class_id: int
    subject: Optional[ScheduleSubject] = None


class ScheduleCreate(BaseModel):
    """Body of POST /schedules"""
    subject_id: Optional[int] = None
    day_of_week: str = "Monday"
    start_time: str = "08:00"
    end_time: str = "09:30"
    room: str = ""
    class_id: Optional[int] = None

    @field_validator("day_of_week")
    @classmethod
    def _known_day(cls, value: str) -> str:
        if value not in WEEKDAYS:
            raise ValueError(f"day_of_week must be one of {', '.join(WEEKDAYS)}")
        return value


class SchoolClass(BaseModel):
    id: int
    name: str
    section: Optional[str] = None
    students: List[StudentSummary] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.name} {self.section}" if self.section else self.name

# schooldash/schemas/people.py
from typing import List, Optional

from pydantic import BaseModel, Field

from schooldash.schemas.academic import SchoolClass, Subject


class UserRef(BaseModel):
    id: Optional[int] = None
    name: str = ""
    email: str = ""


class Assignment(BaseModel):
    class_id: Optional[int] = None
    subject_id: Optional[int] = None
    subject: Optional[Subject] = None
    school_class: Optional[SchoolClass] = None


class Teacher(BaseModel):
    id: int
    user: UserRef = Field(default_factory=UserRef)
    assignments: List[Assignment] = Field(default_factory=list)

    def subject_names(self) -> List[str]:
        seen = []
        for a in self.assignments:
            if a.subject and a.subject.name and a.subject.name not in seen:
                seen.append(a.subject.name)
        return seen

    def class_labels(self) -> List[str]:
        seen = []
        for a in self.assignments:
            if a.school_class and a.school_class.label not in seen:
                seen.append(a.school_class.label)
        return seen


class Student(BaseModel):
    id: int
    user: UserRef = Field(default_factory=UserRef)
    class_id: Optional[int] = None
    school_class: Optional[SchoolClass] = None
    grades_avg_score: Optional[float] = None


class Parent(BaseModel):
    id: int
    user: UserRef = Field(default_factory=UserRef)
    students: List[Student] = Field(default_factory=list)


class AssignmentForm(BaseModel):
    class_id: Optional[int] = None
    subject_id: Optional[int] = None

    @property
    def complete(self) -> bool:
        return bool(self.class_id and self.subject_id)


class TeacherForm(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    assignments: List[AssignmentForm] = Field(default_factory=lambda: [AssignmentForm()])


class StudentForm(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    class_id: Optional[int] = None


class ParentForm(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    student_ids: List[int] = Field(default_factory=list)

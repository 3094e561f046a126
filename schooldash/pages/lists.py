# schooldash/pages/lists.py
import asyncio
from datetime import date
from typing import Dict, Generic, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from schooldash.core.errors import DashboardError, error_message
from schooldash.core.logging import log
from schooldash.pages.base import Page
from schooldash.schemas.academic import SchoolClass
from schooldash.schemas.messages import (
    Announcement, AnnouncementForm, AttendanceRecord, AttendanceSubmission, FeedbackCreate, FeedbackItem,
)
from schooldash.schemas.people import (
    AssignmentForm, Parent, ParentForm, Student, StudentForm, Teacher, TeacherForm,
)
from schooldash.services.academic import AcademicService
from schooldash.services.messages import AnnouncementService, AttendanceService, FeedbackService
from schooldash.services.people import ParentService, ResourceService, StudentService, TeacherService
from schooldash.state.fetch import FetchResource
from schooldash.state.modals import ModalFamily, ModalManager
from schooldash.state.prompt import Prompter

RecordT = TypeVar("RecordT", bound=BaseModel)
FormT = TypeVar("FormT", bound=BaseModel)


def matches(term: str, fields: Iterable[Optional[str]]) -> bool:
    needle = (term or "").strip().lower()
    if not needle:
        return True
    return any(needle in (f or "").lower() for f in fields)


class ListPage(Page, Generic[RecordT, FormT]):
    """Fetched list + client-side search + one add/edit form dialog"""

    noun = "record"
    form_model: Type[BaseModel]

    def __init__(self, service: ResourceService, prompter: Prompter):
        super().__init__(prompter)
        self.service = service
        self.resource: FetchResource[List[RecordT]] = FetchResource(self.fetch, initial=[], name=f"{self.noun}_list")
        self.search = ""
        self.modals = ModalManager(ModalFamily.FORM)
        self.form: FormT = self.form_model()
        self.editing_id: Optional[int] = None

    async def fetch(self) -> List[RecordT]:
        return await self.service.get_all()

    @property
    def records(self) -> List[RecordT]:
        return self.resource.data or []

    @property
    def loading(self) -> bool:
        return self.resource.loading

    @property
    def error(self) -> Optional[str]:
        return self.resource.error

    async def load(self) -> List[RecordT]:
        await self.resource.refetch()
        return self.records

    async def refresh(self) -> List[RecordT]:
        await self.resource.refetch(force=True)
        return self.records

    async def close(self):
        await self.resource.close()

    def search_fields(self, record: RecordT) -> Iterable[Optional[str]]:
        raise NotImplementedError

    def filtered(self) -> List[RecordT]:
        return [r for r in self.records if matches(self.search, self.search_fields(r))]

    @property
    def is_edit_mode(self) -> bool:
        return self.editing_id is not None

    def open_add(self) -> FormT:
        self.modals.open(ModalFamily.FORM, mode="add")
        self.editing_id = None
        self.form = self.form_model()
        return self.form

    def open_edit(self, record: RecordT) -> FormT:
        self.modals.open(ModalFamily.FORM, mode="edit", id=record.id)
        self.editing_id = record.id
        self.form = self.form_from(record)
        return self.form

    def form_from(self, record: RecordT) -> FormT:
        return self.form_model()

    def payload(self, form: FormT) -> dict:
        data = form.model_dump()
        if self.is_edit_mode and not data.get("password"):
            # Blank password on edit means "keep the current one"
            data.pop("password", None)
        return data

    async def submit(self, form: Optional[FormT] = None) -> bool:
        form = form or self.form

        async def work():
            if self.is_edit_mode:
                await self.service.update(self.editing_id, self.payload(form))
            else:
                await self.service.create(self.payload(form))

        saved = await self.mutate(f"{self.noun}_save", "Operation failed", work,
                                  modal=self.modals[ModalFamily.FORM], then=self.refresh)
        if saved:
            self.editing_id = None
        return saved

    async def delete(self, record_id: int) -> bool:
        if not self.prompter.confirm(f"Are you sure you want to delete this {self.noun} account?"):
            return False
        return await self.mutate(f"{self.noun}_delete", "Delete failed",
                                 lambda: self.service.delete(record_id), then=self.refresh)


class TeachersPage(ListPage[Teacher, TeacherForm]):
    noun = "teacher"
    form_model = TeacherForm

    def __init__(self, service: TeacherService, prompter: Prompter):
        super().__init__(service, prompter)

    def search_fields(self, record: Teacher):
        return (record.user.name, record.user.email)

    def form_from(self, record: Teacher) -> TeacherForm:
        assignments = [AssignmentForm(class_id=a.class_id, subject_id=a.subject_id) for a in record.assignments]
        return TeacherForm(name=record.user.name, email=record.user.email,
                           assignments=assignments or [AssignmentForm()])

    def add_assignment(self):
        self.form.assignments.append(AssignmentForm())

    def remove_assignment(self, index: int):
        self.form.assignments = [a for i, a in enumerate(self.form.assignments) if i != index]

    def payload(self, form: TeacherForm) -> dict:
        data = super().payload(form)
        data["assignments"] = [a.model_dump() for a in form.assignments if a.complete]
        return data


class StudentsPage(ListPage[Student, StudentForm]):
    noun = "student"
    form_model = StudentForm

    def __init__(self, service: StudentService, prompter: Prompter):
        super().__init__(service, prompter)
        self.grade_filter = "All"

    def search_fields(self, record: Student):
        return (record.user.name, record.user.email)

    def filtered(self) -> List[Student]:
        return [
            s for s in super().filtered()
            if self.grade_filter == "All" or (s.school_class is not None and s.school_class.name == self.grade_filter)
        ]

    def grade_options(self) -> List[str]:
        names = []
        for s in self.records:
            if s.school_class and s.school_class.name not in names:
                names.append(s.school_class.name)
        return ["All"] + names

    def top_students(self, limit: int = 5) -> List[Student]:
        return sorted(self.records, key=lambda s: s.grades_avg_score or 0, reverse=True)[:limit]

    def open_add(self) -> StudentForm:
        form = super().open_add()
        form.password = "password"
        return form

    def form_from(self, record: Student) -> StudentForm:
        return StudentForm(name=record.user.name, email=record.user.email, class_id=record.class_id)


class ParentsPage(ListPage[Parent, ParentForm]):
    noun = "parent"
    form_model = ParentForm

    def __init__(self, service: ParentService, students: StudentService, prompter: Prompter):
        self.students_service = students
        self.students: List[Student] = []
        super().__init__(service, prompter)

    async def fetch(self) -> List[Parent]:
        parents, students = await asyncio.gather(self.service.get_all(), self.students_service.get_all())
        self.students = students
        return parents

    def search_fields(self, record: Parent):
        return (record.user.name, record.user.email)

    def form_from(self, record: Parent) -> ParentForm:
        return ParentForm(name=record.user.name, email=record.user.email,
                          student_ids=[s.id for s in record.students])

    def toggle_student(self, student_id: int, form: Optional[ParentForm] = None) -> List[int]:
        form = form or self.form
        if student_id in form.student_ids:
            form.student_ids = [i for i in form.student_ids if i != student_id]
        else:
            form.student_ids = form.student_ids + [student_id]
        return form.student_ids


class FeedbackPage(ListPage[FeedbackItem, FeedbackCreate]):
    noun = "feedback"
    form_model = FeedbackCreate

    def __init__(self, service: FeedbackService, prompter: Prompter):
        super().__init__(service, prompter)

    def search_fields(self, record: FeedbackItem):
        return (record.message, record.user.name if record.user else None)

    def unread(self) -> List[FeedbackItem]:
        return [f for f in self.records if not f.is_read]

    async def send(self, message: str, kind: str = "feedback") -> bool:
        async def work():
            self.require(message and message.strip(), "Message cannot be empty")
            await self.service.send(FeedbackCreate(message=message.strip(), type=kind))

        return await self.mutate("feedback_send", "Failed to send message", work, then=self.refresh)

    async def mark_read(self, feedback_id: int) -> bool:
        return await self.mutate("feedback_mark_read", "Failed to update message",
                                 lambda: self.service.mark_read(feedback_id), then=self.refresh)

    async def delete(self, record_id: int) -> bool:
        if not self.prompter.confirm("Are you sure you want to delete this message?"):
            return False
        return await self.mutate("feedback_delete", "Delete failed",
                                 lambda: self.service.delete(record_id), then=self.refresh)


class AnnouncementsPage(Page):
    def __init__(self, announcements: AnnouncementService, academic: AcademicService, prompter: Prompter):
        super().__init__(prompter)
        self.service = announcements
        self.academic = academic
        self.classes: List[SchoolClass] = []
        self.resource: FetchResource[List[Announcement]] = FetchResource(self.fetch, initial=[], name="announcements")
        self.modals = ModalManager(ModalFamily.FORM)
        self.form = AnnouncementForm()

    async def fetch(self) -> List[Announcement]:
        announcements, classes = await asyncio.gather(self.service.get_all(), self.academic.get_classes())
        self.classes = classes
        return announcements

    @property
    def announcements(self) -> List[Announcement]:
        return self.resource.data or []

    async def load(self) -> List[Announcement]:
        await self.resource.refetch()
        return self.announcements

    async def refresh(self) -> List[Announcement]:
        await self.resource.refetch(force=True)
        return self.announcements

    async def close(self):
        await self.resource.close()

    def filtered(self, role: str = "all") -> List[Announcement]:
        if role == "all":
            return list(self.announcements)
        return [a for a in self.announcements if a.target_role == role]

    def open_create(self) -> AnnouncementForm:
        self.modals.open(ModalFamily.FORM)
        self.form = AnnouncementForm()
        return self.form

    async def create(self, form: Optional[AnnouncementForm] = None) -> bool:
        form = form or self.form

        async def work():
            self.require(form.title.strip() and form.message.strip(), "Title and message are required")
            await self.service.create(form)
            self.form = AnnouncementForm()

        return await self.mutate("announcement_create", "Failed to send broadcast", work,
                                 modal=self.modals[ModalFamily.FORM], then=self.refresh)


class AttendancePage(Page):
    """Teacher marks one class for one day; everyone starts out present"""

    def __init__(self, teachers: TeacherService, academic: AcademicService,
                 attendance: AttendanceService, prompter: Prompter):
        super().__init__(prompter)
        self.teachers = teachers
        self.academic = academic
        self.attendance_service = attendance
        self.classes = FetchResource(teachers.get_my_classes, initial=[], name="teacher_classes")
        self.selected_class_id: Optional[int] = None
        self.students = []
        self.attendance: Dict[int, str] = {}
        self.date: date = date.today()
        self.error: Optional[str] = None
        self.submitting = False

    async def load_classes(self) -> List[SchoolClass]:
        await self.classes.refetch()
        return self.classes.data or []

    async def select_class(self, class_id: Optional[int]):
        self.selected_class_id = class_id
        if not class_id:
            self.students = []
            self.attendance = {}
            return self.students

        try:
            school_class = await self.academic.get_class(class_id)
        except (DashboardError, ValidationError) as e:
            self.error = error_message(e)
            log.error("attendance_class_fetch_failed", class_id=class_id, error=self.error, error_type=type(e).__name__)
            self.students = []
            self.attendance = {}
            return self.students

        self.error = None
        self.students = school_class.students
        self.attendance = {s.id: "present" for s in self.students}
        return self.students

    def set_status(self, student_id: int, status: str):
        # Validated against the schema's allowed statuses
        AttendanceRecord(student_id=student_id, status=status)
        self.attendance[student_id] = status

    def counts(self) -> Dict[str, int]:
        totals = {"present": 0, "absent": 0, "late": 0, "excused": 0}
        for status in self.attendance.values():
            totals[status] = totals.get(status, 0) + 1
        return totals

    async def submit(self) -> bool:
        async def work():
            self.require(self.selected_class_id, "Please select a class")
            self.require(self.attendance, "No students to mark")
            submission = AttendanceSubmission(
                class_id=self.selected_class_id,
                date=self.date,
                records=[AttendanceRecord(student_id=sid, status=st) for sid, st in self.attendance.items()],
            )
            await self.attendance_service.submit(submission)

        self.submitting = True
        try:
            ok = await self.mutate("attendance_submit", "Failed to submit attendance", work)
        finally:
            self.submitting = False
        if ok:
            log.info("attendance_submitted", class_id=self.selected_class_id, records=len(self.attendance))
            self.prompter.alert("Attendance submitted successfully!")
        return ok

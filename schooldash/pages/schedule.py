# schooldash/pages/schedule.py
from dataclasses import dataclass
from typing import List, Optional, Tuple

from pydantic import ValidationError

from schooldash.core.errors import DashboardError, error_message
from schooldash.core.logging import log
from schooldash.pages.base import Page
from schooldash.schemas.academic import WEEKDAYS, Grade, ScheduleCreate, ScheduleEntry, Section
from schooldash.services.academic import AcademicService
from schooldash.state.modals import ModalFamily, ModalManager
from schooldash.state.prompt import Prompter


@dataclass(frozen=True)
class TimeSlot:
    start: str
    end: str

    @property
    def label(self) -> str:
        return f"{self.start} - {self.end}"


TIME_SLOTS = [
    TimeSlot("08:00", "09:30"),
    TimeSlot("09:45", "11:15"),
    TimeSlot("11:30", "13:00"),
    TimeSlot("14:00", "15:30"),
    TimeSlot("15:45", "17:15"),
]

# (background, text) per subject; subject_id % len(PALETTE) picks one
PALETTE: List[Tuple[str, str]] = [
    ("#EEF2FF", "#4F46E5"),
    ("#ECFDF5", "#059669"),
    ("#FFFBEB", "#D97706"),
    ("#FEF2F2", "#DC2626"),
    ("#F5F3FF", "#7C3AED"),
]


def subject_color(subject_id: int) -> Tuple[str, str]:
    return PALETTE[subject_id % len(PALETTE)]


@dataclass
class GridCell:
    slot: TimeSlot
    day: str
    entry: Optional[ScheduleEntry] = None

    @property
    def color(self) -> Optional[Tuple[str, str]]:
        return subject_color(self.entry.subject_id) if self.entry else None


class ScheduleView(Page):
    """Weekly timetable for one section, selected by section id"""

    def __init__(self, academic: AcademicService, prompter: Prompter):
        super().__init__(prompter)
        self.api = academic
        self.grades: List[Grade] = []
        self.selected_section_id: Optional[int] = None
        self.entries: List[ScheduleEntry] = []
        self.error: Optional[str] = None
        self.form = ScheduleCreate()
        self.modals = ModalManager(ModalFamily.SCHEDULE, ModalFamily.TIMESLOT)

    @property
    def selected_grade(self) -> Optional[Grade]:
        if self.selected_section_id is None:
            return None
        return next((g for g in self.grades if g.section(self.selected_section_id)), None)

    @property
    def selected_section(self) -> Optional[Section]:
        grade = self.selected_grade
        return grade.section(self.selected_section_id) if grade else None

    def sync(self, grades: List[Grade]) -> bool:
        """Re-derive the selection from a freshly fetched hierarchy; True when it moved"""
        self.grades = list(grades)
        if self.selected_section is not None:
            return False
        previous = self.selected_section_id
        fallback = next((g.sections[0] for g in self.grades if g.sections), None)
        if previous is not None:
            log.info("schedule_selection_fallback", lost_section_id=previous,
                     new_section_id=fallback.id if fallback else None)
        self._select(fallback.id if fallback else None)
        return self.selected_section_id != previous

    def _select(self, section_id: Optional[int]):
        self.selected_section_id = section_id
        self.entries = []
        self.error = None

    async def select_grade(self, grade_key) -> Optional[Section]:
        grade = next((g for g in self.grades if g.key == grade_key), None)
        self._select(grade.sections[0].id if grade and grade.sections else None)
        await self.load_entries()
        return self.selected_section

    async def select_section(self, section_id: int) -> Optional[Section]:
        if not any(g.section(section_id) for g in self.grades):
            log.warning("schedule_unknown_section", section_id=section_id)
            return None
        self._select(section_id)
        await self.load_entries()
        return self.selected_section

    async def load_entries(self) -> List[ScheduleEntry]:
        section = self.selected_section
        if section is None:
            self.entries = []
            return self.entries
        try:
            self.entries = await self.api.get_schedules(section.id)
            self.error = None
        except (DashboardError, ValidationError) as e:
            self.error = error_message(e)
            log.error("schedule_fetch_failed", section_id=section.id, error=self.error, error_type=type(e).__name__)
        return self.entries

    def slot_taken(self, day: str, start_time: str) -> Optional[ScheduleEntry]:
        return next(
            (e for e in self.entries if e.day_of_week == day and e.start_time[:5] == start_time[:5]),
            None,
        )

    def open_add_entry(self, **defaults):
        self.form = ScheduleCreate(**defaults)
        self.modals.open(ModalFamily.SCHEDULE)

    async def add_entry(self, form: Optional[ScheduleCreate] = None) -> bool:
        form = form or self.form

        async def work():
            self.require(form.subject_id, "Please select a subject")
            section = self.selected_section
            self.require(section is not None, "Please select a grade and section")
            self.require(not self.slot_taken(form.day_of_week, form.start_time),
                         f"{form.day_of_week} {form.start_time[:5]} is already taken for this section")
            await self.api.create_schedule(form.model_copy(update={"class_id": section.id}))
            self.form = ScheduleCreate()

        return await self.mutate(
            "schedule_entry_create", "Failed to add schedule entry", work,
            modal=self.modals[ModalFamily.SCHEDULE], then=self.load_entries,
        )

    async def delete_entry(self, schedule_id: int) -> bool:
        if not self.prompter.confirm("Are you sure you want to delete this class entry?"):
            return False
        return await self.mutate(
            "schedule_entry_delete", "Failed to delete schedule entry",
            lambda: self.api.delete_schedule(schedule_id), then=self.load_entries,
        )

    def grid(self) -> List[List[GridCell]]:
        """TIME_SLOTS rows x WEEKDAYS columns"""
        return [[GridCell(slot, day, self.slot_taken(day, slot.start)) for day in WEEKDAYS] for slot in TIME_SLOTS]

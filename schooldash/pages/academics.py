# schooldash/pages/academics.py
"""
Academic hierarchy editor.

Grades own sections and subjects. Every change goes to the backend and is
followed by a full refetch; the local copy is never patched in place.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from schooldash.core.logging import log
from schooldash.pages.base import Page
from schooldash.pages.schedule import ScheduleView
from schooldash.schemas.academic import Grade, Section, Subject
from schooldash.services.academic import AcademicService
from schooldash.state.fetch import FetchResource
from schooldash.state.modals import ModalFamily, ModalManager
from schooldash.state.prompt import Prompter

GradeKey = Union[int, str]


@dataclass(frozen=True)
class GradeItem:
    grade: Grade

    @property
    def label(self) -> str:
        return self.grade.name


@dataclass(frozen=True)
class SectionItem:
    grade: Grade
    section: Section

    @property
    def label(self) -> str:
        return f"section {self.section.name}"


@dataclass(frozen=True)
class SubjectItem:
    grade: Grade
    subject: Subject

    @property
    def label(self) -> str:
        return self.subject.name


HierarchyItem = Union[GradeItem, SectionItem, SubjectItem]


def _unsupported(item) -> TypeError:
    return TypeError(f"Unsupported hierarchy item: {type(item).__name__}")


def filter_grades(grades: List[Grade], term: str) -> List[Grade]:
    """Case-insensitive match on the grade name or any of its section names"""
    needle = (term or "").strip().lower()
    if not needle:
        return list(grades)
    return [
        g for g in grades
        if needle in (g.name or "").lower() or any(needle in (s.name or "").lower() for s in g.sections)
    ]


class AcademicHierarchyEditor(Page):
    def __init__(self, academic: AcademicService, prompter: Prompter):
        super().__init__(prompter)
        self.api = academic
        self.resource: FetchResource[List[Grade]] = FetchResource(
            academic.get_hierarchy, initial=[], name="academic_hierarchy"
        )
        self.expanded_grades: Dict[GradeKey, bool] = {}
        self.expanded_sections: Dict[int, bool] = {}
        self.search = ""
        self.active_grade_key: Optional[GradeKey] = None
        self.modals = ModalManager(
            ModalFamily.GRADE, ModalFamily.SECTION, ModalFamily.SUBJECT, ModalFamily.EDIT, ModalFamily.DELETE,
        )
        self.schedule = ScheduleView(academic, prompter)

    @property
    def grades(self) -> List[Grade]:
        return self.resource.data or []

    @property
    def loading(self) -> bool:
        return self.resource.loading

    @property
    def error(self) -> Optional[str]:
        return self.resource.error

    @property
    def active_grade(self) -> Optional[Grade]:
        return self.find_grade(self.active_grade_key)

    def find_grade(self, key: Optional[GradeKey]) -> Optional[Grade]:
        if key is None:
            return None
        return next((g for g in self.grades if g.key == key), None)

    async def load(self, force: bool = False) -> List[Grade]:
        await self.resource.refetch(force=force)
        if self.resource.error is None and not self.resource.closed:
            self._reset_expansion()
            if self.schedule.sync(self.grades):
                await self.schedule.load_entries()
            log.info("academic_hierarchy_loaded", grades=len(self.grades))
        return self.grades

    async def refresh(self) -> List[Grade]:
        """Reload after a change; never reuses a request sent before it"""
        return await self.load(force=True)

    async def close(self):
        await self.resource.close()

    def _reset_expansion(self):
        self.expanded_grades = {}
        self.expanded_sections = {}
        if not self.grades:
            return
        first = self.grades[0]
        self.expanded_grades[first.key] = True
        if first.sections:
            self.expanded_sections[first.sections[0].id] = True

    def toggle_grade(self, key: GradeKey) -> bool:
        self.expanded_grades[key] = not self.expanded_grades.get(key, False)
        return self.expanded_grades[key]

    def toggle_section(self, section_id: int) -> bool:
        self.expanded_sections[section_id] = not self.expanded_sections.get(section_id, False)
        return self.expanded_sections[section_id]

    def is_grade_expanded(self, key: GradeKey) -> bool:
        return self.expanded_grades.get(key, False)

    def is_section_expanded(self, section_id: int) -> bool:
        return self.expanded_sections.get(section_id, False)

    def filtered_grades(self) -> List[Grade]:
        return filter_grades(self.grades, self.search)

    # Creation

    def open_add_grade(self):
        self.modals.open(ModalFamily.GRADE)

    def open_add_section(self, grade: Grade):
        self.active_grade_key = grade.key
        self.modals.open(ModalFamily.SECTION, grade=grade.name)

    def open_add_subject(self, grade: Grade):
        self.active_grade_key = grade.key
        self.modals.open(ModalFamily.SUBJECT, grade=grade.name)

    async def add_grade(self, name: str) -> bool:
        async def work():
            self.require(name and name.strip(), "Grade name is required")
            await self.api.create_grade(name.strip())

        return await self.mutate("academic_grade_create", "Failed to add grade", work,
                                 modal=self.modals[ModalFamily.GRADE], then=self.refresh)

    async def add_section(self, section_name: str, grade: Optional[Grade] = None) -> bool:
        if grade is not None:
            self.active_grade_key = grade.key

        async def work():
            target = self.active_grade
            self.require(target is not None, "Select a grade first")
            self.require(section_name and section_name.strip(), "Section name is required")
            await self.api.create_section(target.name, section_name.strip())

        return await self.mutate("academic_section_create", "Failed to add section", work,
                                 modal=self.modals[ModalFamily.SECTION], then=self.refresh)

    async def add_subject(self, name: str, code: str, grade: Optional[Grade] = None) -> bool:
        if grade is not None:
            self.active_grade_key = grade.key

        async def work():
            target = self.active_grade
            self.require(target is not None, "Select a grade first")
            self.require(name and name.strip(), "Subject name is required")
            self.require(code and code.strip(), "Subject code is required")
            await self.api.create_grade_subject(target.name, name.strip(), code.strip())

        return await self.mutate("academic_subject_create", "Failed to add subject", work,
                                 modal=self.modals[ModalFamily.SUBJECT], then=self.refresh)

    # Edit / delete share one dialog each, keyed by the item variant

    def open_edit(self, item: HierarchyItem):
        self.modals.open(ModalFamily.EDIT, item=item, value=self._current_value(item))

    def open_delete(self, item: HierarchyItem):
        self.modals.open(ModalFamily.DELETE, item=item)

    @staticmethod
    def _current_value(item: HierarchyItem) -> str:
        if isinstance(item, GradeItem):
            return item.grade.name
        if isinstance(item, SectionItem):
            return item.section.name
        if isinstance(item, SubjectItem):
            return item.subject.name
        raise _unsupported(item)

    def _update_call(self, item: HierarchyItem, value: str):
        if isinstance(item, GradeItem):
            return self.api.update_grade(item.grade.name, value)
        if isinstance(item, SectionItem):
            return self.api.update_section(item.section.id, value)
        if isinstance(item, SubjectItem):
            return self.api.update_subject(item.subject.id, value)
        raise _unsupported(item)

    def _delete_call(self, item: HierarchyItem):
        if isinstance(item, GradeItem):
            return self.api.delete_grade(item.grade.name)
        if isinstance(item, SectionItem):
            return self.api.delete_section(item.section.id)
        if isinstance(item, SubjectItem):
            return self.api.delete_grade_subject(item.grade.name, item.subject.id)
        raise _unsupported(item)

    async def update_item(self, item: HierarchyItem, new_value: str) -> bool:
        # Fail fast on an unknown variant, before any dialog state changes
        self._current_value(item)

        async def work():
            self.require(new_value and new_value.strip(), "A new name is required")
            await self._update_call(item, new_value.strip())

        return await self.mutate(f"academic_{type(item).__name__.lower()}_update", "Update failed", work,
                                 modal=self.modals[ModalFamily.EDIT], then=self.refresh)

    async def delete_item(self, item: HierarchyItem) -> bool:
        self._current_value(item)
        if not self.prompter.confirm(f"Are you sure you want to delete {item.label}?"):
            self.modals.close(ModalFamily.DELETE)
            return False
        return await self.mutate(f"academic_{type(item).__name__.lower()}_delete", "Deletion failed",
                                 lambda: self._delete_call(item),
                                 modal=self.modals[ModalFamily.DELETE], then=self.refresh)

    async def update_grade(self, grade: Grade, new_name: str) -> bool:
        return await self.update_item(GradeItem(grade), new_name)

    async def update_section(self, grade: Grade, section: Section, new_name: str) -> bool:
        return await self.update_item(SectionItem(grade, section), new_name)

    async def update_subject(self, grade: Grade, subject: Subject, new_name: str) -> bool:
        return await self.update_item(SubjectItem(grade, subject), new_name)

    async def delete_grade(self, grade: Grade) -> bool:
        return await self.delete_item(GradeItem(grade))

    async def delete_section(self, grade: Grade, section: Section) -> bool:
        return await self.delete_item(SectionItem(grade, section))

    async def delete_subject(self, grade: Grade, subject: Subject) -> bool:
        return await self.delete_item(SubjectItem(grade, subject))

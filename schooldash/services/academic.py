# schooldash/services/academic.py
from typing import List

from schooldash.core.http import CoreHTTP
from schooldash.core.logging import log
from schooldash.schemas.academic import Grade, ScheduleCreate, ScheduleEntry, SchoolClass, Subject


def _as_list(payload, what: str) -> list:
    # The hierarchy endpoints occasionally answer with an object on error paths
    if isinstance(payload, list):
        return payload
    log.warning("academic_payload_not_a_list", what=what, payload_type=type(payload).__name__)
    return []


class AcademicService:
    """Client for the grade / section / subject / schedule endpoints"""

    def __init__(self, http: CoreHTTP):
        self.http = http

    async def get_hierarchy(self) -> List[Grade]:
        """Fetch the full grade -> sections/subjects -> students tree"""
        data = await self.http.get("/academic-hierarchy")
        return [Grade.model_validate(g) for g in _as_list(data, "hierarchy")]

    # Grades are keyed by name on the backend
    async def create_grade(self, name: str):
        return await self.http.post("/academic/grade", {"name": name})

    async def update_grade(self, old_name: str, new_name: str):
        return await self.http.put("/academic/grade", {"old_name": old_name, "new_name": new_name})

    async def delete_grade(self, name: str):
        return await self.http.delete("/academic/grade", {"name": name})

    async def create_section(self, grade_name: str, section: str):
        return await self.http.post("/academic/section", {"grade_name": grade_name, "section": section})

    async def update_section(self, section_id: int, name: str):
        return await self.http.put(f"/academic/section/{section_id}", {"name": name})

    async def delete_section(self, section_id: int):
        return await self.http.delete(f"/academic/section/{section_id}")

    async def create_grade_subject(self, grade_name: str, subject_name: str, subject_code: str):
        return await self.http.post("/academic/grade-subject", {
            "grade_name": grade_name,
            "subject_name": subject_name,
            "subject_code": subject_code,
        })

    async def update_subject(self, subject_id: int, name: str):
        return await self.http.put(f"/academic/subject/{subject_id}", {"name": name})

    async def delete_grade_subject(self, grade_name: str, subject_id: int):
        return await self.http.delete("/academic/grade-subject", {"grade_name": grade_name, "subject_id": subject_id})

    async def get_schedules(self, class_id: int) -> List[ScheduleEntry]:
        """Weekly entries for one section"""
        data = await self.http.get("/schedules", params={"class_id": class_id})
        return [ScheduleEntry.model_validate(e) for e in _as_list(data, "schedules")]

    async def create_schedule(self, entry: ScheduleCreate):
        return await self.http.post("/schedules", entry.model_dump())

    async def delete_schedule(self, schedule_id: int):
        return await self.http.delete(f"/schedules/{schedule_id}")

    async def get_classes(self) -> List[SchoolClass]:
        data = await self.http.get("/classes")
        return [SchoolClass.model_validate(c) for c in _as_list(data, "classes")]

    async def get_class(self, class_id: int) -> SchoolClass:
        return SchoolClass.model_validate(await self.http.get(f"/classes/{class_id}"))

    async def get_subjects(self) -> List[Subject]:
        data = await self.http.get("/subjects")
        return [Subject.model_validate(s) for s in _as_list(data, "subjects")]

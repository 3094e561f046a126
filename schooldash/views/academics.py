# schooldash/views/academics.py
from typing import Dict, List

from schooldash.pages.academics import AcademicHierarchyEditor
from schooldash.pages.schedule import ScheduleView
from schooldash.schemas.academic import WEEKDAYS, Grade
from schooldash.views.blocks import card, column, count_kpi, empty_state, error_block, kpis, table, text


class AcademicViews:
    """Pure presentation layer for the academic editor"""

    def hierarchy(self, editor: AcademicHierarchyEditor) -> List[Dict]:
        if editor.loading and not editor.grades:
            return [text("Loading academic data...")]
        if editor.error and not editor.grades:
            return [error_block("Data load error", editor.error)]

        grades = editor.filtered_grades()
        blocks = [self.summary(editor.grades)]
        if not grades:
            hint = f"Nothing matches '{editor.search}'" if editor.search else "Add a grade to get started"
            blocks.append(empty_state("No grades found", hint))
            return blocks

        blocks.extend(self.grade_card(editor, g) for g in grades)
        return blocks

    def summary(self, grades: List[Grade]) -> Dict:
        return kpis([
            count_kpi("Grades", len(grades)),
            count_kpi("Sections", sum(len(g.sections) for g in grades), "info"),
            count_kpi("Subjects", sum(len(g.subjects) for g in grades), "success"),
            count_kpi("Students", sum(s.students_count for g in grades for s in g.sections), "warning"),
        ])

    def grade_card(self, editor: AcademicHierarchyEditor, grade: Grade) -> Dict:
        sections = [
            card(
                f"Section {s.name}",
                subtitle=f"{s.students_count} students",
                expanded=editor.is_section_expanded(s.id),
                children=[text(", ".join(st.name for st in s.students) or "No students enrolled")],
                key=s.id,
            )
            for s in grade.sections
        ]
        subjects = [
            table("Subjects", [column("name", "Subject"), column("code", "Code")],
                  [{"name": s.name, "code": s.code} for s in grade.subjects])
        ] if grade.subjects else [empty_state("No subjects yet")]

        return card(
            grade.name,
            subtitle=f"{len(grade.sections)} sections, {len(grade.subjects)} subjects",
            expanded=editor.is_grade_expanded(grade.key),
            children=sections + subjects,
            key=grade.key,
        )

    def schedule(self, view: ScheduleView) -> List[Dict]:
        grade, section = view.selected_grade, view.selected_section
        if section is None:
            return [empty_state("No section selected", "Create a section to build its timetable")]

        blocks = [text(f"**Weekly Class Schedule** - {grade.name}, Section {section.name}")]
        if view.error:
            blocks.append(error_block("Could not load schedule", view.error))

        subjects = {s.id: s.name for s in grade.subjects}
        rows = []
        for cells in view.grid():
            row = {"time": cells[0].slot.label}
            for cell in cells:
                if cell.entry is None:
                    row[cell.day] = ""
                    continue
                name = cell.entry.subject.name if cell.entry.subject else subjects.get(cell.entry.subject_id, f"#{cell.entry.subject_id}")
                row[cell.day] = f"{name} ({cell.entry.room})" if cell.entry.room else name
            rows.append(row)

        columns = [column("time", "Time")] + [column(day, day) for day in WEEKDAYS]
        blocks.append(table("Timetable", columns, rows))
        return blocks

# schooldash/views/people.py
from typing import Dict, List

from schooldash.pages.lists import AnnouncementsPage, FeedbackPage, ParentsPage, StudentsPage, TeachersPage
from schooldash.views.blocks import column, count_kpi, empty_state, error_block, kpis, status_column, table


def _guard(page, noun: str) -> List[Dict]:
    if page.loading and not page.records:
        return [empty_state(f"Loading {noun}...")]
    if page.error and not page.records:
        return [error_block(f"Could not load {noun}", page.error)]
    return []


def teachers(page: TeachersPage) -> List[Dict]:
    blocks = _guard(page, "teachers")
    if blocks:
        return blocks
    rows = [
        {
            "name": t.user.name,
            "email": t.user.email,
            "subjects": ", ".join(t.subject_names()),
            "classes": ", ".join(t.class_labels()),
        }
        for t in page.filtered()
    ]
    return [
        kpis([count_kpi("Teachers", len(page.records))]),
        table("Teachers", [column("name", "Name"), column("email", "Email"),
                           column("subjects", "Subjects"), column("classes", "Classes")], rows),
    ]


def students(page: StudentsPage) -> List[Dict]:
    blocks = _guard(page, "students")
    if blocks:
        return blocks
    rows = [
        {
            "name": s.user.name,
            "email": s.user.email,
            "class": s.school_class.label if s.school_class else "",
            "average": f"{s.grades_avg_score:.1f}" if s.grades_avg_score is not None else "",
        }
        for s in page.filtered()
    ]
    return [
        kpis([count_kpi("Students", len(page.records))]),
        table("Students", [column("name", "Name"), column("email", "Email"),
                           column("class", "Class"), column("average", "Average", "right")], rows,
              filters=page.grade_options()),
    ]


def parents(page: ParentsPage) -> List[Dict]:
    blocks = _guard(page, "parents")
    if blocks:
        return blocks
    rows = [
        {"name": p.user.name, "email": p.user.email, "children": ", ".join(s.user.name for s in p.students)}
        for p in page.filtered()
    ]
    return [table("Parents", [column("name", "Name"), column("email", "Email"), column("children", "Children")], rows)]


def feedback(page: FeedbackPage) -> List[Dict]:
    blocks = _guard(page, "messages")
    if blocks:
        return blocks
    rows = [
        {"from": f.user.name if f.user else "", "type": f.type, "message": f.message,
         "status": "read" if f.is_read else "unread"}
        for f in page.filtered()
    ]
    return [
        kpis([count_kpi("Unread", len(page.unread()), "warning")]),
        table("Feedback & Messages", [column("from", "From"), column("type", "Type"), column("message", "Message"),
                                      status_column("status", "Status", {"read": "success", "unread": "warning"})],
              rows),
    ]


def announcements(page: AnnouncementsPage, role: str = "all") -> List[Dict]:
    items = page.filtered(role)
    if not items:
        return [empty_state("No announcements")]
    rows = [{"title": a.title, "audience": a.target_role, "message": a.message} for a in items]
    return [table("Announcements", [column("title", "Title"), column("audience", "Audience"),
                                    column("message", "Message")], rows)]

# schooldash/navigation.py
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class MenuItem:
    label: str
    path: str


_ROLE_ITEMS = {
    "admin": [
        MenuItem("Teachers", "/teachers"),
        MenuItem("Parents", "/parents"),
        MenuItem("Students", "/students"),
        MenuItem("Academics", "/academy"),
    ],
    "teacher": [
        MenuItem("My Classes", "/classes"),
        MenuItem("Assignments", "/assignments"),
        MenuItem("Exams", "/exams"),
        MenuItem("Attendance", "/attendance"),
    ],
    "student": [
        MenuItem("Assignments", "/assignments"),
        MenuItem("Exams", "/exams"),
    ],
    "parent": [
        MenuItem("Assignments", "/assignments"),
        MenuItem("Exams", "/exams"),
    ],
}

_DASHBOARDS = {
    "admin": "admin_dashboard",
    "teacher": "teacher_dashboard",
    "student": "student_dashboard",
    "parent": "parent_dashboard",
}


def menu_for(role: Optional[str]) -> List[MenuItem]:
    """Sidebar entries for a role; unknown roles only get the shared entries"""
    items = [MenuItem("Dashboard", "/")]
    items += _ROLE_ITEMS.get(role or "", [])
    items += [MenuItem("Announcements", "/announcements"), MenuItem("Feedback", "/feedback")]
    if role == "admin":
        items.append(MenuItem("Financial", "/financial"))
    items.append(MenuItem("Settings", "/settings"))
    return items


def dashboard_for(role: Optional[str]) -> Optional[str]:
    return _DASHBOARDS.get(role or "")

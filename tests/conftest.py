import asyncio
import copy
import itertools
import json
import re

import httpx
import pytest

from schooldash.core.http import CoreHTTP, TokenStore
from schooldash.services.academic import AcademicService


class RecordingPrompter:
    def __init__(self, answer: bool = True):
        self.answer = answer
        self.alerts = []
        self.confirms = []

    def alert(self, message):
        self.alerts.append(message)

    def confirm(self, message):
        self.confirms.append(message)
        return self.answer


def _api_path(request):
    path = request.url.path
    return path[len("/api"):] if path.startswith("/api") else path


def _json(status, payload=None):
    return httpx.Response(status, json=payload) if payload is not None else httpx.Response(status)


class FakeBackend:
    """In-memory stand-in for the school REST API, served through httpx.MockTransport"""

    def __init__(self):
        self._ids = itertools.count(100)
        self.requests = []
        self.seen_auth = []
        self.failures = {}
        self.holds = {}
        self.token = "token-abc"
        self.users = {
            "admin@school.test": {
                "password": "secret",
                "user": {"id": 1, "name": "Ada Admin", "email": "admin@school.test", "role": "admin", "settings": {}},
            },
            "teach@school.test": {
                "password": "secret",
                "user": {"id": 2, "name": "Tom Teacher", "email": "teach@school.test", "role": "teacher", "settings": {}},
            },
        }
        self.current_email = None
        self.grades = [
            {
                "name": "9th",
                "sections": [
                    {"id": 1, "name": "A", "students_count": 2,
                     "students": [{"id": 11, "name": "Ann"}, {"id": 12, "name": "Ben"}]},
                    {"id": 2, "name": "B", "students_count": 0, "students": []},
                ],
                "subjects": [{"id": 3, "name": "Mathematics", "code": "MATH9"},
                             {"id": 4, "name": "Biology", "code": "BIO9"}],
            },
            {
                "name": "11th Grade",
                "sections": [{"id": 5, "name": "Science", "students_count": 1, "students": [{"id": 13, "name": "Cy"}]}],
                "subjects": [],
            },
        ]
        self.schedules = []
        self.collections = {
            "teachers": [
                {"id": 1, "user": {"name": "Grace Hopper", "email": "grace@school.test"},
                 "assignments": [{"class_id": 1, "subject_id": 3, "subject": {"id": 3, "name": "Mathematics"},
                                  "school_class": {"id": 1, "name": "9th", "section": "A"}}]},
                {"id": 2, "user": {"name": "Alan Turing", "email": "alan@school.test"}, "assignments": []},
            ],
            "students": [
                {"id": 11, "user": {"name": "Ann Lee", "email": "ann@school.test"}, "class_id": 1,
                 "school_class": {"id": 1, "name": "9th", "section": "A"}, "grades_avg_score": 81.5},
                {"id": 12, "user": {"name": "Ben Okafor", "email": "ben@school.test"}, "class_id": 1,
                 "school_class": {"id": 1, "name": "9th", "section": "A"}, "grades_avg_score": 92.0},
                {"id": 13, "user": {"name": "Cy Park", "email": "cy@school.test"}, "class_id": 5,
                 "school_class": {"id": 5, "name": "11th Grade", "section": "Science"}, "grades_avg_score": None},
            ],
            "parents": [
                {"id": 21, "user": {"name": "Pat Lee", "email": "pat@school.test"},
                 "students": [{"id": 11, "user": {"name": "Ann Lee", "email": "ann@school.test"}}]},
            ],
            "feedback": [
                {"id": 31, "message": "Projector broken in room 4", "type": "bug", "is_read": False,
                 "user": {"name": "Tom Teacher", "email": "teach@school.test"}},
            ],
        }
        self.announcements = [
            {"id": 41, "title": "Sports day", "message": "Friday", "target_role": "all"},
            {"id": 42, "title": "Staff meeting", "message": "Monday 8am", "target_role": "teacher"},
        ]
        self.classes = [
            {"id": 1, "name": "9th", "section": "A", "students": [{"id": 11, "name": "Ann"}, {"id": 12, "name": "Ben"}]},
            {"id": 5, "name": "11th Grade", "section": "Science", "students": [{"id": 13, "name": "Cy"}]},
        ]
        self.attendance = []

    # helpers used by tests

    def fail(self, method, path, status=500, payload=None):
        """Make the next matching requests fail; status=None simulates a dropped connection"""
        self.failures[(method, path)] = (status, payload)

    def calls(self, method=None, path=None):
        return [(m, p, b) for (m, p, b) in self.requests if (method is None or m == method) and (path is None or p == path)]

    def _grade(self, name):
        return next((g for g in self.grades if g["name"] == name), None)

    def _section(self, section_id):
        for g in self.grades:
            for s in g["sections"]:
                if s["id"] == section_id:
                    return g, s
        return None, None

    def _authorized(self, request):
        return request.headers.get("Authorization") == f"Bearer {self.token}" and self.current_email

    def hold(self, method, path):
        """Answer the next matching request now but deliver it only once the returned event is set"""
        gate = asyncio.Event()
        self.holds[(method, path)] = gate
        return gate

    async def wait_for(self, method, path, count=1):
        while len(self.calls(method, path)) < count:
            await asyncio.sleep(0)

    # transport entry point

    async def handle(self, request: httpx.Request) -> httpx.Response:
        response = self.respond(request)
        gate = self.holds.pop((request.method, _api_path(request)), None)
        if gate is not None:
            await gate.wait()
        return response

    def respond(self, request: httpx.Request) -> httpx.Response:
        path = _api_path(request)
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))
        self.seen_auth.append(request.headers.get("Authorization"))

        if (request.method, path) in self.failures:
            status, payload = self.failures[(request.method, path)]
            if status is None:
                raise httpx.ConnectError("connection refused", request=request)
            return _json(status, payload)

        return self.route(request, request.method, path, body or {})

    def route(self, request, method, path, body):
        if path == "/login" and method == "POST":
            account = self.users.get(body.get("email"))
            if not account or account["password"] != body.get("password"):
                return _json(401, {"message": "Invalid credentials"})
            self.current_email = body["email"]
            return _json(200, {"user": account["user"], "access_token": self.token})
        if path == "/logout" and method == "POST":
            self.current_email = None
            return _json(204)
        if path == "/me" and method == "GET":
            if not self._authorized(request):
                return _json(401, {"message": "Unauthenticated."})
            return _json(200, self.users[self.current_email]["user"])
        if path == "/profile" and method == "PUT":
            if not self._authorized(request):
                return _json(401, {"message": "Unauthenticated."})
            user = self.users[self.current_email]["user"]
            for key in ("name", "email"):
                if key in body:
                    user[key] = body[key]
            if "settings" in body:
                user["settings"] = {**user["settings"], **body["settings"]}
            return _json(200, {"user": user})

        if path == "/academic-hierarchy" and method == "GET":
            return _json(200, copy.deepcopy(self.grades))
        if path == "/academic/grade":
            return self._grade_route(method, body)
        if path == "/academic/section" and method == "POST":
            grade = self._grade(body.get("grade_name"))
            if grade is None:
                return _json(404, {"message": "Grade not found"})
            grade["sections"].append({"id": next(self._ids), "name": body["section"], "students_count": 0, "students": []})
            return _json(201, {"message": "Section created"})
        m = re.fullmatch(r"/academic/section/(\d+)", path)
        if m:
            grade, section = self._section(int(m.group(1)))
            if section is None:
                return _json(404, {"message": "Section not found"})
            if method == "PUT":
                section["name"] = body["name"]
            elif method == "DELETE":
                grade["sections"].remove(section)
            return _json(200, {"message": "ok"})
        if path == "/academic/grade-subject":
            grade = self._grade(body.get("grade_name"))
            if grade is None:
                return _json(404, {"message": "Grade not found"})
            if method == "POST":
                grade["subjects"].append({"id": next(self._ids), "name": body["subject_name"], "code": body["subject_code"]})
                return _json(201, {"message": "Subject added"})
            if method == "DELETE":
                grade["subjects"] = [s for s in grade["subjects"] if s["id"] != body.get("subject_id")]
                return _json(200, {"message": "Subject removed"})
        m = re.fullmatch(r"/academic/subject/(\d+)", path)
        if m and method == "PUT":
            for g in self.grades:
                for s in g["subjects"]:
                    if s["id"] == int(m.group(1)):
                        s["name"] = body["name"]
                        return _json(200, s)
            return _json(404, {"message": "Subject not found"})

        if path == "/schedules":
            if method == "GET":
                class_id = int(request.url.params["class_id"])
                return _json(200, [e for e in self.schedules if e["class_id"] == class_id])
            if method == "POST":
                entry = {"id": next(self._ids), **body}
                self.schedules.append(entry)
                return _json(201, entry)
        m = re.fullmatch(r"/schedules/(\d+)", path)
        if m and method == "DELETE":
            self.schedules = [e for e in self.schedules if e["id"] != int(m.group(1))]
            return _json(204)

        if path == "/announcements":
            if method == "GET":
                return _json(200, self.announcements)
            self.announcements.append({"id": next(self._ids), **body})
            return _json(201, self.announcements[-1])
        if path in ("/classes", "/teacher/classes") and method == "GET":
            return _json(200, [{k: v for k, v in c.items() if k != "students"} for c in self.classes])
        m = re.fullmatch(r"/classes/(\d+)", path)
        if m and method == "GET":
            found = next((c for c in self.classes if c["id"] == int(m.group(1))), None)
            return _json(200, found) if found else _json(404, {"message": "Class not found"})
        if path == "/attendance" and method == "POST":
            self.attendance.append(body)
            return _json(201, {"message": "Attendance saved"})
        if path == "/analytics/admin/overview" and method == "GET":
            return _json(200, {"total_students": 3, "total_teachers": 2, "attendance_rate": 94.5, "recent": []})

        m = re.fullmatch(r"/(teachers|students|parents|feedback)(?:/(\d+))?", path)
        if m:
            return self._collection_route(m.group(1), int(m.group(2)) if m.group(2) else None, method, body)

        return _json(404, {"message": f"No route for {method} {path}"})

    def _grade_route(self, method, body):
        if method == "POST":
            if self._grade(body.get("name")):
                return _json(422, {"message": "The grade has already been taken."})
            self.grades.append({"name": body["name"], "sections": [], "subjects": []})
            return _json(201, {"message": "Grade created"})
        if method == "PUT":
            grade = self._grade(body.get("old_name"))
            if grade is None:
                return _json(404, {"message": "Grade not found"})
            grade["name"] = body["new_name"]
            return _json(200, {"message": "Grade renamed"})
        if method == "DELETE":
            grade = self._grade(body.get("name"))
            if grade is None:
                return _json(404, {"message": "Grade not found"})
            self.grades.remove(grade)
            return _json(200, {"message": "Grade deleted"})
        return _json(405, {"message": "Method not allowed"})

    def _collection_route(self, name, record_id, method, body):
        records = self.collections[name]
        if record_id is None:
            if method == "GET":
                return _json(200, records)
            if method == "POST":
                record = {"id": next(self._ids), "user": {"name": body.get("name", ""), "email": body.get("email", "")}}
                record.update({k: v for k, v in body.items() if k not in ("name", "email", "password")})
                records.append(record)
                return _json(201, record)
        record = next((r for r in records if r["id"] == record_id), None)
        if record is None:
            return _json(404, {"message": "Record not found"})
        if method == "GET":
            return _json(200, record)
        if method == "PUT":
            for key in ("name", "email"):
                if key in body:
                    record["user"][key] = body[key]
            record.update({k: v for k, v in body.items() if k not in ("name", "email", "password")})
            return _json(200, record)
        if method == "DELETE":
            records.remove(record)
            return _json(204)
        return _json(405, {"message": "Method not allowed"})


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def tokens():
    return TokenStore()


@pytest.fixture
async def http(backend, tokens):
    client = CoreHTTP(base_url="http://school.test/api", tokens=tokens, transport=httpx.MockTransport(backend.handle))
    yield client
    await client.close()


@pytest.fixture
def academic(http):
    return AcademicService(http)


@pytest.fixture
def prompter():
    return RecordingPrompter()


@pytest.fixture
async def editor(academic, prompter):
    from schooldash.pages.academics import AcademicHierarchyEditor

    page = AcademicHierarchyEditor(academic, prompter)
    await page.load()
    yield page
    await page.close()

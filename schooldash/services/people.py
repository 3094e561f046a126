# schooldash/services/people.py
from typing import Generic, List, Type, TypeVar

from pydantic import BaseModel

from schooldash.core.http import CoreHTTP
from schooldash.schemas.academic import SchoolClass
from schooldash.schemas.people import Parent, Student, Teacher

RecordT = TypeVar("RecordT", bound=BaseModel)


class ResourceService(Generic[RecordT]):
    """Plain CRUD over one flat backend collection"""

    path: str = ""
    model: Type[BaseModel]

    def __init__(self, http: CoreHTTP):
        self.http = http

    async def get_all(self) -> List[RecordT]:
        data = await self.http.get(self.path)
        return [self.model.model_validate(r) for r in (data if isinstance(data, list) else [])]

    async def get_one(self, record_id: int) -> RecordT:
        return self.model.model_validate(await self.http.get(f"{self.path}/{record_id}"))

    async def create(self, data: dict):
        return await self.http.post(self.path, data)

    async def update(self, record_id: int, data: dict):
        return await self.http.put(f"{self.path}/{record_id}", data)

    async def delete(self, record_id: int):
        return await self.http.delete(f"{self.path}/{record_id}")


class TeacherService(ResourceService[Teacher]):
    path = "/teachers"
    model = Teacher

    async def get_my_classes(self) -> List[SchoolClass]:
        """Classes taught by the signed-in teacher"""
        data = await self.http.get("/teacher/classes")
        return [SchoolClass.model_validate(c) for c in (data if isinstance(data, list) else [])]


class StudentService(ResourceService[Student]):
    path = "/students"
    model = Student


class ParentService(ResourceService[Parent]):
    path = "/parents"
    model = Parent

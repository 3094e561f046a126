# schooldash/state/modals.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from schooldash.core.errors import ModalBusyError


class ModalFamily(str, Enum):
    GRADE = "grade"
    SECTION = "section"
    SUBJECT = "subject"
    EDIT = "edit"
    DELETE = "delete"
    SCHEDULE = "schedule"
    TIMESLOT = "timeslot"
    FORM = "form"


class ModalPhase(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"


@dataclass
class Modal:
    """closed -> open(params) -> submitting -> closed | open with error"""
    family: ModalFamily
    phase: ModalPhase = ModalPhase.CLOSED
    params: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.phase != ModalPhase.CLOSED

    @property
    def submitting(self) -> bool:
        return self.phase == ModalPhase.SUBMITTING

    def open(self, **params) -> "Modal":
        if self.is_open:
            raise ModalBusyError(f"The {self.family.value} dialog is already open")
        self.phase = ModalPhase.OPEN
        self.params = dict(params)
        self.error = None
        return self

    def begin_submit(self):
        if self.phase != ModalPhase.OPEN:
            raise ModalBusyError(f"The {self.family.value} dialog is not ready to submit")
        self.phase = ModalPhase.SUBMITTING
        self.error = None

    def succeed(self):
        self.close()

    def fail(self, message: str):
        self.phase = ModalPhase.OPEN
        self.error = message

    def close(self):
        self.phase = ModalPhase.CLOSED
        self.params = {}
        self.error = None


class ModalManager:
    """One modal per family; a family can only be open once at a time"""

    def __init__(self, *families: ModalFamily):
        self._modals = {f: Modal(f) for f in (families or tuple(ModalFamily))}

    def __getitem__(self, family: ModalFamily) -> Modal:
        return self._modals[family]

    def open(self, family: ModalFamily, **params) -> Modal:
        return self._modals[family].open(**params)

    def close(self, family: ModalFamily):
        self._modals[family].close()

    def open_families(self) -> list:
        return [f for f, m in self._modals.items() if m.is_open]

    def close_all(self):
        for modal in self._modals.values():
            modal.close()

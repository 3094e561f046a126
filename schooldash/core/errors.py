# schooldash/core/errors.py
from typing import Any, Optional

from pydantic import ValidationError

NETWORK_MESSAGE = "Cannot reach the server. Check your connection and try again."
FALLBACK_MESSAGE = "Something went wrong"


class DashboardError(Exception):
    """Base class for every failure surfaced to the dashboard user"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(DashboardError):
    """The request never produced a response"""

    def __init__(self, message: str = NETWORK_MESSAGE):
        super().__init__(message)


class ApiError(DashboardError):
    """The backend answered with an error status"""

    def __init__(self, status_code: int, payload: Any = None):
        self.status_code = status_code
        self.payload = payload
        super().__init__(self._extract_message(status_code, payload))

    @staticmethod
    def _extract_message(status_code: int, payload: Any) -> str:
        if isinstance(payload, dict):
            for key in ("message", "detail"):
                value = payload.get(key)
                if isinstance(value, str) and value.strip():
                    return value
        return f"Request failed with status {status_code}"

    @property
    def backend_message(self) -> Optional[str]:
        if isinstance(self.payload, dict) and isinstance(self.payload.get("message"), str):
            return self.payload["message"] or None
        return None


class ValidationFailed(DashboardError):
    """Input rejected locally, before any request was made"""


class ModalBusyError(DashboardError):
    """A modal of the same family is already open"""


def error_message(exc: BaseException, fallback: str = FALLBACK_MESSAGE) -> str:
    """Human-readable text for an exception: backend message, then the error's own text, then fallback"""
    if isinstance(exc, ValidationError):
        # Malformed backend payload; the pydantic report is not for end users
        return fallback
    if isinstance(exc, ApiError) and exc.backend_message:
        return exc.backend_message
    if isinstance(exc, DashboardError) and exc.message:
        return exc.message
    text = str(exc).strip()
    return text or fallback

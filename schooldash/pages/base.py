# schooldash/pages/base.py
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from schooldash.core.errors import DashboardError, ValidationFailed, error_message
from schooldash.core.logging import log
from schooldash.state.modals import Modal, ModalPhase
from schooldash.state.prompt import Prompter


class Page:
    """Shared plumbing for page controllers: blocking alerts and the mutate-then-refetch cycle"""

    def __init__(self, prompter: Prompter):
        self.prompter = prompter

    @staticmethod
    def require(condition, message: str):
        if not condition:
            raise ValidationFailed(message)

    async def mutate(
        self,
        event: str,
        failure: str,
        work: Callable[[], Awaitable[object]],
        modal: Optional[Modal] = None,
        then: Optional[Callable[[], Awaitable[object]]] = None,
    ) -> bool:
        """
        Run one backend mutation.

        Success closes the modal (if it was open) and awaits `then`, normally a
        full refetch. Failure is logged, alerted and left on the modal; the
        page snapshot is not touched and nothing is refetched.
        """
        if modal is not None:
            if modal.submitting:
                log.info(f"{event}_ignored", reason="already submitting")
                return False
            if modal.phase == ModalPhase.OPEN:
                modal.begin_submit()
            else:
                modal = None

        try:
            await work()
        except ValidationFailed as e:
            log.info(f"{event}_rejected", reason=e.message)
            if modal is not None:
                modal.fail(e.message)
            self.prompter.alert(e.message)
            return False
        except (DashboardError, PydanticValidationError) as e:
            message = error_message(e)
            log.error(f"{event}_failed", error=message, error_type=type(e).__name__)
            if modal is not None:
                modal.fail(message)
            self.prompter.alert(f"{failure}: {message}")
            return False

        log.info(f"{event}_succeeded")
        if modal is not None:
            modal.succeed()
        if then is not None:
            await then()
        return True

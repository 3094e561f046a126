# schooldash/state/prompt.py
import sys
from typing import Callable, Protocol, TextIO


class Prompter(Protocol):
    """Blocking user-facing surface: alerts and yes/no confirmations"""

    def alert(self, message: str) -> None: ...

    def confirm(self, message: str) -> bool: ...


class ConsolePrompter:
    def __init__(self, stream: TextIO | None = None, ask: Callable[[str], str] = input):
        self.stream = stream or sys.stdout
        self.ask = ask

    def alert(self, message: str) -> None:
        print(f"! {message}", file=self.stream)

    def confirm(self, message: str) -> bool:
        answer = self.ask(f"{message} [y/N] ")
        return answer.strip().lower() in ("y", "yes")

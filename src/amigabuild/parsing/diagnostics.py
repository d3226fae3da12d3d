from dataclasses import dataclass
from enum import Enum
from typing import List, Protocol


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"

    @classmethod
    def from_label(cls, label: str) -> "Severity":
        """
        Maps a tool severity label to a store severity.
        Anything that is not a warning ('message', custom labels) lands with the errors.
        """
        if label == cls.WARNING.value:
            return cls.WARNING
        return cls.ERROR


@dataclass(frozen=True)
class CheckResult:
    """
    One diagnostic parsed from tool output.
    line <= 0 means 'no specific line', col == 0 means 'derive from text'.
    An empty file means the document currently being processed.
    """
    file: str = ""
    line: int = -1
    col: int = 0
    msg: str = ""
    severity: str = "error"

    @property
    def is_global(self) -> bool:
        return self.line <= 0


class OutputParser(Protocol):
    """Turns the primary output channel of a tool into diagnostics."""

    def parse(self, text: str) -> List[CheckResult]:
        ...

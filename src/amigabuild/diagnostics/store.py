import threading
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple
from ..parsing.diagnostics import Severity


@dataclass(frozen=True)
class PositionedMarker:
    """
    A diagnostic resolved for rendering: 1-based line, half-open
    0-based column range [start_column, end_column).
    """
    file: str
    line: int
    start_column: int
    end_column: int
    msg: str
    severity: Severity


class DiagnosticCollection:
    """Markers of one severity, keyed by canonical file path."""

    def __init__(self, severity: Severity):
        self.severity = severity
        self._markers: Dict[str, List[PositionedMarker]] = {}

    def get(self, file: str) -> Optional[List[PositionedMarker]]:
        markers = self._markers.get(file)
        return list(markers) if markers is not None else None

    def set(self, file: str, markers: Optional[List[PositionedMarker]]):
        """Replaces the markers of a file; nothing or an empty list removes the entry."""
        if markers:
            self._markers[file] = list(markers)
        else:
            self._markers.pop(file, None)

    def delete(self, file: str):
        self._markers.pop(file, None)

    def clear(self):
        self._markers.clear()

    def files(self) -> List[str]:
        return list(self._markers.keys())

    def items(self) -> Iterator[Tuple[str, List[PositionedMarker]]]:
        for file, markers in list(self._markers.items()):
            yield file, list(markers)

    def __contains__(self, file: str) -> bool:
        return file in self._markers

    def __len__(self) -> int:
        return sum(len(markers) for markers in self._markers.values())


class DiagnosticStores:
    """
    The error and warning collections shared by every build of a session.
    Create one per engine and hand it to the reconciler.
    """
    def __init__(self):
        self.errors = DiagnosticCollection(Severity.ERROR)
        self.warnings = DiagnosticCollection(Severity.WARNING)
        # Held for a whole reconciliation pass
        self.lock = threading.RLock()

    def for_severity(self, severity: Severity) -> DiagnosticCollection:
        if severity == Severity.WARNING:
            return self.warnings
        return self.errors

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def reset(self):
        with self.lock:
            self.errors.clear()
            self.warnings.clear()
